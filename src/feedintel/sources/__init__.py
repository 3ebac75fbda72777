#!/usr/bin/env python3
"""
Feed source catalog and registry.
"""

from .catalog import DEFAULT_SOURCES, load_sources
from .registry import SourceRegistry

__all__ = ['DEFAULT_SOURCES', 'load_sources', 'SourceRegistry']
