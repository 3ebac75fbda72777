#!/usr/bin/env python3
"""
Feed parsing: dialect detection, item normalization and feed metadata.
"""

from .dialects import Dialect, detect_dialect
from .feed_parser import FeedParser
from .normalizer import ItemNormalizer, strip_tags

__all__ = ['Dialect', 'detect_dialect', 'FeedParser', 'ItemNormalizer', 'strip_tags']
