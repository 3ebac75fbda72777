#!/usr/bin/env python3
"""
feedintel: security news feed ingestion, normalization and aggregation.
"""

__version__ = "1.0.0"
