#!/usr/bin/env python3
"""
Core data models for feed ingestion and aggregation.
"""

from .article import Article, Enclosure, parse_pub_date
from .feed import AggregationResult, FeedInfo, FeedResult
from .source import ALL_SOURCES, Source

__all__ = [
    'Article', 'Enclosure', 'parse_pub_date',
    'AggregationResult', 'FeedInfo', 'FeedResult',
    'ALL_SOURCES', 'Source',
]
