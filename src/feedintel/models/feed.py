#!/usr/bin/env python3
"""
Feed-level results produced by the parser and the aggregator.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from .article import Article
from .source import Source


@dataclass(frozen=True)
class FeedInfo:
    """Channel (RSS) or feed (Atom) metadata."""
    url: str
    title: str = ""
    link: str = ""
    description: str = ""
    author: str = ""
    image: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'title': self.title,
            'link': self.link,
            'description': self.description,
            'author': self.author,
            'image': self.image
        }


@dataclass(frozen=True)
class FeedResult:
    """Outcome of one fetch attempt. A value, never mutated after creation."""
    status: str
    feed: FeedInfo
    items: Tuple[Article, ...] = ()
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == 'ok'

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'status': self.status,
            'feed': self.feed.to_dict(),
            'items': [item.to_dict() for item in self.items]
        }
        if self.message is not None:
            result['message'] = self.message
        return result


@dataclass(frozen=True)
class AggregationResult:
    """Merged working set plus per-source outcome counts."""
    articles: Tuple[Article, ...] = ()
    succeeded: int = 0
    total: int = 0
    failures: Tuple[Tuple[Source, str], ...] = field(default_factory=tuple)

    @property
    def all_failed(self) -> bool:
        """True when sources were requested but none returned data."""
        return self.total > 0 and self.succeeded == 0

    def summary(self) -> str:
        return f"{self.succeeded} of {self.total} sources returned data"
