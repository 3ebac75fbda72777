#!/usr/bin/env python3
"""
Article data model.

Represents one normalized feed item, whatever dialect it came from.
"""

from datetime import datetime
from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, field

import pytz
from dateutil import parser as date_parser


def parse_pub_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a feed date string into an aware datetime, or None if unparsable."""
    if not value:
        return None
    try:
        dt = date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return None
    if dt.tzinfo is None:
        # Assume UTC if no timezone info
        dt = pytz.utc.localize(dt)
    return dt


@dataclass(frozen=True)
class Enclosure:
    """Media attached to an item."""
    link: Optional[str] = None
    type: Optional[str] = None
    length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'link': self.link, 'type': self.type, 'length': self.length}


@dataclass(frozen=True)
class Article:
    """
    A single normalized feed item.

    ``guid`` is never empty for articles produced by the item normalizer;
    ``link`` is the deduplication key inside an aggregated working set.
    """
    title: str
    link: str
    guid: str
    pub_date: str = ""
    author: str = ""
    thumbnail: str = ""
    description: str = ""
    content: str = ""
    enclosure: Enclosure = field(default_factory=Enclosure)
    categories: Tuple[str, ...] = ()

    @property
    def published(self) -> Optional[datetime]:
        """Publish date parsed from ``pub_date``."""
        return parse_pub_date(self.pub_date)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'title': self.title,
            'pubDate': self.pub_date,
            'link': self.link,
            'guid': self.guid,
            'author': self.author,
            'thumbnail': self.thumbnail,
            'description': self.description,
            'content': self.content,
            'enclosure': self.enclosure.to_dict(),
            'categories': list(self.categories)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """Create Article from dictionary."""
        enclosure = data.get('enclosure') or {}
        return cls(
            title=data.get('title', ''),
            link=data.get('link', ''),
            guid=data.get('guid', ''),
            pub_date=data.get('pubDate', ''),
            author=data.get('author', ''),
            thumbnail=data.get('thumbnail', ''),
            description=data.get('description', ''),
            content=data.get('content', ''),
            enclosure=Enclosure(
                link=enclosure.get('link'),
                type=enclosure.get('type'),
                length=enclosure.get('length')
            ),
            categories=tuple(data.get('categories') or ())
        )

    def __repr__(self):
        return f"Article(title='{self.title[:50]}...', link='{self.link}', pub_date='{self.pub_date}')"
