#!/usr/bin/env python3
"""
Item normalizer.

Turns one parsed item/entry into an ``Article``. Every field walks the
dialect's fallback chain; absent fields degrade to empty values and the
normalizer never raises.
"""

import re
from typing import Any, List, Mapping, Optional

from ..models.article import Article, Enclosure
from .dialects import Dialect, FieldTable, table_for
from .resolver import child_attr, child_nodes, child_text, first_text


# Regex tag removal is enough here: descriptions are display-only.
TAG_PATTERN = re.compile(r'<[^>]*>?', re.MULTILINE)

DESCRIPTION_LENGTH = 250


def strip_tags(text: str) -> str:
    """Remove markup tags from text."""
    if not text:
        return ''
    return TAG_PATTERN.sub('', text)


def _parse_length(value: str) -> Optional[int]:
    try:
        length = int(float(value))
    except (TypeError, ValueError):
        return None
    return length or None


class ItemNormalizer:
    """Normalizes parsed feed items into Articles."""

    def __init__(self, description_length: int = DESCRIPTION_LENGTH):
        self.description_length = description_length

    def normalize(self, raw_item: Any, index: int, feed_url: str,
                  dialect: Dialect = Dialect.RSS2) -> Article:
        """
        Normalize one item.

        Args:
            raw_item: Parsed item mapping (feedparser entry)
            index: Position of the item in its feed, used for the guid fallback
            feed_url: URL of the feed the item came from
            dialect: Dialect detected for the whole document

        Returns:
            Article with a non-empty guid
        """
        item: Mapping = raw_item if isinstance(raw_item, Mapping) else {}
        table = table_for(dialect)

        link = self._link(item)
        content = self._content(item, table)

        return Article(
            title=child_text(item, 'title'),
            link=link,
            guid=first_text(item, table.guid) or link or f"{feed_url}#{index}",
            pub_date=first_text(item, table.pub_date),
            author=first_text(item, table.author),
            thumbnail=self._thumbnail(item, table),
            description=self._description(item, table, content),
            content=content,
            enclosure=self._enclosure(item, table),
            categories=tuple(self._categories(item, table)),
        )

    @staticmethod
    def _link(item: Mapping) -> str:
        link = child_text(item, 'link')
        if link:
            return link
        # Attribute-style links; enclosures share the ``links`` list and never count
        fallback = ''
        for node in child_nodes(item, 'links'):
            href = (node.get('href') or '').strip()
            rel = node.get('rel', 'alternate')
            if not href or rel == 'enclosure':
                continue
            if rel == 'alternate':
                return href
            fallback = fallback or href
        return fallback

    @staticmethod
    def _content(item: Mapping, table: FieldTable) -> str:
        return first_text(item, table.content)

    def _description(self, item: Mapping, table: FieldTable, content: str) -> str:
        summary = first_text(item, table.summary)
        # feedparser copies content:encoded into ``summary`` without a
        # ``summary_detail`` when the item has no description of its own
        if summary and 'summary_detail' not in item and summary == child_text(item, 'content'):
            summary = ''
        if summary:
            return summary
        return strip_tags(content)[:self.description_length]

    @staticmethod
    def _thumbnail(item: Mapping, table: FieldTable) -> str:
        for child, attr in table.thumbnail:
            value = child_attr(item, child, attr)
            if value:
                return value
        return ''

    @staticmethod
    def _enclosure(item: Mapping, table: FieldTable) -> Enclosure:
        nodes = child_nodes(item, table.enclosure)
        if not nodes:
            return Enclosure()
        node = nodes[0]
        return Enclosure(
            link=(node.get('href') or node.get('url') or None),
            type=(node.get('type') or None),
            length=_parse_length(node.get('length')),
        )

    @staticmethod
    def _categories(item: Mapping, table: FieldTable) -> List[str]:
        categories = []
        for tag in child_nodes(item, table.categories):
            value = (tag.get('term') or '').strip() or (tag.get('label') or '').strip()
            if value:
                categories.append(value)
        return categories
