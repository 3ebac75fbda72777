#!/usr/bin/env python3
"""
Feed parser.

Parses raw RSS/Atom/RDF text with feedparser, detects the dialect once,
extracts channel metadata and normalizes a bounded window of items.
"""

import io
import logging
import xml.sax
from typing import Optional, Union

import feedparser

from ..exceptions import ParseError
from ..models.feed import FeedInfo, FeedResult
from .dialects import Dialect, detect_dialect, table_for
from .normalizer import ItemNormalizer
from .resolver import child_text, first_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 15


class FeedParser:
    """Parses one feed document into a FeedResult."""

    def __init__(self, max_items: int = DEFAULT_MAX_ITEMS, normalizer: Optional[ItemNormalizer] = None):
        """
        Initialize feed parser.

        Args:
            max_items: Items kept per feed, in feed order
            normalizer: Item normalizer (default: ItemNormalizer())
        """
        self.max_items = max_items
        self.normalizer = normalizer or ItemNormalizer()

    def parse(self, raw: Union[bytes, str], source_url: str) -> FeedResult:
        """
        Parse raw feed text.

        Args:
            raw: Feed document as bytes or text
            source_url: URL the document was retrieved from

        Returns:
            FeedResult with status 'ok'

        Raises:
            ParseError: If the text is not well-formed XML or has no feed root
        """
        if isinstance(raw, str):
            raw = raw.encode('utf-8')

        parsed = feedparser.parse(io.BytesIO(raw or b''))

        if parsed.get('bozo'):
            exc = parsed.get('bozo_exception')
            if isinstance(exc, xml.sax.SAXException):
                logger.error(f"XML parse error for {source_url}: {exc}")
                raise ParseError(source_url, f"the feed is not well-formed XML ({exc})")
            logger.warning(f"Feed parsing warning for {source_url}: {exc}")

        dialect = detect_dialect(parsed.get('version'))
        if dialect is None:
            raise ParseError(source_url, "could not find a <channel> or <feed> element")

        feed_info = self._feed_info(parsed.get('feed') or {}, source_url, dialect)

        entries = parsed.get('entries') or []
        logger.debug(f"Found {len(entries)} entries in {source_url} ({dialect.value})")

        items = tuple(
            self.normalizer.normalize(entry, index, source_url, dialect)
            for index, entry in enumerate(entries[:self.max_items])
        )

        return FeedResult(status='ok', feed=feed_info, items=items)

    @staticmethod
    def _feed_info(channel, source_url: str, dialect: Dialect) -> FeedInfo:
        table = table_for(dialect)
        return FeedInfo(
            url=source_url,
            title=child_text(channel, 'title'),
            link=child_text(channel, 'link'),
            description=first_text(channel, table.feed_description),
            author=first_text(channel, table.feed_author),
            image=first_text(channel, table.feed_image),
        )
