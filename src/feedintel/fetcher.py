#!/usr/bin/env python3
"""
Source fetcher: one retrieval through the transport, then one parse.
"""

import logging

from .models.feed import FeedResult
from .parsing.feed_parser import FeedParser
from .transport import Transport

logger = logging.getLogger(__name__)


class SourceFetcher:
    """Fetches and parses a single feed."""

    def __init__(self, transport: Transport, parser: FeedParser):
        self.transport = transport
        self.parser = parser

    async def fetch(self, url: str) -> FeedResult:
        """
        Fetch and parse the feed at ``url``.

        Raises:
            TransportError: If the transport reports a failure
            ParseError: If the body is not a valid feed
        """
        logger.info(f"Fetching feed from: {url}")
        body = await self.transport.fetch_text(url)
        result = self.parser.parse(body, url)
        logger.info(f"Parsed {len(result.items)} items from {url}")
        return result
