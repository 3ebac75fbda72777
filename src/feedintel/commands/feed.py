#!/usr/bin/env python3
"""
Feed command endpoints for fetching one source or aggregating many.
"""

import asyncio
import json
import logging
from argparse import Namespace

from .base import BaseCommand
from ..exceptions import SourceError
from ..formatters import (
    articles_to_dict, format_aggregation_summary, format_articles, format_feed_header
)
from ..orchestrator import SelectionOrchestrator

logger = logging.getLogger(__name__)


class FeedCommand(BaseCommand):
    """Fetch and aggregate feeds."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute feed subcommand."""
        try:
            if subcommand == "fetch":
                return self.fetch(args)
            elif subcommand == "aggregate":
                return self.aggregate(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"feed {subcommand}")

    def fetch(self, args: Namespace) -> int:
        """Fetch a single source, or every source for the all-sources entry."""
        source = self.source_registry.get(args.source)
        if source.is_sentinel:
            return asyncio.run(self._aggregate(args, sources=None))
        return asyncio.run(self._fetch(args, source))

    def aggregate(self, args: Namespace) -> int:
        """Aggregate all sources, or a named subset of them."""
        names = getattr(args, 'sources', None) or []
        sources = [self.source_registry.get(name) for name in names] or None
        return asyncio.run(self._aggregate(args, sources=sources))

    async def _fetch(self, args: Namespace, source) -> int:
        async with self.create_transport() as transport:
            fetcher, _ = self.build_pipeline(transport)
            try:
                result = await fetcher.fetch(source.url)
            except SourceError as e:
                self.logger.error(f"Failed to load feed from {source.name}: {e}")
                return 1

        items = result.items
        limit = getattr(args, 'limit', None)
        if limit:
            items = items[:limit]

        if getattr(args, 'json', False):
            payload = result.to_dict()
            payload['items'] = articles_to_dict(items)
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return 0

        print(format_feed_header(result.feed))
        print(format_articles(items), end="")
        return 0

    async def _aggregate(self, args: Namespace, sources=None) -> int:
        registry = self.source_registry

        async with self.create_transport() as transport:
            fetcher, aggregator = self.build_pipeline(transport)
            if sources is None:
                orchestrator = SelectionOrchestrator(
                    registry, fetcher, aggregator, config=self.config.aggregation
                )
                result = await orchestrator.fetch_all_sources()
                error = orchestrator.state.error
            else:
                result = await aggregator.aggregate_subset(sources)
                error = f"Failed to load selected feeds: {result.summary()}" if result.all_failed else None

        if getattr(args, 'json', False):
            payload = {
                'succeeded': result.succeeded,
                'total': result.total,
                'failures': [{'source': s.name, 'message': m} for s, m in result.failures],
                'items': articles_to_dict(result.articles)
            }
            print(json.dumps(payload, indent=2, ensure_ascii=False))
        else:
            print(format_aggregation_summary(result))
            print(format_articles(result.articles), end="")

        if error:
            self.logger.error(error)
            return 1
        return 0
