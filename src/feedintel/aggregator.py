#!/usr/bin/env python3
"""
Multi-source aggregation.

Fetches several feeds concurrently, tolerates individual failures, merges
the surviving items in source order, deduplicates on link and sorts the
result newest first.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import pytz

from .config import AggregationConfig, FeedConfig
from .fetcher import SourceFetcher
from .models.article import Article
from .models.feed import AggregationResult, FeedResult
from .models.source import Source

logger = logging.getLogger(__name__)

_UNDATED = pytz.utc.localize(datetime.min)


def _recency_key(article: Article):
    published = article.published
    if published is None:
        return (0, _UNDATED)
    return (1, published)


def sort_by_recency(articles: Iterable[Article]) -> List[Article]:
    """
    Sort articles newest first.

    Articles without a parsable publish date go to the end, keeping their
    relative order. The sort is stable for equal dates.
    """
    return sorted(articles, key=_recency_key, reverse=True)


def merge_unique(results: Iterable[FeedResult]) -> List[Article]:
    """Concatenate items from ok results, keeping the first article per link."""
    seen = set()
    merged = []
    for result in results:
        if not result.ok:
            continue
        for article in result.items:
            if not article.link or article.link in seen:
                continue
            seen.add(article.link)
            merged.append(article)
    return merged


class Aggregator:
    """Builds working sets from several sources."""

    def __init__(self, fetcher: SourceFetcher, feed_config: Optional[FeedConfig] = None,
                 aggregation_config: Optional[AggregationConfig] = None):
        self.fetcher = fetcher
        self.feed_config = feed_config or FeedConfig()
        self.aggregation_config = aggregation_config or AggregationConfig()

    async def aggregate_all(self, sources: Sequence[Source]) -> AggregationResult:
        """Aggregate every given source, capped at ``max_all_articles``."""
        return await self._aggregate(sources, limit=self.aggregation_config.max_all_articles)

    async def aggregate_subset(self, sources: Sequence[Source]) -> AggregationResult:
        """Aggregate a user-chosen set of sources without a working-set cap."""
        return await self._aggregate(sources, limit=None)

    async def _aggregate(self, sources: Sequence[Source], limit: Optional[int]) -> AggregationResult:
        fetchable = [source for source in sources if not source.is_sentinel]
        if not fetchable:
            return AggregationResult()

        logger.info(f"Aggregating {len(fetchable)} sources")
        start_time = time.time()

        semaphore = asyncio.Semaphore(self.feed_config.max_concurrent)

        async def fetch_with_semaphore(source: Source) -> FeedResult:
            async with semaphore:
                return await self.fetcher.fetch(source.url)

        # gather preserves input order, so the merge below never depends on
        # which source settled first
        outcomes = await asyncio.gather(
            *(fetch_with_semaphore(source) for source in fetchable),
            return_exceptions=True
        )

        results = []
        failures = []
        for source, outcome in zip(fetchable, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Source {source.name} failed: {outcome}")
                failures.append((source, str(outcome)))
                continue
            if not outcome.ok:
                message = outcome.message or f"status {outcome.status}"
                logger.warning(f"Source {source.name} returned no data: {message}")
                failures.append((source, message))
                continue
            results.append(outcome)

        articles = sort_by_recency(merge_unique(results))
        if limit is not None:
            articles = articles[:limit]

        duration = time.time() - start_time
        logger.info(
            f"{len(results)}/{len(fetchable)} sources returned data; "
            f"{len(articles)} articles in {duration:.2f}s"
        )

        return AggregationResult(
            articles=tuple(articles),
            succeeded=len(results),
            total=len(fetchable),
            failures=tuple(failures)
        )
