#!/usr/bin/env python3
"""
Formatting utilities for CLI display of sources, articles and aggregates.
"""

from typing import List, Sequence

from .models.article import Article
from .models.feed import AggregationResult, FeedInfo
from .models.source import Source


def format_article(article: Article) -> str:
    """Format a single article for display."""
    timestamp = ""
    published = article.published
    if published:
        timestamp = published.strftime("%Y-%m-%d %H:%M")

    title = article.title or "(untitled)"
    return f"[{timestamp}] {title}\n    {article.link}\n"


def format_articles(articles: Sequence[Article]) -> str:
    """Format articles as a numbered list, numbered from 1."""
    if not articles:
        return "No articles found.\n"
    lines = []
    for index, article in enumerate(articles, 1):
        lines.append(f"{index:>2}. {format_article(article)}")
    return "".join(lines)


def format_feed_header(feed: FeedInfo) -> str:
    """Format feed metadata as a short header."""
    lines = [f"=== {feed.title or feed.url} ==="]
    if feed.link:
        lines.append(feed.link)
    if feed.description:
        lines.append(feed.description)
    return "\n".join(lines) + "\n"


def format_source_list(sources: Sequence[Source], sentinel: Source) -> str:
    """Format the source catalog, sentinel first."""
    lines = [f"  {sentinel.name} ({sentinel.url})"]
    for source in sources:
        lines.append(f"  {source.name}\n      {source.url}")
    return "\n".join(lines) + "\n"


def format_aggregation_summary(result: AggregationResult) -> str:
    """Format per-source outcome counts and failures."""
    lines = [f"{result.summary()}, {len(result.articles)} articles"]
    for source, message in result.failures:
        lines.append(f"  ! {source.name}: {message}")
    return "\n".join(lines) + "\n"


def articles_to_dict(articles: Sequence[Article]) -> List[dict]:
    """Convert Article objects to dictionaries for JSON output."""
    return [article.to_dict() for article in articles]
