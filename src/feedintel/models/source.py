#!/usr/bin/env python3
"""
Feed source model.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Source:
    """A configured feed. Identity is the URL."""
    name: str = field(compare=False)
    url: str

    @property
    def is_sentinel(self) -> bool:
        return self.url == ALL_SOURCES.url


# Pseudo-source that selects aggregation over every configured feed.
ALL_SOURCES = Source(name='All Sources', url='all-sources')
