#!/usr/bin/env python3
"""
Feed source registry.

Read-only lookup over the configured sources, loaded once at start-up.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..models.source import ALL_SOURCES, Source
from .catalog import load_sources

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Ordered registry of feed sources plus the all-sources sentinel."""

    def __init__(self, sources: Sequence[Source]):
        """
        Initialize registry.

        Args:
            sources: Ordered feed sources; the sentinel is not allowed here
        """
        self._sources: List[Source] = []
        self._by_url: Dict[str, Source] = {}
        for source in sources:
            if source.is_sentinel:
                raise ValueError("The all-sources sentinel cannot be registered as a feed")
            if source.url in self._by_url:
                logger.warning(f"Duplicate source url ignored: {source.url}")
                continue
            self._sources.append(source)
            self._by_url[source.url] = source

    @property
    def sentinel(self) -> Source:
        return ALL_SOURCES

    def list_sources(self) -> List[Source]:
        """Get configured sources in catalog order."""
        return list(self._sources)

    def find(self, key: str) -> Optional[Source]:
        """Find a source by url, then by case-insensitive name."""
        if key == ALL_SOURCES.url or key.lower() == ALL_SOURCES.name.lower():
            return ALL_SOURCES
        if key in self._by_url:
            return self._by_url[key]
        lowered = key.lower()
        for source in self._sources:
            if source.name.lower() == lowered:
                return source
        return None

    def get(self, key: str) -> Source:
        """
        Get a source by url or name.

        Raises:
            KeyError: If source not found
        """
        source = self.find(key)
        if source is None:
            available = [s.name for s in self._sources]
            raise KeyError(f"Source '{key}' not found. Available: {available}")
        return source

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self):
        return iter(self._sources)

    @classmethod
    def from_file(cls, path: Optional[str] = None) -> 'SourceRegistry':
        """Build a registry from the default catalog or a JSON file."""
        return cls(load_sources(path))
