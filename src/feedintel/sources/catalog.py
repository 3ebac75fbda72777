#!/usr/bin/env python3
"""
Static feed catalog.

The default ordered list of security news feeds, optionally replaced by a
JSON file of ``{"name": ..., "url": ...}`` objects.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from ..exceptions import ConfigurationError
from ..models.source import Source

logger = logging.getLogger(__name__)

DEFAULT_SOURCES: List[Source] = [
    Source('The Hacker News', 'https://thehackernews.com/feeds/posts/default'),
    Source('BleepingComputer', 'https://www.bleepingcomputer.com/feed/'),
    Source('CISA News', 'https://www.cisa.gov/news.xml'),
    Source('CISA Blog', 'https://www.cisa.gov/cisa/blog.xml'),
    Source('CISA All Advisories', 'https://www.cisa.gov/cybersecurity-advisories/all.xml'),
    Source('CISA ICS Advisories', 'https://www.cisa.gov/cybersecurity-advisories/ics-advisories.xml'),
    Source('Dark Reading', 'https://www.darkreading.com/rss.xml'),
    Source('Help Net Security', 'https://www.helpnetsecurity.com/feed/'),
    Source('CSO Online', 'https://www.csoonline.com/feed/'),
    Source('Wired Security', 'https://www.wired.com/feed/category/security/latest/rss'),
    Source('Security Affairs', 'https://securityaffairs.co/feed'),
    Source('Graham Cluley', 'https://grahamcluley.com/feed/'),
    Source('Zero Day Initiative', 'https://www.zerodayinitiative.com/blog?format=rss'),
    Source('Krebs on Security', 'https://krebsonsecurity.com/feed/'),
    Source('The Record', 'https://therecord.media/feed/'),
    Source('GBHacker', 'https://gbhackers.com/feed/'),
    Source('Schneier on Security', 'https://www.schneier.com/feed/'),
    Source('Troy Hunt', 'https://www.troyhunt.com/feed/'),
    Source('Cybersecurity News', 'https://cybersecuritynews.com/feed/'),
    Source('Crowdstrike', 'https://www.crowdstrike.com/en-us/blog//feed'),
    Source('Palo Alto (Unit 42)', 'https://unit42.paloaltonetworks.com/feed/'),
    Source('Cisco Security', 'https://blogs.cisco.com/security/feed'),
]


def load_sources(path: Optional[str] = None) -> List[Source]:
    """
    Load the ordered source list.

    Args:
        path: Optional JSON file replacing the default catalog

    Returns:
        List of sources in display order

    Raises:
        ConfigurationError: If the file is unreadable or malformed
    """
    if not path:
        return list(DEFAULT_SOURCES)

    try:
        raw = json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        raise ConfigurationError('FEED_SOURCES_FILE', f"cannot read {path}: {e}")

    if not isinstance(raw, list):
        raise ConfigurationError('FEED_SOURCES_FILE', "expected a JSON list of sources")

    sources = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict) or not entry.get('name') or not entry.get('url'):
            raise ConfigurationError('FEED_SOURCES_FILE', f"entry {position} needs 'name' and 'url'")
        sources.append(Source(name=str(entry['name']), url=str(entry['url'])))

    logger.info(f"Loaded {len(sources)} sources from {path}")
    return sources
