#!/usr/bin/env python3
"""
Feed dialects and their field-extraction tables.

The dialect is detected once per document from feedparser's ``version``
string. Each dialect names, in fallback order, the keys a field is read
from; the item normalizer only walks these tables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Dialect(Enum):
    RSS2 = 'rss2'
    ATOM = 'atom'
    RDF = 'rdf'


@dataclass(frozen=True)
class FieldTable:
    """Key paths per field, tried left to right."""
    pub_date: Tuple[str, ...]
    guid: Tuple[str, ...]
    content: Tuple[str, ...]
    summary: Tuple[str, ...]
    author: Tuple[str, ...]
    # (child, attribute) pairs
    thumbnail: Tuple[Tuple[str, str], ...]
    enclosure: str
    categories: str
    feed_description: Tuple[str, ...]
    feed_image: Tuple[str, ...]
    feed_author: Tuple[str, ...]


# feedparser stores RSS <pubDate> and Atom <published> as ``published``,
# <updated> and dc:date as ``updated``, <guid> and <id> as ``id``,
# dc:creator and <author> as ``author`` and content:encoded / <content>
# as the ``content`` list.
RSS2_TABLE = FieldTable(
    pub_date=('published', 'updated'),
    guid=('id',),
    content=('content', 'summary'),
    summary=('summary',),
    author=('author', 'author_detail.name'),
    thumbnail=(('media_thumbnail', 'url'), ('enclosures', 'href')),
    enclosure='enclosures',
    categories='tags',
    feed_description=('subtitle', 'summary'),
    feed_image=('image.href', 'icon', 'logo'),
    feed_author=('author', 'author_detail.name'),
)

ATOM_TABLE = FieldTable(
    pub_date=('published', 'updated'),
    guid=('id',),
    content=('content', 'summary'),
    summary=('summary',),
    author=('author_detail.name', 'author'),
    thumbnail=(('media_thumbnail', 'url'), ('enclosures', 'href')),
    enclosure='enclosures',
    categories='tags',
    feed_description=('subtitle', 'summary'),
    feed_image=('image.href', 'icon', 'logo'),
    feed_author=('author_detail.name', 'author'),
)

RDF_TABLE = FieldTable(
    pub_date=('published', 'updated'),
    guid=('id',),
    content=('content', 'summary'),
    summary=('summary',),
    author=('author', 'author_detail.name'),
    thumbnail=(('media_thumbnail', 'url'), ('enclosures', 'href')),
    enclosure='enclosures',
    categories='tags',
    feed_description=('subtitle', 'summary'),
    feed_image=('image.href',),
    feed_author=('author',),
)

TABLES = {
    Dialect.RSS2: RSS2_TABLE,
    Dialect.ATOM: ATOM_TABLE,
    Dialect.RDF: RDF_TABLE,
}


def detect_dialect(version: Optional[str]) -> Optional[Dialect]:
    """
    Map a feedparser version string to a dialect.

    Returns None for documents without an RSS channel, Atom feed or RDF root
    (including JSON feeds, which are not syndication XML).
    """
    if not version:
        return None
    if version in ('rss090', 'rss10'):
        return Dialect.RDF
    if version.startswith('rss') or version == 'cdf':
        return Dialect.RSS2
    if version.startswith('atom'):
        return Dialect.ATOM
    return None


def table_for(dialect: Dialect) -> FieldTable:
    return TABLES[dialect]
