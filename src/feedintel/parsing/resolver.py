#!/usr/bin/env python3
"""
Child lookups over parsed feed nodes.

feedparser exposes every element of a channel/feed/item as a mapping keyed
by namespace-resolved names (``media_thumbnail``, ``author_detail``,
``content``). Values come in three shapes: plain text, detail mappings that
carry the text under ``value`` and lists of either. These helpers flatten
those shapes so extraction tables can address fields by key path only.
"""

from typing import Any, List, Mapping, Sequence


def _lookup(node: Any, path: str) -> Any:
    """Follow a dotted key path through nested mappings."""
    current = node
    for key in path.split('.'):
        if isinstance(current, (list, tuple)):
            current = current[0] if current else None
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _text_of(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        return _text_of(value.get('value'))
    if isinstance(value, (list, tuple)):
        for element in value:
            text = _text_of(element)
            if text:
                return text
    return ''


def child_text(node: Any, path: str) -> str:
    """
    Return the trimmed text stored under ``path`` on a parsed node.

    Args:
        node: feedparser mapping (channel, feed or entry)
        path: Key or dotted key path, e.g. ``author_detail.name``

    Returns:
        The text, or an empty string when the child is absent
    """
    return _text_of(_lookup(node, path))


def first_text(node: Any, paths: Sequence[str]) -> str:
    """Return the first non-empty ``child_text`` among ``paths``."""
    for path in paths:
        text = child_text(node, path)
        if text:
            return text
    return ''


def child_nodes(node: Any, path: str) -> List[Mapping]:
    """Return the repeated child mappings stored under ``path``."""
    value = _lookup(node, path)
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, (list, tuple)):
        return [element for element in value if isinstance(element, Mapping)]
    return []


def child_attr(node: Any, path: str, attr: str) -> str:
    """Return ``attr`` of the first child under ``path`` that carries it."""
    for child in child_nodes(node, path):
        value = child.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ''
