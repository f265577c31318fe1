"""Searchable terms derived from a resource name."""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[-_]")
MIN_TAG_LENGTH = 3


def extract_tags(resource_name: str) -> frozenset[str]:
    """
    Derive lowercase search terms from a file name.

    Everything after the last ``.`` is dropped, so a name without an extension
    yields no terms. ``-`` and ``_`` act as word separators and terms shorter
    than three characters are discarded.

    >>> sorted(extract_tags("Sunset-Beach_at_dawn.JPG"))
    ['beach', 'dawn', 'sunset']
    """
    if "." not in resource_name:
        return frozenset()
    stem = resource_name.rsplit(".", 1)[0]
    terms = _SEPARATORS.sub(" ", stem).lower().split()
    return frozenset(term for term in terms if len(term) >= MIN_TAG_LENGTH)
