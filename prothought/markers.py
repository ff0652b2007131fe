"""
Hashtag extraction.

A marker is a lowercase hashtag captured from a thought's text when the
thought is saved. Markers are never recomputed afterwards.
"""

import re
from typing import Iterable, Optional

# '#' followed by letters, digits, underscore or hyphen
HASHTAG_PATTERN = re.compile(r'#([\w-]+)')


def extract_hashtags(text: str) -> list[str]:
    """
    Extract distinct lowercase hashtags from text.

    Order follows first appearance; tags differing only in case collapse
    to one entry.

    >>> extract_hashtags("#b #a #B")
    ['b', 'a']
    """
    seen: set[str] = set()
    tags = []
    for match in HASHTAG_PATTERN.finditer(text):
        tag = match.group(1).lower()
        if tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


def split_marker_args(args: Iterable[str]) -> tuple[list[str], Optional[str]]:
    """Separate a ``#marker`` filter from period tokens.

    Any token starting with '#' is a marker, wherever it appears. If more
    than one is given the last wins.
    """
    period_args = []
    marker = None
    for arg in args:
        if arg.startswith("#"):
            marker = arg[1:].lower() or None
        else:
            period_args.append(arg)
    return period_args, marker


def format_markers(markers: Iterable[str]) -> str:
    """Render markers for display: '#a, #b'."""
    return ", ".join(f"#{m}" for m in markers)
