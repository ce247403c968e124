"""Shared parsing utilities for tracking page extraction."""

from __future__ import annotations

import re
from collections.abc import Iterable

from parcel_tracker.utils.constants import UNKNOWN_LOCATION


BRACKET_LOCATION = re.compile(r"【(.+?)】")
COMMA_LOCATION = re.compile(r"^(.+),")


def clean_text(value: object) -> str:
    """Collapse a raw DOM text value into a trimmed string ("" if missing)."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def first_text(candidates: Iterable[object], default: str) -> str:
    """
    Return the first non-empty candidate text.

    Args:
        candidates: Texts in selector priority order (None for no match)
        default: Placeholder returned when nothing matched

    Returns:
        First non-blank candidate, trimmed, or the default
    """
    for candidate in candidates:
        text = clean_text(candidate)
        if text:
            return text
    return default


def parse_location(description: str) -> str:
    """
    Derive an event location from its description.

    Handles formats like "【Shanghai, CN】Package departed" and
    "Shanghai, CN, Package departed" (everything before the last comma).

    Args:
        description: Event description text

    Returns:
        Location string, or the placeholder if none can be derived
    """
    match = BRACKET_LOCATION.search(description)
    if match is None:
        match = COMMA_LOCATION.match(description)
    if match is None:
        return UNKNOWN_LOCATION

    location = match.group(1).strip()
    return location or UNKNOWN_LOCATION
