"""Shared filtering utilities for sources."""

import re
from typing import Iterable, Optional

# Newline or a sentence-ending period
LINE_BOUNDARY = re.compile(r"\n|\.\s+")


def matches_keywords(text: str, keywords: list[str]) -> bool:
    """
    Check if text mentions any of the topic keywords.

    Args:
        text: Text to search
        keywords: List of keywords to check against

    Returns:
        True if any keyword is a substring of text (case-insensitive)
    """
    if not keywords:
        return True  # No filtering if no keywords provided

    text = text.lower()
    return any(keyword.lower() in text for keyword in keywords)


def join_fields(values: Iterable[Optional[object]]) -> str:
    """Join record fields with spaces, treating missing values as empty."""
    return " ".join("" if value is None else str(value) for value in values)


def keyword_pattern(keywords: list[str]) -> re.Pattern[str]:
    """Compile keywords into a case-insensitive alternation."""
    if not keywords:
        raise ValueError("Keyword list cannot be empty")
    return re.compile("|".join(re.escape(k) for k in keywords), re.IGNORECASE)


def split_lines(text: str) -> list[str]:
    """Split flat text into stripped, non-empty sentences."""
    return [line.strip() for line in LINE_BOUNDARY.split(text) if line.strip()]


def split_at_markers(text: str, markers: list[str]) -> list[str]:
    """Split text so that every chunk after the first starts at a marker."""
    boundary = re.compile(
        "(?=" + "|".join(re.escape(m) for m in markers) + ")", re.IGNORECASE
    )
    return [chunk.strip() for chunk in boundary.split(text) if chunk.strip()]
