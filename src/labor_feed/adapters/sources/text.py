"""Coarse HTML to plain text conversion."""

import re

from bs4 import BeautifulSoup, ParserRejectedMarkup

_WHITESPACE = re.compile(r"\s+")
_SCRIPT_OR_STYLE = re.compile(r"<(script|style)\b[\s\S]*?</\1\s*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def flatten(html: str) -> str:
    """
    Strip markup from HTML into a single line of text.

    Script and style blocks are dropped along with their content, every
    other tag is replaced by a space, and whitespace runs collapse to one
    space. Never raises on string input.

    Args:
        html: Raw page markup, possibly malformed

    Returns:
        Flat text, or an empty string for empty input
    """
    if not html or not html.strip():
        return ""

    try:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        text = soup.get_text(separator=" ")
    except ParserRejectedMarkup:
        # html.parser gives up on some broken declarations
        text = _TAG.sub(" ", _SCRIPT_OR_STYLE.sub("", html))

    return _WHITESPACE.sub(" ", text).strip()
