"""Text processing utilities for chemtex.

Example:
    >>> from chemtex.utils.text import normalize_input
    >>> normalize_input("A − B…")
    'A - B...'
"""

from __future__ import annotations

import re

# Unicode minus, en dash, em dash, hyphen
_DASHES = re.compile("[\u2212\u2013\u2014\u2010]")


def normalize_input(text: str) -> str:
    """Apply the fixed substitutions every grammar expects.

    Line breaks become spaces, dash variants become "-", and the ellipsis
    character becomes three dots. Idempotent.
    """
    text = text.replace("\n", " ")
    text = _DASHES.sub("-", text)
    return text.replace("\u2026", "...")
