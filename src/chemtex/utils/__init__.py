"""Utility modules for chemtex.

Provides:
- logger: get_logger for logging
- text: normalize_input for the fixed input substitutions
"""

from chemtex.utils.logger import get_logger
from chemtex.utils.text import normalize_input

__all__ = [
    "get_logger",
    "normalize_input",
]
