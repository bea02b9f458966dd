"""Parsing of amounts and rates as the calculator displays them."""

import re
from typing import Optional

_NON_DIGITS = re.compile(r"[^0-9]")


def extract_numeric_amount(text: Optional[str]) -> int:
    """
    Parse a locale-formatted amount such as ``"48 300 000 Ft"``.

    Every non-digit character is dropped before parsing. Returns 0 when
    nothing parseable remains.
    """
    if not text:
        return 0
    digits = _NON_DIGITS.sub("", text)
    try:
        return int(digits)
    except ValueError:
        return 0


def parse_apr(text: Optional[str]) -> float:
    """
    Parse an APR shown with a comma decimal separator, e.g. ``"6,45"``.

    Returns 0.0 on any parse failure (including a trailing ``%``).
    """
    if not text:
        return 0.0
    try:
        return float(text.strip().replace(",", "."))
    except ValueError:
        return 0.0
