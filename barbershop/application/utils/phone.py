from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(value: str | None) -> str:
    """Digits only, so "(11) 95234-3456" and "11952343456" are the same customer."""
    return _NON_DIGITS.sub("", value or "")
