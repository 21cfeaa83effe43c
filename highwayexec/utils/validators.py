from __future__ import annotations

import math
from numbers import Real
from typing import Any, Optional

THOUSANDS_SEPARATORS = (",",)


def is_valid_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def coerce_number(value: Any) -> Optional[float]:
    """Interpret a cell as a number, returning None when it is absent or unusable.

    Native numbers pass through unchanged when finite. Strings are stripped of
    whitespace and thousands separators before parsing. Never raises.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = "".join(value.split())
    for sep in THOUSANDS_SEPARATORS:
        text = text.replace(sep, "")
    # float() would accept digit-group underscores such as "1_000"
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None
