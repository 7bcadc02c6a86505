"""Validation helpers to keep journal values finite and well-shaped."""

import math
from datetime import datetime, timezone, tzinfo
from typing import Any, List, Optional


def finite_float(value: Any, default: float = 0.0) -> float:
    """Return a finite float or a default fallback."""
    fval = optional_float(value)
    return default if fval is None else fval


def optional_float(value: Any) -> Optional[float]:
    """Return a finite float, or None when the value is missing or unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        fval = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(fval):
        return None
    return fval


def parse_datetime(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse an ISO 8601 string (or datetime) into an aware datetime.

    Naive values are interpreted in ``tz`` (UTC when not given). A trailing
    ``Z`` is accepted. Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz or timezone.utc)
    return dt


def string_list(value: Any) -> List[str]:
    """Coerce a list-ish value into a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, (str, int)):
        value = [value]
    if not isinstance(value, (list, tuple, set)):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]
