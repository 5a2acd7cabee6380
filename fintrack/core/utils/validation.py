"""Input validation helpers."""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import ValidationError

_ANGLE_BRACKETS = re.compile(r"[<>]")


def jsonable_errors(exc: ValidationError) -> list[dict]:
    """Pydantic errors with ``ctx`` values coerced to strings."""
    errors = exc.errors(include_url=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        if "input" in err:
            err["input"] = _safe_input(err["input"])
    return errors


def _safe_input(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """Trim and strip angle brackets; ``None`` passes through."""
    if value is None:
        return None
    return _ANGLE_BRACKETS.sub("", value).strip()


def query_int(raw: Optional[str], default: int) -> int:
    try:
        return int(raw) if raw not in (None, "") else default
    except (TypeError, ValueError):
        raise ValueError("validation_error")
