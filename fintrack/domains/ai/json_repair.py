"""Best-effort parsing of JSON objects out of model output.

Models asked for JSON still wrap it in markdown fences, prefix it with prose,
or leave trailing commas. ``parse_model_json`` tries progressively more
invasive repairs and reports a :class:`ParseFailure` instead of raising when
nothing yields a JSON object.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Union

SNIPPET_LENGTH = 200

_FENCE_OPEN = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
# Legacy repairs for list padding and footnote-style fragments. They can drop
# real values, so they only run when the gentler passes fail.
_AGGRESSIVE_FIXES = (
    (re.compile(r"null\s*,"), ""),
    (re.compile(r",\s*null"), ""),
    (re.compile(r'"\s*\*\s*[^"]*"'), ""),
    (re.compile(r',\s*"[^"]*"\s*\*'), ""),
)


@dataclass(frozen=True)
class ParseSuccess:
    data: Dict[str, Any]
    stage: str = "strict"
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    snippet: str = ""
    ok: bool = field(default=False, init=False)


ParseResult = Union[ParseSuccess, ParseFailure]


def strip_fences(text: str) -> str:
    return _FENCE_OPEN.sub("", text).replace("```", "").strip()


def extract_object(text: str) -> str:
    """Outermost ``{...}`` span, or the text unchanged when there is none."""
    match = _OBJECT_SPAN.search(text)
    return match.group(0) if match else text


def _loads_object(candidate: str) -> Dict[str, Any] | None:
    try:
        value = json.loads(candidate)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def parse_model_json(text: str | None) -> ParseResult:
    if text is None or not text.strip():
        return ParseFailure("empty")

    candidate = extract_object(strip_fences(text))
    data = _loads_object(candidate)
    if data is not None:
        return ParseSuccess(data, stage="strict")

    candidate = _TRAILING_COMMA.sub(r"\1", candidate)
    data = _loads_object(candidate)
    if data is not None:
        return ParseSuccess(data, stage="trailing_commas")

    for pattern, replacement in _AGGRESSIVE_FIXES:
        candidate = pattern.sub(replacement, candidate)
    candidate = _TRAILING_COMMA.sub(r"\1", candidate)
    data = _loads_object(candidate)
    if data is not None:
        return ParseSuccess(data, stage="aggressive")

    return ParseFailure("invalid_json", snippet=candidate[:SNIPPET_LENGTH])
