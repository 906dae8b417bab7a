"""Pull a JSON value out of free-form model output."""
from __future__ import annotations

import json
import re
from typing import Any

from jobflow.log import get_logger

log = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_PAIRS = {"{": "}", "[": "]"}


def _outermost_span(text: str) -> str | None:
    """Return the outermost ``{...}`` or ``[...]`` block, whichever opens first.

    The scan is string-aware so brackets inside quoted values do not count.
    When the block never closes, everything from the opener onwards is
    returned and left for the parser to reject.
    """
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    stack: list[str] = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch in ("}", "]"):
            if not stack or stack[-1] != ch:
                return text[start:i + 1]
            stack.pop()
            if not stack:
                return text[start:i + 1]
    return text[start:]


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def extract_json(text: str | None) -> Any:
    """Parse the first JSON object/array in *text*; ``None`` when there is none."""
    if not text:
        return None
    cleaned = _FENCE_RE.sub("", text).strip()
    candidate = _outermost_span(cleaned)
    if candidate is None:
        log.debug("No JSON opener found in model output (%d chars)", len(text))
        return None
    for attempt in (candidate, strip_trailing_commas(candidate)):
        try:
            return json.loads(attempt)
        except json.JSONDecodeError:
            continue
    log.debug("Model output did not parse as JSON: %.120s", candidate)
    return None
