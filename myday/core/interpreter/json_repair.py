"""Locate and repair JSON objects embedded in free-form LLM prose.

The schedule-optimization prompt asks the model for a JSON object, but the
reply usually wraps it in explanation text and is sometimes truncated or
written with single quotes.  This module finds candidate ``{...}`` spans,
applies a best-effort structural repair and parses the result.  Nothing
here raises on malformed input: failure is reported as ``None``.

The repair is a heuristic, not a parser.  Callers must validate whatever
comes back before trusting it.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any

from myday.utils.logging import get_logger

logger = get_logger("interpreter.json_repair")

ANCHOR_KEY = '"taskUpdates"'

_OUTERMOST_OBJECT = re.compile(r"\{[\s\S]*\}")
_ANCHORED_OBJECT = re.compile(r'\{[^}]*"taskUpdates"[^}]*\}')

_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = {"}": "{", "]": "["}


# ---------------------------------------------------------------------------
# Candidate location
# ---------------------------------------------------------------------------


def _outermost_span(text: str) -> str | None:
    match = _OUTERMOST_OBJECT.search(text)
    return match.group(0) if match else None


def _anchored_span(text: str) -> str | None:
    match = _ANCHORED_OBJECT.search(text)
    return match.group(0) if match else None


def _span_around_anchor(text: str, anchor: str = ANCHOR_KEY) -> str | None:
    """Brace-scan outward from *anchor* to find its enclosing object.

    Walks backward from the anchor to the nearest ``{`` that is not closed
    before the anchor, then forward counting depth until it returns to zero.
    A span that never closes runs to the end of *text* so the repair step
    can still complete it.
    """
    anchor_index = text.find(anchor)
    if anchor_index == -1:
        return None

    start = -1
    depth = 0
    for i in range(anchor_index - 1, -1, -1):
        ch = text[i]
        if ch == "}":
            depth += 1
        elif ch == "{":
            if depth == 0:
                start = i
                break
            depth -= 1
    if start == -1:
        return None

    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return text[start:]


def iter_json_candidates(text: str) -> Iterator[str]:
    """Yield candidate JSON spans from *text* in order of preference.

    1. Greedy first-``{`` to last-``}`` span.
    2. A single flat ``{...}`` span containing ``"taskUpdates"``.
    3. The brace-scanned span enclosing ``"taskUpdates"``.

    Duplicate spans are yielded once.
    """
    if not text:
        return

    seen: set[str] = set()
    finders = (_outermost_span, _anchored_span, _span_around_anchor)
    for strategy, finder in enumerate(finders, start=1):
        candidate = finder(text)
        if candidate and candidate not in seen:
            seen.add(candidate)
            logger.debug(
                "json_candidate_found",
                strategy=strategy,
                preview=candidate[:200],
            )
            yield candidate


def locate_json_candidate(text: str) -> str | None:
    """Return the most preferred candidate span, or ``None``."""
    return next(iter_json_candidates(text), None)


# ---------------------------------------------------------------------------
# Repair
# ---------------------------------------------------------------------------


def _closing_sequence(text: str) -> str | None:
    """Closers needed to finish a tail-truncated structure, innermost first.

    Returns ``None`` when the structure is broken somewhere other than the
    tail (a mismatched closer, or an unterminated string).
    """
    stack: list[str] = []
    in_string = False
    escaped = False

    for ch in text:
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
        elif ch in _OPENERS:
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack[-1] != _CLOSERS[ch]:
                return None
            stack.pop()

    if in_string:
        return None
    return "".join(_OPENERS[ch] for ch in reversed(stack))


def repair_json(candidate: str) -> str:
    """Apply the quote and brace repairs to *candidate*.

    Single quotes become double quotes.  Missing closing braces and brackets
    are appended: in nesting order when the damage is purely at the tail,
    otherwise by raw count deficit (braces, then brackets).
    """
    repaired = candidate.replace("'", '"')

    closers = _closing_sequence(repaired)
    if closers is None:
        brace_deficit = repaired.count("{") - repaired.count("}")
        bracket_deficit = repaired.count("[") - repaired.count("]")
        closers = "}" * max(brace_deficit, 0) + "]" * max(bracket_deficit, 0)

    if closers:
        logger.debug("json_closers_appended", closers=closers)
    return repaired + closers


def parse_lenient_json(candidate: str) -> Any | None:
    """Parse *candidate* as-is, then after :func:`repair_json`.

    Returns ``None`` when neither attempt produces valid JSON.  Oversized
    integer literals (a plain ``ValueError``) and pathological nesting
    (``RecursionError``) count as invalid too.
    """
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError):
        pass

    repaired = repair_json(candidate)
    try:
        return json.loads(repaired)
    except (ValueError, RecursionError) as exc:
        logger.info(
            "json_repair_failed",
            error=str(exc),
            preview=repaired[:200],
        )
        return None


def extract_json_object(text: str) -> dict | None:
    """Return the first candidate in *text* that parses to a JSON object."""
    for candidate in iter_json_candidates(text):
        data = parse_lenient_json(candidate)
        if isinstance(data, dict):
            return data
    logger.info("json_object_not_found", text_len=len(text or ""))
    return None
