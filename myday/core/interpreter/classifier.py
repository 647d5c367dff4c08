"""Intent classification from the first-stage LLM response.

The classification prompt asks the model to finish its answer with a boxed
marker such as ``Tool：\\box{createTask}``.  Only the marker is trusted; the
surrounding prose is ignored.  Anything that cannot be mapped to a known
tool degrades to :attr:`Intent.GENERAL` so the user still gets a reply.
"""

from __future__ import annotations

import re

from myday.core.interpreter.models import Intent
from myday.utils.logging import get_logger

logger = get_logger("interpreter.classifier")

# Full-width colon, literal backslash, non-greedy name up to the first brace.
TOOL_MARKER_PATTERN = re.compile(r"Tool：\\box\{([^}]+)\}")

_INTENTS_BY_NAME: dict[str, Intent] = {intent.value: intent for intent in Intent}


def find_tool_marker(raw_text: str) -> str | None:
    """Return the name inside the first ``Tool：\\box{...}`` marker, if any."""
    if not raw_text:
        return None
    match = TOOL_MARKER_PATTERN.search(raw_text)
    return match.group(1).strip() if match else None


def classify_intent(raw_text: str) -> Intent:
    """Map the first-stage completion *raw_text* to an :class:`Intent`.

    Never raises.  A missing marker or an unrecognised tool name yields
    ``Intent.GENERAL``.
    """
    name = find_tool_marker(raw_text)
    if name is None:
        logger.info("tool_marker_missing", text_len=len(raw_text or ""))
        return Intent.GENERAL

    intent = _INTENTS_BY_NAME.get(name)
    if intent is None:
        logger.info("tool_name_unrecognised", tool=name)
        return Intent.GENERAL

    logger.info("intent_classified", tool=intent.value)
    return intent
