"""Locate and parse the challenge JSON object in raw model output.

Local models wrap their JSON in prose, in Markdown fences, or emit several
candidate objects. Strategies run from strict to permissive and the first one
that yields a JSON *object* wins.
"""

import json
import re
from typing import Any

from challenge_generator.config import settings
from challenge_generator.exceptions import ExtractionFailure
from challenge_generator.logging_config import get_logger

logger = get_logger(__name__)

CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
# Objects with at most one level of nested braces.
BALANCED_OBJECT_RE = re.compile(r"\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}", re.DOTALL)


def _parse_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _from_whole_text(raw_content: str) -> dict[str, Any] | None:
    return _parse_object(raw_content)


def _from_code_block(raw_content: str) -> dict[str, Any] | None:
    match = CODE_BLOCK_RE.search(raw_content)
    if not match:
        return None
    return _parse_object(match.group(1))


def _from_balanced_candidates(raw_content: str) -> dict[str, Any] | None:
    candidates = [m.group(0) for m in BALANCED_OBJECT_RE.finditer(raw_content)]
    # Longest is most likely complete; sorted() is stable so equal lengths
    # keep their leftmost-first order.
    for candidate in sorted(candidates, key=len, reverse=True):
        parsed = _parse_object(candidate)
        if parsed is not None:
            return parsed
    return None


def _from_brace_walk(raw_content: str) -> dict[str, Any] | None:
    start = raw_content.find("{")
    if start == -1:
        return None

    depth = 0
    for index in range(start, len(raw_content)):
        char = raw_content[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return _parse_object(raw_content[start : index + 1])
    return None


STRATEGIES = (
    ("direct", _from_whole_text),
    ("code_block", _from_code_block),
    ("largest_object", _from_balanced_candidates),
    ("brace_walk", _from_brace_walk),
)


def extract_challenge_json(raw_content: str) -> dict[str, Any]:
    """
    Extract the first JSON object found by the fallback chain.

    Raises ExtractionFailure (with head/tail previews for the logs) when no
    strategy produces an object.
    """
    for name, strategy in STRATEGIES:
        parsed = strategy(raw_content)
        if parsed is not None:
            logger.info("challenge_json_extracted", strategy=name, field_count=len(parsed))
            return parsed
        logger.debug("extraction_strategy_failed", strategy=name)

    head = raw_content[: settings.preview_head_chars]
    tail = raw_content[-settings.preview_tail_chars :] if settings.preview_tail_chars else ""
    logger.error(
        "challenge_json_extraction_failed",
        response_length=len(raw_content),
        head_preview=head,
        tail_preview=tail,
    )
    raise ExtractionFailure(
        response_length=len(raw_content),
        head_preview=head,
        tail_preview=tail,
    )
