"""Fill in and repair challenge fields the model left out or got wrong."""

import copy
import re
import time
from datetime import UTC, datetime
from typing import Any

from challenge_generator.logging_config import get_logger

logger = get_logger(__name__)

TOOL_NAME = "AI Code Challenge Generator"

DEFAULT_TITLE = "Untitled Challenge"
DEFAULT_STATEMENT = "No description provided."
NOT_SPECIFIED = "Not specified"
DEFAULT_SOLUTION_CODE = "// No solution provided"
DEFAULT_FEEDBACK_SUMMARY = "Complete the challenge by following the requirements."

REPAIR_SOLUTION_CODE = "// Implementation required"
REPAIR_COMPLEXITY = "O(n)"
REPAIR_FEEDBACK_SUMMARY = "Complete this challenge to improve your skills."
REPAIR_STATEMENT = "Problem description not provided."

LIST_FIELDS = ("examples", "test_cases", "tags", "common_errors")


def _to_base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    encoded = ""
    while number:
        number, remainder = divmod(number, 36)
        encoded = digits[remainder] + encoded
    return encoded or "0"


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "challenge"


def generate_challenge_id(title: str) -> str:
    """Slug of the title plus a base-36 millisecond timestamp."""
    return f"{slugify(title)}-{_to_base36(time.time_ns() // 1_000_000)}"


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _absent(value: Any) -> bool:
    return value is None or value == ""


def _pick(value: Any, fallback: Any) -> Any:
    return fallback if _absent(value) else value


def _pick_list(value: Any, fallback: list) -> list:
    return value if isinstance(value, list) else fallback


def _feedback(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        return {"summary": DEFAULT_FEEDBACK_SUMMARY, "tips": []}
    feedback = dict(value)
    feedback["tips"] = _pick_list(feedback.get("tips"), [])
    return feedback


def apply_defaults(
    partial: dict[str, Any],
    *,
    language: str,
    level: str,
    tags: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build a fully populated challenge from whatever the model returned.

    Never fails. Lists supplied by the model are kept as they are (even
    when empty); list fields holding anything else become lists, and
    ``feedback.tips`` is always a list. Other fields are only replaced when
    missing, null or empty strings. Keys this function doesn't know about
    are carried through.
    """
    title = partial.get("title")
    challenge_id = partial.get("id")
    if _absent(challenge_id):
        challenge_id = generate_challenge_id(str(title or "challenge"))

    challenge = dict(partial)
    challenge.update(
        id=challenge_id,
        title=_pick(title, DEFAULT_TITLE),
        language=_pick(partial.get("language"), language),
        level=_pick(partial.get("level"), level),
        tags=_pick_list(partial.get("tags"), list(tags) if tags else []),
        statement=_pick(partial.get("statement"), DEFAULT_STATEMENT),
        input_format=_pick(partial.get("input_format"), NOT_SPECIFIED),
        output_format=_pick(partial.get("output_format"), NOT_SPECIFIED),
        examples=_pick_list(partial.get("examples"), []),
        test_cases=_pick_list(partial.get("test_cases"), []),
        reference_solution=_pick(
            partial.get("reference_solution"),
            {"code": DEFAULT_SOLUTION_CODE, "complexity": "O(1)"},
        ),
        feedback=_feedback(partial.get("feedback")),
        common_errors=_pick_list(partial.get("common_errors"), []),
        metadata=_pick(
            partial.get("metadata"),
            {"author": TOOL_NAME, "created_at": _utc_timestamp()},
        ),
    )
    return challenge


def auto_fix_common_issues(
    challenge: dict[str, Any], errors: list[str] | None = None
) -> dict[str, Any]:
    """
    Repair the defect categories local models are known to produce.

    Returns a fixed copy; the input is left untouched. ``errors`` are the
    critical validation errors that triggered the repair and are only logged.
    This is a single best-effort pass, the caller re-validates once.
    """
    fixed = copy.deepcopy(challenge)
    applied: list[str] = []

    solution = fixed.get("reference_solution")
    if isinstance(solution, dict):
        if not solution.get("complexity"):
            solution["complexity"] = REPAIR_COMPLEXITY
            applied.append("reference_solution.complexity")
    else:
        fixed["reference_solution"] = {
            "code": REPAIR_SOLUTION_CODE,
            "complexity": REPAIR_COMPLEXITY,
        }
        applied.append("reference_solution")

    for field in LIST_FIELDS:
        if not isinstance(fixed.get(field), list):
            fixed[field] = []
            applied.append(field)

    feedback = fixed.get("feedback")
    if not isinstance(feedback, dict) or not feedback:
        fixed["feedback"] = {"summary": REPAIR_FEEDBACK_SUMMARY, "tips": []}
        applied.append("feedback")
    else:
        if not feedback.get("summary"):
            feedback["summary"] = REPAIR_FEEDBACK_SUMMARY
            applied.append("feedback.summary")
        if not isinstance(feedback.get("tips"), list):
            feedback["tips"] = []
            applied.append("feedback.tips")

    for field, placeholder in (
        ("statement", REPAIR_STATEMENT),
        ("input_format", NOT_SPECIFIED),
        ("output_format", NOT_SPECIFIED),
    ):
        value = fixed.get(field)
        if not value or not isinstance(value, str):
            fixed[field] = placeholder
            applied.append(field)

    logger.info("challenge_auto_fixed", fixes=applied, triggered_by=errors or [])
    return fixed
