from pathlib import Path

from challenge_generator.logging_config import get_logger

logger = get_logger(__name__)

FALLBACK_SYSTEM_PROMPT = (
    "You are CodeChallenge Example Generator, an AI agent specialized in creating "
    "high-quality programming challenges.\n"
    "Generate valid JSON objects that follow the provided schema exactly."
)

JSON_DIRECTIVE = (
    "\n\nGenerate a programming challenge. You can include explanatory text or context, "
    "but ensure a valid JSON object is present in your response that matches the schema."
)

REQUIREMENTS = """REQUIREMENTS:
1. Return a valid JSON object following the schema
2. Include ALL required fields:
   - id, title, language, level, tags, statement
   - input_format, output_format
   - examples: Array with at least 3 items (input, output, explanation optional)
   - test_cases: Array with at least 3 items (input, expected_output)
   - reference_solution: Object with "code" and "complexity" fields
   - feedback: Object with "summary" and "tips" array
   - common_errors: Array (can be empty)
3. Use double quotes for all JSON strings
4. The "complexity" field should indicate time complexity (e.g., "O(n)", "O(n^2)")

You may include explanatory text before or after the JSON, but ensure a valid JSON object is present.

Generate the challenge now:"""


def load_system_prompt(path: Path) -> str:
    """Read the system prompt asset, falling back to a built-in instruction."""
    try:
        prompt = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("system_prompt_fallback", path=str(path), error=str(e))
        return FALLBACK_SYSTEM_PROMPT

    if not prompt.strip():
        logger.warning("system_prompt_fallback", path=str(path), error="empty file")
        return FALLBACK_SYSTEM_PROMPT

    logger.info("system_prompt_loaded", path=str(path), length=len(prompt))
    return prompt


def build_system_message(system_prompt: str) -> str:
    return system_prompt + JSON_DIRECTIVE


def build_user_prompt(prompt: str, language: str, level: str, tags: list[str] | None = None) -> str:
    user_prompt = f"Generate one {level} {language} challenge"
    if tags:
        user_prompt += f" about {', '.join(tags)}"
    user_prompt += ".\n\n"
    user_prompt += f"User request: {prompt}\n\n"
    user_prompt += REQUIREMENTS
    return user_prompt
