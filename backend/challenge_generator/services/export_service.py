import re

from challenge_generator.schemas.challenge import CodeChallengeItem


def _fenced(text: str, info: str = "") -> list[str]:
    """A fenced block whose fence is longer than any backtick run in ``text``."""
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    fence = "`" * max(3, longest + 1)
    return [f"{fence}{info}", text, fence]


def render_markdown(challenge: CodeChallengeItem) -> str:
    """Render a challenge as a standalone Markdown document."""
    language = challenge.language.value
    lines = [
        f"# {challenge.title}",
        "",
        f"**Language:** {language} | **Level:** {challenge.level.value}",
        "",
        f"**Tags:** {', '.join(challenge.tags)}",
        "",
        "## Problem Statement",
        "",
        challenge.statement,
        "",
        "## Input Format",
        "",
        challenge.input_format,
        "",
        "## Output Format",
        "",
        challenge.output_format,
        "",
    ]

    if challenge.examples:
        lines += ["## Examples", ""]
        for number, example in enumerate(challenge.examples, start=1):
            lines += [f"### Example {number}", "", "**Input:**", ""]
            lines += _fenced(example.input)
            lines += ["", "**Output:**", ""]
            lines += _fenced(example.output)
            lines.append("")
            if example.explanation:
                lines += [f"**Explanation:** {example.explanation}", ""]

    solution = challenge.reference_solution
    lines += ["## Reference Solution", ""]
    lines += _fenced(solution.code, language.lower())
    lines += ["", f"**Complexity:** {solution.complexity}", ""]
    if solution.explanation:
        lines += [f"**Explanation:** {solution.explanation}", ""]

    if challenge.common_errors:
        lines += ["## Common Errors", ""]
        lines += [f"- **{err.pattern}**: {err.explanation}" for err in challenge.common_errors]
        lines.append("")

    lines += ["## Learning Tips", "", challenge.feedback.summary, ""]
    lines += [f"- {tip}" for tip in challenge.feedback.tips]

    return "\n".join(lines) + "\n"
