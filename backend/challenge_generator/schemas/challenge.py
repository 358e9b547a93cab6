from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProgrammingLanguage(str, Enum):
    JAVASCRIPT = "JavaScript"
    PYTHON = "Python"
    TYPESCRIPT = "TypeScript"
    CSHARP = "C#"
    JAVA = "Java"
    GO = "Go"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class GenerateChallengeRequest(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    prompt: str = Field(..., min_length=1, max_length=4000)
    language: ProgrammingLanguage
    level: DifficultyLevel
    tags: list[str] | None = None


class CodeChallengeExample(BaseModel):
    input: str
    output: str
    explanation: str | None = None


class ChallengeTestCase(BaseModel):
    input: str
    expected_output: str
    weight: float | None = None


class ReferenceSolution(BaseModel):
    code: str
    complexity: str
    explanation: str | None = None


class CommonError(BaseModel):
    pattern: str
    explanation: str


class Feedback(BaseModel):
    summary: str
    tips: list[str] = []


class Metadata(BaseModel):
    source_url: str | None = None
    license: str | None = None
    author: str | None = None
    created_at: str | None = None
    last_reviewed: str | None = None


class CodeChallengeItem(BaseModel):
    """Typed view of a finished challenge, used where the shape must be exact."""

    id: str
    title: str
    language: ProgrammingLanguage
    level: DifficultyLevel
    tags: list[str] = []
    statement: str
    input_format: str
    output_format: str
    examples: list[CodeChallengeExample] = []
    test_cases: list[ChallengeTestCase] = []
    reference_solution: ReferenceSolution
    common_errors: list[CommonError] = []
    feedback: Feedback
    metadata: Metadata | None = None


class GenerateChallengeResponse(BaseModel):
    success: bool
    # Lenient validation lets advisory violations through, so the challenge
    # is returned as generated rather than coerced into CodeChallengeItem.
    challenge: dict[str, Any] | None = None
    error: str | None = None


class ModelsResponse(BaseModel):
    success: bool
    models: list[str] = []


class ModelStatusResponse(BaseModel):
    available: bool
    model: str
    model_installed: bool
    error: str | None = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str
