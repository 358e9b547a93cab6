from challenge_generator.schemas.challenge import (
    CodeChallengeItem,
    DifficultyLevel,
    GenerateChallengeRequest,
    GenerateChallengeResponse,
    HealthResponse,
    ModelsResponse,
    ModelStatusResponse,
    ProgrammingLanguage,
)

__all__ = [
    "CodeChallengeItem",
    "DifficultyLevel",
    "GenerateChallengeRequest",
    "GenerateChallengeResponse",
    "HealthResponse",
    "ModelsResponse",
    "ModelStatusResponse",
    "ProgrammingLanguage",
]
