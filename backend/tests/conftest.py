import copy
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from challenge_generator.config import settings
from challenge_generator.dependencies import get_challenge_generator
from challenge_generator.main import app
from challenge_generator.middleware.rate_limit import limiter
from challenge_generator.services.challenge_service import ChallengeGenerator
from challenge_generator.services.ollama_service import OllamaClient
from challenge_generator.services.validation_service import load_schema_validator

COMPLETE_CHALLENGE = {
    "id": "sum-of-evens",
    "title": "Sum of Evens",
    "language": "Python",
    "level": "beginner",
    "tags": ["arrays", "loops"],
    "statement": "Given a list of integers, return the sum of the even ones.",
    "input_format": "A single line of space-separated integers.",
    "output_format": "A single integer.",
    "examples": [
        {"input": "1 2 3 4", "output": "6", "explanation": "2 + 4 = 6"},
        {"input": "1 3 5", "output": "0"},
        {"input": "10", "output": "10"},
    ],
    "test_cases": [
        {"input": "2 2", "expected_output": "4", "weight": 1},
        {"input": "", "expected_output": "0"},
        {"input": "-2 3", "expected_output": "-2"},
    ],
    "reference_solution": {
        "code": "def sum_evens(nums):\n    return sum(n for n in nums if n % 2 == 0)",
        "complexity": "O(n)",
        "explanation": "Single pass over the list.",
    },
    "common_errors": [
        {"pattern": "n % 2 == 1", "explanation": "Selects odd numbers instead of even ones."}
    ],
    "feedback": {
        "summary": "Practice filtering while iterating.",
        "tips": ["Try a generator expression."],
    },
    "metadata": {"author": "tests", "created_at": "2024-01-01T00:00:00Z"},
}


@pytest.fixture
def complete_challenge():
    """A challenge that passes strict validation."""
    return copy.deepcopy(COMPLETE_CHALLENGE)


@pytest.fixture
def fenced_response(complete_challenge):
    """A chatty model reply with the JSON inside a Markdown fence."""
    return (
        "Here is a beginner Python challenge about arrays.\n\n"
        f"```json\n{json.dumps(complete_challenge, indent=2)}\n```\n\n"
        "Let me know if you want another one!"
    )


@pytest.fixture(scope="session")
def schema_validator():
    return load_schema_validator(settings.schema_path)


@pytest.fixture
def mock_ollama():
    """An OllamaClient stand-in whose chat/list_models are AsyncMocks."""
    client = MagicMock(spec=OllamaClient)
    client.model = "test-model:latest"
    client.chat = AsyncMock(return_value="")
    client.list_models = AsyncMock(return_value=["test-model:latest"])
    return client


@pytest.fixture
def generator(mock_ollama, schema_validator):
    return ChallengeGenerator(mock_ollama, schema_validator, "You generate challenges.", settings)


@pytest.fixture
def client(generator):
    """Test client wired to the mock-backed generator, with rate limiting off."""
    app.dependency_overrides[get_challenge_generator] = lambda: generator
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    limiter.enabled = True
