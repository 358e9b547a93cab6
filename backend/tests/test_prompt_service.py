"""Tests for prompt composition and the system prompt asset."""

from challenge_generator.config import settings
from challenge_generator.services.prompt_service import (
    FALLBACK_SYSTEM_PROMPT,
    JSON_DIRECTIVE,
    build_system_message,
    build_user_prompt,
    load_system_prompt,
)


def test_user_prompt_without_tags():
    prompt = build_user_prompt("array challenge", "Python", "beginner")

    assert prompt.startswith("Generate one beginner Python challenge.\n\n")
    assert "User request: array challenge" in prompt
    assert "REQUIREMENTS:" in prompt


def test_user_prompt_with_tags():
    prompt = build_user_prompt("graphs please", "Go", "advanced", ["bfs", "dijkstra"])

    assert prompt.startswith("Generate one advanced Go challenge about bfs, dijkstra.")


def test_user_prompt_is_deterministic():
    args = ("sorting", "Java", "intermediate", ["sort"])

    assert build_user_prompt(*args) == build_user_prompt(*args)


def test_system_message_appends_json_directive():
    assert build_system_message("Base prompt.") == "Base prompt." + JSON_DIRECTIVE


def test_bundled_system_prompt_loads():
    prompt = load_system_prompt(settings.system_prompt_path)

    assert prompt != FALLBACK_SYSTEM_PROMPT
    assert "JSON" in prompt


def test_missing_system_prompt_falls_back(tmp_path):
    assert load_system_prompt(tmp_path / "absent.md") == FALLBACK_SYSTEM_PROMPT


def test_blank_system_prompt_falls_back(tmp_path):
    path = tmp_path / "blank.md"
    path.write_text("   \n", encoding="utf-8")

    assert load_system_prompt(path) == FALLBACK_SYSTEM_PROMPT
