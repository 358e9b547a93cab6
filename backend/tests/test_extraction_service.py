"""Tests for locating challenge JSON in raw model output."""

import json

import pytest

from challenge_generator.exceptions import ExtractionFailure
from challenge_generator.services.extraction_service import extract_challenge_json


class TestDirectParse:
    def test_plain_json_is_returned_unchanged(self, complete_challenge):
        """Well-formed JSON with no wrapping parses as-is."""
        raw = json.dumps(complete_challenge)

        assert extract_challenge_json(raw) == complete_challenge

    def test_json_array_is_not_accepted_as_a_challenge(self):
        with pytest.raises(ExtractionFailure):
            extract_challenge_json('["not", "an", "object"]')


class TestCodeBlock:
    @pytest.mark.parametrize("fence", ["```json", "```"])
    def test_fenced_json_matches_unwrapped(self, complete_challenge, fence):
        """Fences with or without the json tag give the same object."""
        raw = f"Sure! Here you go:\n{fence}\n{json.dumps(complete_challenge)}\n```\nEnjoy."

        assert extract_challenge_json(raw) == complete_challenge

    def test_first_fenced_block_wins(self):
        raw = '```json\n{"title": "First"}\n```\nand\n```json\n{"title": "Second"}\n```'

        assert extract_challenge_json(raw) == {"title": "First"}


class TestBalancedCandidates:
    def test_longest_parseable_candidate_is_chosen_over_truncated_one(self):
        """A broken candidate, even a longer one, never beats a valid object."""
        complete = '{"title": "Two Sum", "statement": "Find two numbers.", "level": "beginner"}'
        truncated = '{"title": "Two Sum", "statement": "Find two numbers that add up",, "x": 1111}'
        raw = f"Draft: {truncated}\nFinal answer: {complete}\nThanks!"

        result = extract_challenge_json(raw)

        assert result == json.loads(complete)

    def test_longer_valid_candidate_beats_shorter(self):
        raw = 'Small {"a": 1} then larger {"title": "Bigger", "tags": ["x", "y"]} done'

        assert extract_challenge_json(raw) == {"title": "Bigger", "tags": ["x", "y"]}

    def test_equal_length_candidates_resolve_leftmost_first(self):
        raw = 'one {"title": "AAA"} two {"title": "BBB"}'

        assert extract_challenge_json(raw) == {"title": "AAA"}

    def test_one_level_of_nesting_is_matched(self):
        raw = 'Output: {"title": "Nested", "feedback": {"summary": "ok", "tips": []}} end'

        result = extract_challenge_json(raw)

        assert result["feedback"] == {"summary": "ok", "tips": []}


class TestBraceWalk:
    def test_braces_inside_code_fall_through_to_brace_walk(self):
        """Nested braces in solution code defeat the candidate pattern but not the walk."""
        obj = {
            "title": "Deep",
            "reference_solution": {
                "code": "function f(a) { if (a) { return 1; } return 0; }",
                "complexity": "O(1)",
            },
        }
        raw = f"Result follows {json.dumps(obj)} and that's it"

        assert extract_challenge_json(raw) == obj

    def test_unbalanced_text_fails(self):
        with pytest.raises(ExtractionFailure):
            extract_challenge_json('The object starts here { "title": "never closed"')


class TestFailure:
    def test_failure_carries_diagnostics(self):
        raw = "I'm sorry, I can't produce that challenge. " * 100

        with pytest.raises(ExtractionFailure) as exc_info:
            extract_challenge_json(raw)

        failure = exc_info.value
        assert failure.response_length == len(raw)
        assert failure.head_preview == raw[:1000]
        assert failure.tail_preview == raw[-500:]

    def test_failure_message_does_not_echo_model_output(self):
        raw = "secret model ramblings without json"

        with pytest.raises(ExtractionFailure) as exc_info:
            extract_challenge_json(raw)

        assert "ramblings" not in str(exc_info.value)
        assert "Failed to parse JSON" in str(exc_info.value)
