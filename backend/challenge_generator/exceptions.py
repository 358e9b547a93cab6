"""Errors raised while generating a challenge.

Every message on a ``ChallengeGenerationError`` is safe to return to the API
caller. Diagnostic details (raw model output previews) live on attributes and
are only logged.
"""


class ChallengeGenerationError(Exception):
    """Base class for failures surfaced as ``{success: false, error: ...}``."""


class ModelUnavailableError(ChallengeGenerationError):
    def __init__(self, base_url: str):
        super().__init__(
            "Could not connect to Ollama. Make sure Ollama is running (try: ollama serve)"
        )
        self.base_url = base_url


class ModelTimeoutError(ChallengeGenerationError):
    def __init__(self, timeout_seconds: float):
        super().__init__(
            f"Ollama did not respond within {timeout_seconds:g} seconds. "
            "The model may be overloaded or still loading."
        )
        self.timeout_seconds = timeout_seconds


class ModelRequestError(ChallengeGenerationError):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"Ollama request failed with status {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class EmptyResponseError(ChallengeGenerationError):
    def __init__(self, length: int):
        super().__init__(
            f"Ollama returned an empty or too short response (length: {length}). "
            "The model may not be responding properly."
        )
        self.length = length


class ExtractionFailure(ChallengeGenerationError):
    def __init__(self, response_length: int, head_preview: str, tail_preview: str):
        super().__init__(
            "Failed to parse JSON response from Ollama. Check server logs for details."
        )
        self.response_length = response_length
        self.head_preview = head_preview
        self.tail_preview = tail_preview


class SchemaInvalidAfterRepair(ChallengeGenerationError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Generated challenge is invalid: {', '.join(errors)}")
        self.errors = errors


class SchemaLoadError(RuntimeError):
    """The challenge JSON Schema could not be loaded; the service cannot start."""
