"""Async client for the local Ollama HTTP API."""

from typing import Any

import httpx

from challenge_generator.exceptions import (
    ModelRequestError,
    ModelTimeoutError,
    ModelUnavailableError,
)
from challenge_generator.logging_config import get_logger

logger = get_logger(__name__)


class OllamaClient:
    """
    Thin wrapper over ``/api/chat`` and ``/api/tags``.

    Holds one ``httpx.AsyncClient`` for the life of the process; it keeps no
    per-request state so concurrent generations can share it. Transport
    failures are translated into ChallengeGenerationError subclasses with
    operator-facing messages.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds, connect=10.0),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.ConnectTimeout as e:
            logger.error("ollama_unreachable", base_url=self.base_url, error=str(e))
            raise ModelUnavailableError(self.base_url) from e
        except httpx.TimeoutException as e:
            logger.error("ollama_timeout", path=path, timeout_seconds=self.timeout_seconds)
            raise ModelTimeoutError(self.timeout_seconds) from e
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.error(
                "ollama_http_error",
                path=path,
                status_code=e.response.status_code,
                detail=detail,
            )
            raise ModelRequestError(e.response.status_code, detail) from e
        except httpx.RequestError as e:
            logger.error("ollama_unreachable", base_url=self.base_url, error=str(e))
            raise ModelUnavailableError(self.base_url) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("ollama_invalid_body", path=path, body_length=len(response.text))
            raise ModelRequestError(response.status_code, "response body was not JSON") from e

        if not isinstance(data, dict):
            logger.error("ollama_invalid_body", path=path, body_type=type(data).__name__)
            raise ModelRequestError(response.status_code, "unexpected response shape")
        return data

    async def chat(
        self,
        messages: list[dict[str, str]],
        options: dict[str, Any],
        response_format: str | None = "json",
    ) -> str:
        """Run one non-streaming chat completion and return the message text."""
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": options,
        }
        if response_format:
            payload["format"] = response_format

        data = await self._request("POST", "/api/chat", json=payload)
        message = data.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else ""

    async def list_models(self) -> list[str]:
        data = await self._request("GET", "/api/tags")
        models = data.get("models")
        if not isinstance(models, list):
            return []
        return [
            entry["name"]
            for entry in models
            if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        ]


def _error_detail(response: httpx.Response) -> str:
    """Ollama reports failures as ``{"error": "..."}``."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase
