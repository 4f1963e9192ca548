"""Chat client for the hosted language model (Gemini REST API over httpx)."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"


class AssistantError(Exception):
    """Raised when the model endpoint fails or returns no text."""


class AssistantClient(Protocol):
    def generate(self, contents: list[dict[str, Any]], *, system_instruction: str, temperature: float) -> str:
        raise NotImplementedError


class GeminiAssistantClient:
    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.5-flash",
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self._api_key = api_key
        self.model = model
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def generate(self, contents: list[dict[str, Any]], *, system_instruction: str, temperature: float) -> str:
        body = {
            "contents": contents,
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "generationConfig": {"temperature": temperature},
        }
        try:
            resp = self._client.post(
                f"/v1beta/models/{self.model}:generateContent",
                params={"key": self._api_key},
                json=body,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise AssistantError(f"assistant returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise AssistantError(f"assistant unreachable: {exc}") from exc

        data = resp.json()
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AssistantError("assistant response without candidates") from exc
        text = "".join(p.get("text", "") for p in parts)
        if not text:
            raise AssistantError("assistant response without text")
        return text
