"""Minimal Gemini `generateContent` wrapper used for text moderation."""

from __future__ import annotations

from typing import Any

import httpx

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiError(Exception):
    """Base exception for Gemini client errors."""


class GeminiRequestError(GeminiError):
    """Raised when Gemini API request fails."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class GeminiResponseError(GeminiError):
    """Raised when Gemini response shape cannot be parsed."""


class GeminiClient:
    """
    Thin client for Gemini `generateContent` with a single text prompt.

    One POST per call. No retries and no timeout override: callers treat a
    slow or failed call as the provider being unavailable.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{GEMINI_BASE_URL}/{self.model}:generateContent"

    async def generate_text(self, prompt: str) -> str:
        """Send one prompt and return the first candidate's text part."""
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt}
                    ]
                }
            ]
        }
        headers = {"x-goog-api-key": self.api_key}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(self.url, headers=headers, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GeminiRequestError(503, f"Gemini request failed: {exc}") from exc

        if not response.is_success:
            raise GeminiRequestError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeminiResponseError("Invalid JSON from Gemini") from exc

        return self._parse_response(payload)

    def _parse_response(self, payload: Any) -> str:
        """Walk `candidates[0].content.parts[0].text`, checking each level's type."""
        if not isinstance(payload, dict):
            raise GeminiResponseError("Gemini response is not an object")

        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise GeminiResponseError("Gemini response missing candidates")

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise GeminiResponseError("Gemini candidate is not an object")

        content = candidate.get("content")
        if not isinstance(content, dict):
            raise GeminiResponseError("Gemini candidate missing content")

        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            raise GeminiResponseError("Gemini response missing content parts")

        part = parts[0]
        text = part.get("text") if isinstance(part, dict) else None
        if not isinstance(text, str):
            raise GeminiResponseError("Gemini response part has no text")

        return text
