"""Client wrapper for Gemini generateContent requests."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import GeminiConfig
from .exceptions import UpstreamError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper around the generateContent endpoint (single call, no retries)."""

    def __init__(self, config: GeminiConfig) -> None:
        self.config = config

    def generate(self, prompt: str) -> Optional[str]:
        """Send ``prompt`` and return the first candidate's text.

        Returns ``None`` when the upstream body has no usable text. Raises
        :class:`UpstreamError` on transport failures, non-2xx statuses and
        bodies that are not JSON.
        """
        payload = self.build_payload(prompt)
        logger.info("Requesting completion from %s (%d prompt chars)", self.config.endpoint, len(prompt))
        try:
            response = requests.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=payload,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            # The exception text can embed the request URL, which carries the key.
            raise UpstreamError(f"Transport failure: {type(exc).__name__}") from exc

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                f"HTTP {response.status_code}: {response.text}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Upstream response body is not valid JSON", status_code=response.status_code) from exc

        return self.extract_text(data)

    @staticmethod
    def build_payload(prompt: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    @staticmethod
    def extract_text(data: Any) -> Optional[str]:
        """Return ``candidates[0].content.parts[0].text`` or None if the path is missing."""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.debug("Unexpected upstream payload shape: %s", data)
            return None
        if not isinstance(text, str) or not text:
            return None
        return text
