from __future__ import annotations

import json
import logging

import httpx

from core.config import DEFAULT_INSTRUCTION, NoteConfig
from core.errors import ApiError, ConfigurationError, NetworkError

logger = logging.getLogger(__name__)


def extract_content(data) -> str:
    """Pull ``choices[0].message.content`` out of a chat-completion body."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") if isinstance(first.get("message"), dict) else {}
    content = message.get("content")
    if not content:
        return ""
    return str(content).strip()


class CompletionClient:
    """One request, one response against an OpenAI-style chat endpoint."""

    def __init__(self, config: NoteConfig, http: httpx.Client | None = None):
        self.config = config
        self._http = http
        self._owns_http = http is None

    def _client(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=self.config.timeout)
        return self._http

    def build_request(self, instruction: str, content: str, system: str | None = None) -> tuple[dict, dict]:
        cfg = self.config
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {cfg.api_key}",
        }
        headers.update(cfg.extra_headers)
        payload = {
            "model": cfg.model,
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
            "messages": [
                {"role": "system", "content": str(system or cfg.system)},
                {"role": "user", "content": str(instruction or DEFAULT_INSTRUCTION)},
                {"role": "user", "content": f"\n\n{content or ''}"},
            ],
        }
        return headers, payload

    def complete(self, instruction: str, content: str, system: str | None = None) -> str:
        if not self.config.api_key:
            raise ConfigurationError("Missing apiKey in config.json")

        headers, payload = self.build_request(instruction, content, system)
        logger.debug(
            "POST %s model=%s chars=%d", self.config.endpoint, payload["model"], len(content or "")
        )
        try:
            response = self._client().post(self.config.endpoint, headers=headers, json=payload)
        except httpx.TransportError as exc:
            logger.warning("Completion request failed: %s", exc)
            raise NetworkError(f"Request to {self.config.endpoint} failed: {exc}") from exc

        if not response.is_success:
            try:
                body = response.text
            except Exception:
                body = ""
            logger.warning("Completion returned HTTP %s", response.status_code)
            raise ApiError(response.status_code, body or response.reason_phrase)

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ApiError(response.status_code, f"Response was not JSON: {exc}") from exc
        return extract_content(data)

    def close(self) -> None:
        if self._owns_http and self._http is not None:
            self._http.close()
            self._http = None
