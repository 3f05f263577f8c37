"""Client for the messages-style generation service."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..logging import get_logger
from ..models import ChatMessage

_AUTO_API_KEY = object()


class GenerationError(RuntimeError):
    """Raised when the generation service cannot produce a reply."""


@dataclass
class GenerationRequest:
    """Represents one completion request."""

    messages: list[ChatMessage]
    system: Optional[str]
    model: str
    max_tokens: int
    base_url: str
    api_key: Optional[str]
    api_version: str
    request_timeout: Optional[float]


class GenerationClient:
    """Sends conversations to the generation service and returns the reply text."""

    DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    DEFAULT_API_VERSION = "2023-06-01"
    DEFAULT_MAX_TOKENS = 4096
    ENV_MODEL_KEYS = ("GENPREVIEW_MODEL",)
    ENV_BASE_URL_KEYS = ("GENPREVIEW_BASE_URL",)
    ENV_API_KEY_KEYS = ("GENPREVIEW_API_KEY", "ANTHROPIC_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None = None,
        api_key: str | None | object = _AUTO_API_KEY,
        api_version: str | None = None,
        max_tokens: Optional[int] = None,
        request_timeout: Optional[float] = 120.0,
        transport: Callable[[GenerationRequest], str] | None = None,
    ) -> None:
        self.model = model or self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        self.base_url = (
            base_url or self._first_env_value(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.api_key = self._resolve_api_key(api_key)
        self.api_version = api_version or self.DEFAULT_API_VERSION
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.request_timeout = request_timeout
        self._transport = transport or self._http_transport
        self.logger = get_logger("llm")

    @classmethod
    def from_config(cls, config, **kwargs) -> "GenerationClient":
        """Build a client from an ``LLMConfig``; unset values fall back to the environment."""
        options = dict(
            model=config.model,
            base_url=config.base_url,
            api_version=config.api_version,
            max_tokens=config.max_tokens,
        )
        if config.api_key:
            options["api_key"] = config.api_key
        if config.request_timeout is not None:
            options["request_timeout"] = config.request_timeout
        options.update(kwargs)
        return cls(**options)

    def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send ``messages`` and return the reply text."""
        if not messages:
            raise GenerationError("At least one message is required")
        request = GenerationRequest(
            messages=list(messages),
            system=system,
            model=self.model,
            max_tokens=max_tokens or self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            api_version=self.api_version,
            request_timeout=self.request_timeout,
        )
        self.logger.debug(
            "Requesting completion from %s (%d message(s), max_tokens=%d)",
            request.model,
            len(request.messages),
            request.max_tokens,
        )
        reply = self._transport(request)
        self.logger.debug("Received %d characters", len(reply))
        return reply

    @staticmethod
    def build_payload(request: GenerationRequest) -> dict[str, object]:
        return {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "messages": [
                {"role": message.role, "content": message.content} for message in request.messages
            ],
            "system": request.system or "",
        }

    @staticmethod
    def _http_transport(request: GenerationRequest) -> str:
        if not request.api_key:
            raise GenerationError(
                "No API key configured. Set GENPREVIEW_API_KEY or ANTHROPIC_API_KEY."
            )
        endpoint = f"{request.base_url}/messages"
        data = json.dumps(GenerationClient.build_payload(request)).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "x-api-key": request.api_key,
            "anthropic-version": request.api_version,
        }
        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or 120.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:  # pragma: no cover - depends on runtime
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise GenerationError(
                f"Generation service failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:  # pragma: no cover - depends on runtime
            raise GenerationError(f"Generation service unreachable: {exc.reason}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GenerationError("Generation service returned invalid JSON") from exc

        content = GenerationClient.extract_text(payload)
        if not content:
            raise GenerationError("Generation service returned an empty response")
        return content

    @staticmethod
    def extract_text(payload: object) -> str:
        """Return the text of the first content block, or an empty string."""
        if not isinstance(payload, dict):
            return ""
        blocks = payload.get("content")
        if not isinstance(blocks, list) or not blocks:
            return ""
        first = blocks[0]
        if not isinstance(first, dict):
            return ""
        text = first.get("text")
        return text if isinstance(text, str) else ""

    def _resolve_api_key(self, api_key: str | None | object) -> str | None:
        if api_key is _AUTO_API_KEY:
            return self._first_env_value(self.ENV_API_KEY_KEYS)
        return api_key  # type: ignore[return-value]

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


__all__ = ["GenerationClient", "GenerationError", "GenerationRequest"]
