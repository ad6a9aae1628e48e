"""Async client for an OpenAI-compatible chat completions API."""
from typing import List, Dict, Optional, Any
import json

import httpx
import structlog

from challengeforge.core.config import Settings, settings as default_settings
from challengeforge.shared_kernel.exceptions import ExternalServiceError

logger = structlog.get_logger(__name__)


class AIProviderError(ExternalServiceError):
    """Failure reported by (or while reaching) the AI provider.

    ``code`` is the provider code the circuit breaker filters on;
    ``status`` is the HTTP status when there was a response.
    """

    domain = "ai_provider"

    def __init__(self, message: str, code: Optional[str] = None, *, status: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, code, **kwargs)
        self.status = status
        if status is not None:
            self.metadata.setdefault("status", status)


def _default_code(status: int) -> str:
    if status == 429:
        return "rate_limit_exceeded"
    if status >= 500:
        return "server_error"
    if status in (401, 403):
        return "authentication_error"
    return "invalid_request"


class AIProviderClient:
    """Async client for chat completions; use it through the circuit breaker proxy."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or default_settings
        self.api_key = settings.AI_API_KEY
        self.base_url = settings.AI_API_BASE.rstrip("/")
        self.model = settings.AI_MODEL
        self.timeout = settings.AI_TIMEOUT

    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 2000,
        model: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
        return_full: bool = False,
    ) -> Any:
        """Call chat completions and return the assistant content."""
        payload = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            payload["response_format"] = response_format
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        timeout = httpx.Timeout(self.timeout, read=self.timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                )
            except httpx.TimeoutException as exc:
                raise AIProviderError("AI provider request timed out", code="timeout", cause=exc) from exc
            except httpx.HTTPError as exc:
                raise AIProviderError(
                    "AI provider connection error. Please retry in a moment.",
                    code="connection_error",
                    cause=exc,
                ) from exc

            if response.status_code != 200:
                raise self._error_from_response(response)

            try:
                result = response.json()
                message = result["choices"][0]["message"]
            except (ValueError, KeyError, IndexError, TypeError) as exc:
                raise AIProviderError(
                    "AI provider returned an unexpected payload",
                    code="invalid_response",
                    status=response.status_code,
                    cause=exc,
                ) from exc
            if return_full:
                return message
            return message.get("content", "")

    async def chat_json(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        max_tokens: int = 2000,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Request a JSON object response and decode it."""
        content = await self.chat(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            model=model,
            response_format={"type": "json_object"},
        )
        text = (content or "").strip()
        if text.startswith("```"):
            text = text.strip("`")
            if text.lower().startswith("json"):
                text = text[4:]
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise AIProviderError(
                "AI provider returned invalid JSON", code="invalid_response", cause=exc
            ) from exc
        if not isinstance(data, dict):
            raise AIProviderError("AI provider returned a non-object JSON document", code="invalid_response")
        return data

    @staticmethod
    def _error_from_response(response: Any) -> AIProviderError:
        status = response.status_code
        body_code = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            body_code = body["error"].get("code") or body["error"].get("type")
        code = str(body_code) if body_code else _default_code(status)
        logger.warning("ai_provider_error", status=status, code=code)
        return AIProviderError(
            f"AI provider error ({status}): {response.text}",
            code=code,
            status=status,
        )
