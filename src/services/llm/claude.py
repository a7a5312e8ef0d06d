"""
Claude LLM provider implementation.

Uses the Anthropic SDK (``anthropic.AsyncAnthropic``) against the Messages
API. Claude has no JSON response format, so JSON mode prefills the
assistant turn with ``{`` and the reply continues the object from there.
SDK-level retries are disabled; transient failures are retried here with
tenacity, the same way the Groq provider does it.
"""

import logging

import httpx
from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import get_settings
from src.core.exceptions import ConfigurationError
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

_JSON_PREFILL = "{"


class ClaudeLLM(BaseLLM):
    """Anthropic Messages API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        api_key = api_key or settings.claude_api_key
        if not api_key:
            raise ConfigurationError("Claude API key is not configured on the server")
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        timeout = timeout or settings.request_timeout
        http_client = httpx.AsyncClient(transport=transport, timeout=timeout) if transport else None
        self._client = AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(self, request: dict) -> str:
        """Create a message and return its concatenated text blocks.

        Timeouts, connection failures, rate limits and 5xx answers become
        ``TimeoutError`` / ``ConnectionError`` and are retried. A rejected
        key is a ``ConfigurationError``; other API errors are ``RuntimeError``.
        """
        try:
            message = await self._client.messages.create(**request)
        except APITimeoutError as exc:
            logger.warning("Claude API timeout: %s", exc)
            raise TimeoutError(f"Claude API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("Claude API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
        except (AuthenticationError, PermissionDeniedError) as exc:
            logger.error("Claude API rejected the key (%s)", exc.status_code)
            raise ConfigurationError("Claude API key was rejected") from exc
        except RateLimitError as exc:
            logger.warning("Claude API rate limit hit")
            raise ConnectionError("Claude API rate limit exceeded") from exc
        except APIStatusError as exc:
            if exc.status_code >= 500:
                logger.warning("Claude API transient error (%s)", exc.status_code)
                raise ConnectionError(f"Claude API unavailable ({exc.status_code})") from exc
            logger.error("Claude API error (%s): %s", exc.status_code, exc.message)
            raise RuntimeError(f"Claude API error ({exc.status_code})") from exc

        if message.stop_reason == "max_tokens":
            logger.warning("Claude reply was cut off at %d tokens", request["max_tokens"])
        return "".join(block.text for block in message.content if block.type == "text")

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response; in JSON mode the reply starts with ``{``."""
        json_mode = kwargs.pop("json_mode", False)
        temperature = kwargs.pop("temperature", None)
        messages = [{"role": "user", "content": prompt}]
        if json_mode:
            messages.append({"role": "assistant", "content": _JSON_PREFILL})

        request: dict = {
            "model": self._model,
            "max_tokens": kwargs.pop("max_tokens", None) or self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
            "messages": messages,
        }
        system = kwargs.pop("system", None)
        if system:
            request["system"] = system

        text = await self._call_api(request)
        return _JSON_PREFILL + text if json_mode else text
