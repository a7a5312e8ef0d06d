"""
Groq LLM provider implementation.

Talks to Groq's OpenAI-compatible ``/chat/completions`` endpoint with
``httpx.AsyncClient``. Supports JSON mode through ``response_format`` and
retries transient transport errors.
"""

import logging

import httpx
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


class GroqLLM(BaseLLM):
    """Groq chat-completions provider with retry logic."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.2,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.groq_api_key
        if not self._api_key:
            raise ConfigurationError("Groq API key is not configured on the server")
        self._model = model or settings.groq_llm_model
        self._base_url = (base_url or settings.groq_base_url).rstrip("/")
        self._temperature = temperature
        self._timeout = timeout or settings.request_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=self._timeout,
            transport=self._transport,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(self, payload: dict) -> str:
        """POST a chat completion request and return the message content.

        httpx errors are translated to ``ConnectionError`` / ``TimeoutError``
        for transient failures and ``RuntimeError`` for everything else.
        """
        try:
            async with self._client() as client:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                data = response.json()
            return data["choices"][0]["message"]["content"] or ""

        except httpx.TimeoutException as exc:
            logger.warning("Groq API timeout: %s", exc)
            raise TimeoutError(f"Groq API request timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 429 or status >= 500:
                logger.warning("Groq API transient error (%s): %s", status, exc)
                raise ConnectionError(f"Groq API unavailable ({status})") from exc
            logger.error("Groq API error (%s): %s", status, exc.response.text[:200])
            raise RuntimeError(f"Groq API error ({status})") from exc
        except httpx.TransportError as exc:
            logger.warning("Groq API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to Groq API: {exc}") from exc
        except (KeyError, IndexError, ValueError) as exc:
            logger.error("Unexpected Groq API response: %s", exc)
            raise RuntimeError(f"Groq API error: {exc}") from exc

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response, optionally constrained to a JSON object."""
        messages: list[dict[str, str]] = []
        system = kwargs.pop("system", None)
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        temperature = kwargs.pop("temperature", None)
        payload: dict = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self._temperature,
        }
        max_tokens = kwargs.pop("max_tokens", None)
        if max_tokens:
            payload["max_tokens"] = max_tokens
        if kwargs.pop("json_mode", False):
            payload["response_format"] = {"type": "json_object"}
        return await self._call_api(payload)
