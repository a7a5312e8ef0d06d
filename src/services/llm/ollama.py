"""
Ollama LLM provider implementation.

Uses ``ollama.AsyncClient`` against a locally running Ollama server. JSON
mode maps to Ollama's ``format="json"``. A model that has not been pulled
is a configuration problem, not something worth retrying.
"""

import logging

import httpx
from ollama import AsyncClient, ResponseError
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


class OllamaLLM(BaseLLM):
    """Local Ollama chat provider with retry logic."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.2,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._temperature = temperature
        client_kwargs: dict = {"timeout": timeout or settings.request_timeout}
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = AsyncClient(host=self._base_url, **client_kwargs)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(self, request: dict) -> str:
        """Send a non-streaming chat request and return the reply text."""
        try:
            response = await self._client.chat(**request)
        except httpx.TimeoutException as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise TimeoutError(f"Ollama request timed out ({self._base_url})") from exc
        except (ConnectionError, httpx.TransportError) as exc:
            logger.warning("Ollama unreachable at %s: %s", self._base_url, exc)
            raise ConnectionError(f"Failed to connect to Ollama at {self._base_url}") from exc
        except ResponseError as exc:
            if exc.status_code == 404:
                raise ConfigurationError(
                    f"Ollama model '{self._model}' is not available; run `ollama pull {self._model}`"
                ) from exc
            if exc.status_code >= 500:
                logger.warning("Ollama server error (%s): %s", exc.status_code, exc.error)
                raise ConnectionError(f"Ollama unavailable ({exc.status_code})") from exc
            logger.error("Ollama error (%s): %s", exc.status_code, exc.error)
            raise RuntimeError(f"Ollama error ({exc.status_code})") from exc
        return response.message.content or ""

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response, optionally constrained to a JSON object."""
        messages: list[dict[str, str]] = []
        system = kwargs.pop("system", None)
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        temperature = kwargs.pop("temperature", None)
        options: dict = {
            "temperature": temperature if temperature is not None else self._temperature
        }
        max_tokens = kwargs.pop("max_tokens", None)
        if max_tokens:
            options["num_predict"] = max_tokens

        request: dict = {"model": self._model, "messages": messages, "options": options}
        if kwargs.pop("json_mode", False):
            request["format"] = "json"
        return await self._call_api(request)
