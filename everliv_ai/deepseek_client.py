"""
DeepSeek Client - HTTP client for the DeepSeek OpenAI-compatible
chat-completions API.

One POST per call, no retries. Failures are raised as DeepSeekError
subclasses for the caller to route to a fallback.
"""
import httpx
from typing import Optional

from .config import DeepSeekConfig
from .structured_logging import StructuredLogger

logger = StructuredLogger(__name__)

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 2000


class DeepSeekError(RuntimeError):
    """Base class for failed DeepSeek calls."""


class DeepSeekAPIError(DeepSeekError):
    """Non-2xx response, network failure or an unreadable response envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyCompletionError(DeepSeekError):
    """The response envelope had no choices[0].message.content."""


class DeepSeekClient:
    """Async HTTP client for DeepSeek chat completions."""

    def __init__(
        self,
        config: DeepSeekConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=config.timeout_seconds,
            transport=transport,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
        )

    def build_payload(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
    ) -> dict:
        payload = {
            "model": model or self.config.chat_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def complete(
        self,
        messages: list[dict],
        *,
        model: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
    ) -> str:
        """Send one chat-completion request and return the raw content.

        Args:
            messages: OpenAI-style message list
            model: Model id (defaults to the configured chat model)
            temperature: Sampling temperature
            max_tokens: Completion token ceiling
            json_mode: Ask for a strict JSON object response

        Returns:
            The content string of the first choice

        Raises:
            DeepSeekAPIError: transport failure or non-2xx status
            EmptyCompletionError: no content in the first choice
        """
        payload = self.build_payload(messages, model, temperature, max_tokens, json_mode)

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "DeepSeek HTTP error",
                status_code=e.response.status_code,
                error=e.response.text[:500],
            )
            raise DeepSeekAPIError(
                f"DeepSeek API error: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("DeepSeek connection error", error=str(e))
            raise DeepSeekAPIError(f"DeepSeek connection failed: {e}") from e

        try:
            data = response.json()
        except (ValueError, RecursionError) as e:
            raise DeepSeekAPIError(
                "DeepSeek returned a non-JSON response body",
                status_code=response.status_code,
            ) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not isinstance(content, str) or not content.strip():
            raise EmptyCompletionError("No content received from DeepSeek API")
        return content

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
