"""Client for an OpenAI-compatible chat completion API."""

import logging
from typing import Any

import httpx

from scalp_app.errors import AnalysisUnavailableError

logger = logging.getLogger(__name__)

NO_ANALYSIS_TEXT = "Analiz tapılmadı."


class ChatCompletionClient:
    """Sends a system + user prompt and returns the generated text."""

    def __init__(
        self,
        url: str,
        api_key: str,
        model: str = "deepseek-chat",
        timeout: float = 20.0,
        temperature: float = 0.7,
        max_tokens: int = 400,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
        }

    @staticmethod
    def extract_text(body: Any) -> str:
        """Pull the first choice's message content, with a fixed fallback."""
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return NO_ANALYSIS_TEXT
        return content or NO_ANALYSIS_TEXT

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Request a completion.

        Raises:
            AnalysisUnavailableError: on network failure, timeout, non-2xx
                or a body that is not JSON
        """
        client = await self._get_client()
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await client.post(
                self.url,
                json=self._payload(system_prompt, user_prompt),
                headers=headers,
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            try:
                data = e.response.json()
            except ValueError:
                data = e.response.text
            logger.warning(f"Analysis API returned {e.response.status_code}")
            raise AnalysisUnavailableError(
                "Analysis request failed",
                status=e.response.status_code,
                data=data,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Analysis API request error: {e!r}")
            raise AnalysisUnavailableError("Analysis request failed") from e
        except ValueError as e:
            logger.warning("Analysis API returned a non-JSON body")
            raise AnalysisUnavailableError(
                "Analysis request failed",
                status=response.status_code,
                data=response.text,
            ) from e

        return self.extract_text(body)
