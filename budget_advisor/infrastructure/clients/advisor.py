"""Language model HTTP client (OpenAI-compatible chat completions API)"""

import logging
from typing import Any, Dict, List

import httpx

from budget_advisor.config import settings
from budget_advisor.domain.exceptions import AdvisorAPIError, AdvisorNotConfiguredError

logger = logging.getLogger(__name__)


class AdvisorClient:
    """Client for the external chat completion API"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.advisor_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.advisor_api_key
        self.model = model or settings.advisor_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise AdvisorNotConfiguredError("Advisor API key not configured")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        Request a chat completion and return the assistant's text.

        Raises:
            AdvisorAPIError: On timeout, network failure, HTTP errors, or malformed response.
                The message keeps the remote error body so failures can be classified.
        """
        headers = self._headers()
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": settings.advisor_temperature,
            "max_tokens": settings.advisor_max_tokens,
            "stream": False,
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
                return data["choices"][0]["message"]["content"]

            except httpx.TimeoutException as e:
                raise AdvisorAPIError(f"Advisor API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                logger.error(
                    "Advisor API error",
                    extra={"status": e.response.status_code, "body": e.response.text},
                )
                raise AdvisorAPIError(
                    f"Advisor API error: {e.response.status_code} - {e.response.text}"
                ) from e
            except httpx.RequestError as e:
                raise AdvisorAPIError(f"Advisor API network error: {e}") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise AdvisorAPIError(f"Invalid response from advisor API: {e}") from e

    async def list_models(self) -> List[str]:
        """
        Lightweight connectivity probe: list available models.

        Raises:
            AdvisorAPIError: If the API is unreachable or rejects the key
        """
        headers = self._headers()

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/models", headers=headers)
                response.raise_for_status()
                return [m.get("id", "") for m in response.json().get("data", [])]

            except httpx.TimeoutException as e:
                raise AdvisorAPIError(f"Advisor API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AdvisorAPIError(
                    f"Advisor API health check failed: {e.response.status_code} - {e.response.text}"
                ) from e
            except httpx.RequestError as e:
                raise AdvisorAPIError(f"Advisor API network error: {e}") from e
            except (ValueError, AttributeError) as e:
                raise AdvisorAPIError(f"Invalid response from advisor API: {e}") from e
