"""HTTP implementation of GenerativeAIClient for Google Gemini."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import record_ai_failure, track_ai_latency
from src.domain.exceptions import AIServiceException, AIServiceTimeoutException
from src.domain.interfaces import GenerativeAIClient
from .gemini_demo import demo_response

logger = structlog.get_logger(__name__)

PLACEHOLDER_KEYS = {"", "your_gemini_api_key_here"}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]


class GeminiClient(GenerativeAIClient):
    """
    HTTP client for the Gemini ``generateContent`` endpoint.

    Retries timeouts, 429s and 5xx responses with exponential backoff.
    Without an API key every request is answered from canned demo
    responses.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = settings.gemini_api_key if api_key is None else api_key
        self._base_url = (base_url or settings.gemini_api_url).rstrip("/")
        self._model = model or settings.gemini_model
        self._timeout = timeout or settings.gemini_timeout
        self._max_retries = max_retries or settings.gemini_max_retries
        self._transport = transport

        if not self.is_configured:
            logger.warning("gemini_api_key_not_configured", mode="demo")

    @property
    def is_configured(self) -> bool:
        return self._api_key not in PLACEHOLDER_KEYS

    async def generate(
        self,
        parts: List[Dict[str, Any]],
        temperature: float = 0.7,
    ) -> str:
        """
        Send one user turn to Gemini and return the first candidate's text.

        Implements retry logic with exponential backoff.
        """
        if not self.is_configured:
            logger.debug("gemini_demo_response")
            return demo_response(parts)

        url = f"{self._base_url}/models/{self._model}:generateContent"
        body = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": temperature,
                "topK": 32,
                "topP": 1,
                "maxOutputTokens": 4096,
            },
            "safetySettings": SAFETY_SETTINGS,
        }

        last_exception: AIServiceException | None = None

        for attempt in range(self._max_retries):
            try:
                with track_ai_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout,
                        transport=self._transport,
                    ) as client:
                        response = await client.post(
                            url,
                            params={"key": self._api_key},
                            json=body,
                        )

                if response.status_code == 429 or response.status_code >= 500:
                    record_ai_failure("http_error")
                    last_exception = AIServiceException(
                        message=f"Gemini API error: {response.status_code}",
                        status_code=response.status_code,
                    )
                    logger.warning(
                        "gemini_api_retryable_error",
                        status_code=response.status_code,
                        attempt=attempt + 1,
                        max_retries=self._max_retries,
                    )
                elif response.status_code >= 400:
                    record_ai_failure("http_error")
                    logger.error(
                        "gemini_api_error",
                        status_code=response.status_code,
                        body=response.text[:500],
                    )
                    raise AIServiceException(
                        message=f"Gemini API error: {response.status_code}",
                        status_code=response.status_code,
                    )
                else:
                    return self._extract_text(response)

            except httpx.TimeoutException:
                record_ai_failure("timeout")
                last_exception = AIServiceTimeoutException()
                logger.warning(
                    "gemini_api_timeout",
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except httpx.TransportError as e:
                record_ai_failure("transport")
                last_exception = AIServiceException(message=f"Gemini unreachable: {e}")
                logger.warning(
                    "gemini_api_unreachable",
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or AIServiceException("Gemini request failed")

    def _extract_text(self, response: httpx.Response) -> str:
        try:
            data = response.json()
            return data["candidates"][0]["content"]["parts"][0].get("text") or ""
        except (ValueError, KeyError, IndexError, TypeError):
            record_ai_failure("malformed")
            logger.error("gemini_invalid_response", body=response.text[:500])
            raise AIServiceException("Invalid response format from Gemini API")
