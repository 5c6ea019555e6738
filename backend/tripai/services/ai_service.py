import json
import logging
import httpx
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

from tripai.errors import GenerationFailed, QuotaExceeded

logger = logging.getLogger(__name__)

# Markers Gemini uses when a project runs out of quota
QUOTA_MARKERS = ("quota", "resource_exhausted", "rate limit")


class AIBackend(ABC):
    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` to the provider and return the raw response text.

        Implementations raise QuotaExceeded when the provider reports quota
        exhaustion and GenerationFailed for every other provider fault.
        """


def _looks_like_quota(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in QUOTA_MARKERS)


class GeminiBackend(AIBackend):
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.8,
        max_output_tokens: int = 8192,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout

    def _request_json(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def complete(self, prompt: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/models/{self.model}:generateContent",
                    headers={
                        "x-goog-api-key": self.api_key,
                        "Content-Type": "application/json",
                    },
                    json=self._request_json(prompt),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429 or _looks_like_quota(e.response.text):
                logger.warning(f"Gemini quota exhausted (HTTP {status})")
                raise QuotaExceeded()
            logger.error(f"Gemini request failed: HTTP {status}")
            raise GenerationFailed()
        except httpx.HTTPError as e:
            logger.error(f"Gemini transport error: {type(e).__name__}: {e}")
            raise GenerationFailed()
        except json.JSONDecodeError:
            logger.error("Gemini returned a non-JSON envelope")
            raise GenerationFailed()

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            reason = ""
            if isinstance(data, dict):
                reason = str((data.get("promptFeedback") or {}).get("blockReason", ""))
            logger.error(f"Gemini response had no candidate text {reason}".strip())
            raise GenerationFailed()


def build_backend(settings) -> Optional[AIBackend]:
    """Build the provider backend from settings, or None when no key is set."""
    api_key = (settings.gemini_api_key or "").strip()
    if not api_key:
        return None
    return GeminiBackend(
        api_key=api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        temperature=settings.ai_temperature,
        max_output_tokens=settings.ai_max_output_tokens,
        timeout=settings.ai_timeout_seconds,
    )
