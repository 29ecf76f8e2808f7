"""
LLM Service

Dispatches prompts to the configured provider (OpenAI, Anthropic, Mock) and
maps provider failures onto application errors.
"""

import asyncio
import json
import re
from typing import Any, Optional

import anthropic
import openai

from app.core.config import settings
from app.core.errors import ExternalServiceError, PaymentRequiredError, RateLimitError
from app.core.logging import get_logger
from app.services.llm_clients.anthropic_client import AnthropicClient
from app.services.llm_clients.openai_client import OpenAIClient

logger = get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: Optional[str]) -> Optional[dict]:
    """
    Pull the outermost {...} block out of a model response.
    Returns None when there is no block or it does not parse to an object.
    """
    if not text:
        return None
    match = _JSON_OBJECT.search(text)
    if not match:
        return None
    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def as_str_list(value: Any) -> list[str]:
    """List fields from a model response; anything that is not a list becomes []"""
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def _status_code(exc: Exception) -> Optional[int]:
    return getattr(exc, "status_code", None)


class LLMService:
    def __init__(self, provider: Optional[str] = None):
        self.provider = provider or settings.llm_provider
        self.openai = OpenAIClient()
        self.anthropic = AnthropicClient()

    @property
    def is_mock(self) -> bool:
        if self.provider == "MOCK":
            return True
        if self.provider == "OPENAI":
            return self.openai.client is None
        return self.anthropic.client is None

    async def complete(
        self,
        system: str,
        user: str,
        json_mode: bool = False,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Run one system+user prompt and return the raw text answer"""
        if self.is_mock:
            return await self._mock_complete(user, json_mode)

        try:
            if self.provider == "ANTHROPIC":
                return await self.anthropic.create_message(
                    system=system,
                    user=user,
                    max_tokens=max_tokens,
                    temperature=settings.llm_temperature,
                )
            return await self.openai.chat_completion(
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=settings.llm_temperature,
                json_mode=json_mode,
            )
        except (openai.RateLimitError, anthropic.RateLimitError) as e:
            raise RateLimitError("Rate limit exceeded. Please try again later.") from e
        except (openai.APIError, anthropic.APIError) as e:
            if _status_code(e) == 402:
                raise PaymentRequiredError("Usage limit reached. Please add credits.") from e
            raise ExternalServiceError(
                f"{self.provider.title()} request failed",
                details={"status_code": _status_code(e)},
            ) from e

    async def _mock_complete(self, user: str, json_mode: bool) -> str:
        await asyncio.sleep(0)
        if json_mode:
            return "{}"
        return f"[MOCK] {user[:500]}"


_llm_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service
