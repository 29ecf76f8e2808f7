"""
Anthropic Client wrapper

Messages API for tender analysis and long-form offer drafting.
"""

from typing import Optional

from anthropic import AsyncAnthropic

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class AnthropicClient:
    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.anthropic_api_key
        self.client = AsyncAnthropic(api_key=self.api_key) if self.api_key else None

    async def create_message(
        self,
        system: str,
        user: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = 0.3,
    ) -> str:
        """Single-turn message; returns the concatenated text blocks"""
        if not self.client:
            raise ValueError("Anthropic API key not provided")

        try:
            response = await self.client.messages.create(
                model=model or settings.anthropic_model,
                max_tokens=max_tokens or settings.anthropic_max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except Exception as e:
            logger.error(f"Anthropic Messages Error: {e}")
            raise

        return "".join(block.text for block in response.content if hasattr(block, "text"))
