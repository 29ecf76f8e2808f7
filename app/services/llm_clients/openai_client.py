"""
OpenAI Client wrapper

Chat completions for summarization and drafting, and embeddings for the
knowledge index.
"""

from typing import List, Optional

from openai import AsyncOpenAI

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Inputs per embeddings request
EMBEDDING_BATCH_SIZE = 64


class OpenAIClient:
    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.openai_api_key
        self.client = AsyncOpenAI(api_key=self.api_key) if self.api_key else None

    def _require_client(self) -> AsyncOpenAI:
        if not self.client:
            raise ValueError("OpenAI API key not provided")
        return self.client

    async def get_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embeddings for many texts, requested in batches, in input order"""
        client = self._require_client()
        vectors: List[List[float]] = []
        for start in range(0, len(texts), EMBEDDING_BATCH_SIZE):
            batch = texts[start:start + EMBEDDING_BATCH_SIZE]
            try:
                response = await client.embeddings.create(
                    input=batch, model=settings.openai_embedding_model
                )
            except Exception as e:
                logger.error(f"OpenAI embedding request failed ({len(batch)} inputs): {e}")
                raise
            vectors.extend(item.embedding for item in sorted(response.data, key=lambda d: d.index))
        return vectors

    async def get_embedding(self, text: str) -> List[float]:
        return (await self.get_embeddings([text]))[0]

    async def chat_completion(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.3,
        json_mode: bool = False,
    ) -> str:
        client = self._require_client()
        kwargs = {
            "model": model or settings.openai_model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(f"OpenAI chat request failed: {e}")
            raise

        choice = response.choices[0]
        if choice.finish_reason == "length":
            logger.warning("OpenAI answer was cut off at the token limit")
        return choice.message.content or ""
