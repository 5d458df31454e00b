"""OpenAI-based query embedder."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from bases_bridge.semantic.embedding_provider import EmbeddingProvider
from bases_bridge.semantic.semantic_errors import SemanticDependenciesMissingError


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    Query embedder calling OpenAI's embeddings API or a compatible server.

    `dimensions` is only sent when set, so `text-embedding-3-*` vectors can be
    shortened to match the vault; otherwise the model's native size is learned
    from the first response.
    """

    def __init__(
        self,
        model_name: str = "text-embedding-3-small",
        *,
        batch_size: int = 64,
        dimensions: int | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.model_name = model_name
        self.requested_dimensions = dimensions
        self.dimensions = dimensions or 0
        self.batch_size = batch_size
        self._client_options = {"api_key": api_key, "base_url": base_url, "timeout": timeout}
        self._client: Any | None = None

    def client(self) -> Any:
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as exc:  # pragma: no cover
                raise SemanticDependenciesMissingError(
                    "openai is not installed. Install the semantic extra: pip install 'bases-bridge[semantic]'"
                ) from exc

            options = dict(self._client_options)
            options["api_key"] = options["api_key"] or os.getenv("OPENAI_API_KEY")
            if not options["api_key"]:
                raise SemanticDependenciesMissingError("OpenAI query embedder requires an API key")
            self._client = AsyncOpenAI(**options)
            logger.debug(f"OpenAI client created for model {self.model_name}")
        return self._client

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        extra: dict[str, Any] = {"dimensions": self.requested_dimensions} if self.requested_dimensions else {}
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            response = await self.client().embeddings.create(model=self.model_name, input=batch, **extra)
            items = sorted(response.data, key=lambda item: int(item.index))
            if len(items) != len(batch):
                raise RuntimeError(f"OpenAI returned {len(items)} embeddings for {len(batch)} inputs")
            vectors.extend([float(value) for value in item.embedding] for item in items)

        if vectors and not self.dimensions:
            self.dimensions = len(vectors[0])
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        text = text.strip()
        if not text:
            return []
        vectors = await self.embed_documents([text])
        return vectors[0] if vectors else []
