"""FastEmbed-based local query embedder."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

from bases_bridge.semantic.embedding_provider import EmbeddingProvider
from bases_bridge.semantic.semantic_errors import SemanticDependenciesMissingError

if TYPE_CHECKING:
    from fastembed import TextEmbedding  # type: ignore[import-not-found]  # pragma: no cover


def resolve_fastembed_model(
    hint: Optional[str] = None,
    dimension: Optional[int] = None,
    vault_model: Optional[str] = None,
) -> str:
    """
    Pick a local model whose vectors are comparable with the vault's.

    A HuggingFace id recorded by the vault is used as is. Otherwise the hint,
    the vault model name and the vector dimension select a known model.
    """
    if vault_model and "/" in vault_model and " " not in vault_model:
        return vault_model.removeprefix("Xenova/") if vault_model.startswith("Xenova/bge") else vault_model

    h = (hint or "").lower()
    m = (vault_model or "").lower()

    def mentions(*words: str) -> bool:
        return any(w in h or w in m for w in words)

    if mentions("snowflake", "arctic"):
        if dimension == 1024 or mentions("embed2"):
            return "snowflake/snowflake-arctic-embed-l"
        return "snowflake/snowflake-arctic-embed-xs"
    if mentions("e5"):
        if mentions("multi"):
            return "intfloat/multilingual-e5-large"
        return "BAAI/bge-small-en-v1.5"
    if ("bge" in h and "384" in h) or "bge-small" in m or dimension == 384:
        return "BAAI/bge-small-en-v1.5"
    if dimension == 768 or mentions("bge-base"):
        return "BAAI/bge-base-en-v1.5"
    if dimension == 1024 or mentions("bge-m3", "bge-large"):
        return "BAAI/bge-large-en-v1.5"
    return "BAAI/bge-small-en-v1.5"


class FastEmbedEmbeddingProvider(EmbeddingProvider):
    """Local ONNX embedding provider backed by FastEmbed."""

    _MODEL_ALIASES = {
        "bge-small-en-v1.5": "BAAI/bge-small-en-v1.5",
        "bge-base-en-v1.5": "BAAI/bge-base-en-v1.5",
    }

    def __init__(
        self,
        model_name: str = "bge-small-en-v1.5",
        *,
        batch_size: int = 64,
        dimensions: int = 384,
    ) -> None:
        self.model_name = model_name
        self.dimensions = dimensions
        self.batch_size = batch_size
        self._model: TextEmbedding | None = None
        self._model_lock = asyncio.Lock()

    async def _load_model(self) -> "TextEmbedding":
        if self._model is not None:
            return self._model

        async with self._model_lock:
            if self._model is not None:
                return self._model

            def _create_model() -> "TextEmbedding":
                try:
                    from fastembed import TextEmbedding  # type: ignore[import-not-found]
                except ImportError as exc:  # pragma: no cover - exercised via tests with monkeypatch
                    raise SemanticDependenciesMissingError(
                        "fastembed package is missing. "
                        "Install the semantic extra: pip install 'bases-bridge[semantic]'"
                    ) from exc
                resolved_model_name = self._MODEL_ALIASES.get(self.model_name, self.model_name)
                return TextEmbedding(model_name=resolved_model_name)

            self._model = await asyncio.to_thread(_create_model)
            return self._model

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        model = await self._load_model()

        def _embed_batch() -> list[list[float]]:
            vectors = list(model.embed(texts, batch_size=self.batch_size))
            normalized: list[list[float]] = []
            for vector in vectors:
                values = vector.tolist() if hasattr(vector, "tolist") else vector
                normalized.append([float(value) for value in values])
            return normalized

        return await asyncio.to_thread(_embed_batch)

    async def embed_query(self, text: str) -> list[float]:
        vectors = await self.embed_documents([text.strip()])
        return vectors[0] if vectors else []
