"""Brute-force cosine similarity search over precomputed note embeddings."""

import math
import re
from collections import Counter
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import aiofiles
from loguru import logger

from bases_bridge.config import BasesBridgeConfig
from bases_bridge.schemas import SearchRequest, SearchResponse, SearchResult
from bases_bridge.semantic.embedding_provider_factory import (
    QueryEmbedderSelection,
    create_embedding_provider,
)
from bases_bridge.semantic.semantic_errors import (
    EmbeddingDimensionMismatchError,
    NoEmbeddingsFoundError,
    SemanticSearchDisabledError,
)
from bases_bridge.semantic.vectors import VectorCache, VectorRecord, detect_ollama_base_url

type EmbedderFactory = Callable[..., QueryEmbedderSelection]


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity over the common prefix of a and b; 0 when either norm is 0."""
    length = min(len(a), len(b))
    dot = norm_a = norm_b = 0.0
    for i in range(length):
        dot += a[i] * b[i]
        norm_a += a[i] * a[i]
        norm_b += b[i] * b[i]
    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    return 0.0 if denominator == 0 else dot / denominator


def dominant_dimension(records: List[VectorRecord]) -> int:
    counts = Counter(len(r.vec) for r in records if r.vec)
    return counts.most_common(1)[0][0] if counts else 0


def dominant_model(records: List[VectorRecord]) -> Optional[str]:
    counts = Counter(r.model for r in records if r.model)
    return counts.most_common(1)[0][0] if counts else None


def resolve_note_path(note_path: str, vault_root: Path) -> Path:
    """Absolute path of a note, mapping Windows drive paths to their WSL mount."""
    text = note_path.strip()
    if re.match(r"^[A-Za-z]:[\\/]", text):
        rest = text[2:].replace("\\", "/")
        return Path(f"/mnt/{text[0].lower()}{'' if rest.startswith('/') else '/'}{rest}")
    path = Path(text)
    return path if path.is_absolute() else vault_root / text


class SemanticSearchService:
    """Ranks embedded notes by cosine similarity to an embedded query."""

    def __init__(
        self,
        config: BasesBridgeConfig,
        cache: Optional[VectorCache] = None,
        embedder_factory: EmbedderFactory = create_embedding_provider,
    ):
        self.config = config
        self.cache = cache
        if self.cache is None and config.smart_env_dir:
            self.cache = VectorCache(config.smart_env_dir, config.vector_cache_ttl_ms)
        self.embedder_factory = embedder_factory

    async def search(self, request: SearchRequest) -> SearchResponse:
        """
        Embed the query and rank the vault's vectors against it.

        Raises:
            SemanticSearchDisabledError: If search is disabled or no embeddings directory is set
            NoEmbeddingsFoundError: If the directory holds no usable vectors
            EmbeddingDimensionMismatchError: If the query vector does not match the vault dimension
        """
        if self.cache is None or not self.config.smart_env_dir:
            raise SemanticSearchDisabledError("smart_env_dir is not configured")
        if not self.config.semantic_search_enabled:
            raise SemanticSearchDisabledError("Semantic search is disabled (semantic_search_enabled=false)")

        query = request.query.strip()
        if not query:
            return SearchResponse()

        records = await self.cache.get_records()
        dimension = dominant_dimension(records)
        if not dimension:
            raise NoEmbeddingsFoundError("Embeddings are missing vector data")
        candidates = [r for r in records if len(r.vec) == dimension]
        model = dominant_model(candidates)

        ollama_base_url = (self.config.ollama_base_url or "").strip() or detect_ollama_base_url(
            self.config.smart_env_dir, model
        )
        selection = self.embedder_factory(
            self.config, vault_model=model, dimension=dimension, ollama_base_url=ollama_base_url
        )
        query_vector = await selection.embedder.embed_query(query)
        if len(query_vector) != dimension:
            raise EmbeddingDimensionMismatchError(len(query_vector), dimension)

        if request.folders:
            candidates = [r for r in candidates if any(r.note_path.startswith(f) for f in request.folders)]
        if request.tags:
            wanted = set(request.tags)
            candidates = [r for r in candidates if wanted.intersection(r.tags)]

        scored = [(cosine(query_vector, r.vec), r) for r in candidates]
        scored.sort(key=lambda pair: pair[0], reverse=True)

        results: List[SearchResult] = []
        for score, record in scored[: request.top_k]:
            snippet = await self.read_snippet(record.note_path) if request.with_snippets else None
            results.append(SearchResult(path=record.note_path, score=score, title=record.title, snippet=snippet))

        logger.debug(
            f"Semantic search provider={selection.provider} model={selection.model} "
            f"candidates={len(candidates)} results={len(results)}"
        )
        return SearchResponse(
            model=model,
            dim=dimension,
            query_provider=selection.provider,
            query_model=selection.model,
            query_dim=len(query_vector),
            ollama_base_url=ollama_base_url if selection.provider == "ollama" else None,
            results=results,
        )

    async def read_snippet(self, note_path: str) -> Optional[str]:
        path = resolve_note_path(note_path, self.config.vault_root)
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                return await f.read(self.config.snippet_length)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No snippet for {note_path}: {e}")
            return None
