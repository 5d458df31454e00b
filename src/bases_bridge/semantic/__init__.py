"""Semantic search over precomputed note embeddings."""

from bases_bridge.semantic.embedding_provider import EmbeddingProvider
from bases_bridge.semantic.embedding_provider_factory import (
    QueryEmbedderSelection,
    create_embedding_provider,
)
from bases_bridge.semantic.search import SemanticSearchService, cosine
from bases_bridge.semantic.semantic_errors import (
    EmbeddingDimensionMismatchError,
    NoEmbeddingsFoundError,
    SemanticDependenciesMissingError,
    SemanticSearchDisabledError,
    SemanticSearchError,
)
from bases_bridge.semantic.vectors import VectorCache, VectorRecord, load_vector_records

__all__ = [
    "EmbeddingDimensionMismatchError",
    "EmbeddingProvider",
    "NoEmbeddingsFoundError",
    "QueryEmbedderSelection",
    "SemanticDependenciesMissingError",
    "SemanticSearchDisabledError",
    "SemanticSearchError",
    "SemanticSearchService",
    "VectorCache",
    "VectorRecord",
    "cosine",
    "create_embedding_provider",
    "load_vector_records",
]
