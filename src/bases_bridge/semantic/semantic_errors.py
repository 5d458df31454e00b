"""Typed errors for semantic search configuration and dependency failures."""


class SemanticSearchError(RuntimeError):
    """Base class for semantic search failures."""


class SemanticSearchDisabledError(SemanticSearchError):
    """Raised when semantic search is requested but disabled or not configured."""


class SemanticDependenciesMissingError(SemanticSearchError):
    """Raised when a semantic search dependency is unavailable or misconfigured."""


class NoEmbeddingsFoundError(SemanticSearchError):
    """Raised when the embeddings directory holds no usable vectors."""


class EmbeddingDimensionMismatchError(SemanticSearchError):
    """Raised when the query embedder produces vectors of the wrong size for the vault."""

    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(f"Query embedder produced {actual} dimensions, expected {expected}")
