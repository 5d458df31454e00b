"""Schemas for semantic search over precomputed note embeddings."""

from typing import List, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Similarity search request."""

    query: str = Field(..., min_length=2, description="Natural language query")
    top_k: int = Field(20, ge=1, le=100, description="Maximum number of results")
    folders: Optional[List[str]] = Field(None, description="Only notes under one of these folders")
    tags: Optional[List[str]] = Field(None, description="Only notes carrying one of these tags")
    with_snippets: bool = Field(True, description="Include the first characters of each note")


class SearchResult(BaseModel):
    path: str
    score: float
    title: Optional[str] = None
    snippet: Optional[str] = None


class SearchResponse(BaseModel):
    """Ranked results plus the vector space and embedder that produced them."""

    model: Optional[str] = Field(None, description="Dominant embedding model in the vault")
    dim: Optional[int] = Field(None, description="Dimension of the vault vectors")
    query_provider: Optional[str] = None
    query_model: Optional[str] = None
    query_dim: Optional[int] = None
    ollama_base_url: Optional[str] = None
    results: List[SearchResult] = Field(default_factory=list)
