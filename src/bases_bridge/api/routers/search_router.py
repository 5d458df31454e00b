"""Semantic search route."""

from fastapi import APIRouter
from loguru import logger

from bases_bridge.deps import SearchServiceDep
from bases_bridge.schemas import SearchRequest, SearchResponse

router = APIRouter(tags=["search"])


@router.post("/search", response_model=SearchResponse, response_model_exclude_none=True)
async def search(service: SearchServiceDep, request: SearchRequest) -> SearchResponse:
    """Rank notes by similarity to the query using precomputed embeddings."""
    logger.debug(f"Semantic search top_k={request.top_k} folders={request.folders} tags={request.tags}")
    return await service.search(request)
