"""Tests for semantic search ranking."""

import math
from pathlib import Path

import pytest

from bases_bridge.config import BasesBridgeConfig
from bases_bridge.schemas import SearchRequest
from bases_bridge.semantic.search import SemanticSearchService, cosine, resolve_note_path
from bases_bridge.semantic.semantic_errors import (
    EmbeddingDimensionMismatchError,
    SemanticSearchDisabledError,
)


@pytest.fixture
def search_config(vault_root, smart_env) -> BasesBridgeConfig:
    return BasesBridgeConfig(env="test", vault_path=str(vault_root), smart_env_dir=str(smart_env), snippet_length=10)


def test_cosine():
    assert cosine([1, 0], [1, 0]) == pytest.approx(1.0)
    assert cosine([1, 0], [0, 1]) == 0.0
    assert cosine([0, 0], [1, 1]) == 0.0
    assert cosine([1, 1], [1, 1, 5]) == pytest.approx(1.0)
    assert cosine([1, 2], [2, 4]) == pytest.approx(1.0)
    assert cosine([1, 0], [-1, 0]) == pytest.approx(-1.0)


def test_resolve_note_path():
    root = Path("/vault")
    assert resolve_note_path("Notes/A.md", root) == Path("/vault/Notes/A.md")
    assert resolve_note_path("/abs/A.md", root) == Path("/abs/A.md")
    assert resolve_note_path("C:\\Users\\me\\A.md", root) == Path("/mnt/c/Users/me/A.md")


@pytest.mark.asyncio
async def test_search_ranks_by_cosine(search_config, make_factory):
    calls: list[dict] = []
    service = SemanticSearchService(search_config, embedder_factory=make_factory([1.0, 0.0, 0.0], calls))

    response = await service.search(SearchRequest(query="project status"))

    assert [r.path for r in response.results] == ["A.md", "B.md", "Projects/C.md"]
    assert response.results[0].score == pytest.approx(1.0)
    assert response.results[1].score == pytest.approx(1 / math.sqrt(2))
    assert response.results[1].title == "Bee"
    assert response.results[0].snippet == "---\nstatus"
    assert response.model == "TaylorAI/bge-micro-v2"
    assert response.dim == 3
    assert response.query_provider == "fake"
    assert response.query_model == "fake-model"
    assert response.query_dim == 3
    assert response.ollama_base_url is None
    # The embedder is chosen for the dominant vector space
    assert calls[0]["vault_model"] == "TaylorAI/bge-micro-v2"
    assert calls[0]["dimension"] == 3


@pytest.mark.asyncio
async def test_search_filters_and_limits(search_config, make_factory):
    service = SemanticSearchService(search_config, embedder_factory=make_factory([1.0, 0.0, 0.0]))

    by_folder = await service.search(SearchRequest(query="xx", folders=["Projects/"]))
    assert [r.path for r in by_folder.results] == ["Projects/C.md"]

    by_tag = await service.search(SearchRequest(query="xx", tags=["urgent"]))
    assert [r.path for r in by_tag.results] == ["B.md"]

    top = await service.search(SearchRequest(query="xx", top_k=1, with_snippets=False))
    assert [r.path for r in top.results] == ["A.md"]
    assert top.results[0].snippet is None


@pytest.mark.asyncio
async def test_missing_note_has_no_snippet(search_config, vault_root, make_factory):
    (vault_root / "A.md").unlink()
    service = SemanticSearchService(search_config, embedder_factory=make_factory([1.0, 0.0, 0.0]))

    response = await service.search(SearchRequest(query="xx", top_k=1))

    assert response.results[0].path == "A.md"
    assert response.results[0].snippet is None


@pytest.mark.asyncio
async def test_blank_query_returns_empty_response(search_config, make_factory):
    service = SemanticSearchService(search_config, embedder_factory=make_factory([1.0, 0.0, 0.0]))
    response = await service.search(SearchRequest(query="   "))
    assert response.results == []
    assert response.dim is None


@pytest.mark.asyncio
async def test_dimension_mismatch(search_config, make_factory):
    service = SemanticSearchService(search_config, embedder_factory=make_factory([1.0, 0.0]))
    with pytest.raises(EmbeddingDimensionMismatchError) as exc:
        await service.search(SearchRequest(query="xx"))
    assert (exc.value.actual, exc.value.expected) == (2, 3)


@pytest.mark.asyncio
async def test_search_disabled(vault_root, smart_env):
    unconfigured = BasesBridgeConfig(env="test", vault_path=str(vault_root), smart_env_dir=None)
    with pytest.raises(SemanticSearchDisabledError):
        await SemanticSearchService(unconfigured).search(SearchRequest(query="xx"))

    disabled = BasesBridgeConfig(
        env="test", vault_path=str(vault_root), smart_env_dir=str(smart_env), semantic_search_enabled=False
    )
    with pytest.raises(SemanticSearchDisabledError):
        await SemanticSearchService(disabled).search(SearchRequest(query="xx"))
