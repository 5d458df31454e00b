"""Fixtures for semantic search tests."""

import json
from pathlib import Path

import pytest

from bases_bridge.semantic.embedding_provider_factory import QueryEmbedderSelection


class FakeEmbedder:
    """Returns a fixed query vector."""

    def __init__(self, vector: list[float]):
        self.model_name = "fake-model"
        self.dimensions = len(vector)
        self.vector = vector
        self.queries: list[str] = []

    async def embed_query(self, text: str) -> list[float]:
        self.queries.append(text)
        return list(self.vector)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [list(self.vector) for _ in texts]


def fake_factory(vector: list[float], calls: list[dict] | None = None):
    def factory(config, **kwargs) -> QueryEmbedderSelection:
        if calls is not None:
            calls.append(kwargs)
        return QueryEmbedderSelection(provider="fake", model="fake-model", embedder=FakeEmbedder(vector))

    return factory


def source_entry(path: str, vec: list[float], model: str = "TaylorAI/bge-micro-v2", **extra) -> str:
    body = {"path": path, "embeddings": {model: {"vec": vec}}, **extra}
    return f'"smart_sources:{path}": {json.dumps(body)},'


@pytest.fixture
def smart_env(tmp_path) -> Path:
    """An embeddings folder in the loose `.ajson` format, plus one stray vector of another size."""
    env = tmp_path / "smart-env"
    (env / "multi").mkdir(parents=True)
    lines = [
        source_entry("A.md", [1.0, 0.0, 0.0], tags=["work"]),
        source_entry("B.md", [0.7, 0.7, 0.0], tags=["work", "urgent"], title="Bee"),
        source_entry("Projects/C.md", [0.0, 1.0, 0.0]),
    ]
    (env / "multi" / "sources.ajson").write_text("\n".join(lines) + "\n", encoding="utf-8")
    (env / "multi" / "old.ajson").write_text(source_entry("Old.md", [1.0, 0.0], model="legacy") + "\n", encoding="utf-8")
    (env / "multi" / "junk.json").write_text("not json at all", encoding="utf-8")
    (env / "multi" / "notes.txt").write_text("ignored", encoding="utf-8")
    return env


@pytest.fixture
def make_factory():
    """Embedder factory returning a FakeEmbedder: make_factory(vector, calls=None)."""
    return fake_factory
