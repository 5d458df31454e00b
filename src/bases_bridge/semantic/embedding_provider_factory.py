"""Factory choosing the query embedder that matches the vault's vectors."""

from dataclasses import dataclass
from typing import Optional

from bases_bridge.config import BasesBridgeConfig
from bases_bridge.semantic.embedding_provider import EmbeddingProvider
from bases_bridge.semantic.fastembed_provider import FastEmbedEmbeddingProvider, resolve_fastembed_model
from bases_bridge.semantic.ollama_provider import OllamaEmbeddingProvider
from bases_bridge.semantic.openai_provider import OpenAIEmbeddingProvider
from bases_bridge.semantic.semantic_errors import SemanticDependenciesMissingError

PROVIDERS = ("fastembed", "ollama", "openai")
PROVIDER_ALIASES = {"xenova": "fastembed", "transformers": "fastembed"}


@dataclass
class QueryEmbedderSelection:
    """The chosen provider name, resolved model and embedder instance."""

    provider: str
    model: str
    embedder: EmbeddingProvider


def looks_like_openai_model(model: str) -> bool:
    return model.startswith("text-embedding-") or model.startswith("openai/")


def looks_like_huggingface_id(model: str) -> bool:
    return "/" in model and " " not in model


def normalize_provider(provider: Optional[str]) -> str:
    raw = (provider or "auto").strip().lower()
    raw = PROVIDER_ALIASES.get(raw, raw)
    return raw if raw in PROVIDERS else "auto"


def infer_provider(model: str) -> str:
    if looks_like_openai_model(model):
        return "openai"
    if looks_like_huggingface_id(model):
        return "fastembed"
    return "ollama"


def create_embedding_provider(
    app_config: BasesBridgeConfig,
    vault_model: Optional[str] = None,
    dimension: Optional[int] = None,
    ollama_base_url: Optional[str] = None,
) -> QueryEmbedderSelection:
    """
    Create the query embedder.

    An explicit `query_embedder_model` wins over the vault model. With the
    `auto` provider the provider is inferred from that model name: OpenAI
    model names go to OpenAI, HuggingFace ids to FastEmbed, anything else to
    Ollama. Without any model name FastEmbed picks a model from the dimension.
    """
    provider = normalize_provider(app_config.query_embedder)
    model_candidate = (app_config.query_embedder_model or "").strip() or (vault_model or "").strip()

    if provider == "auto":
        provider = infer_provider(model_candidate) if model_candidate else "fastembed"

    if provider == "fastembed":
        model = resolve_fastembed_model(app_config.query_embedder_model_hint, dimension, model_candidate or None)
        embedder = FastEmbedEmbeddingProvider(
            model_name=model,
            batch_size=app_config.semantic_embedding_batch_size,
            dimensions=dimension or 384,
        )
        return QueryEmbedderSelection(provider="fastembed", model=model, embedder=embedder)

    if provider == "openai":
        model = (model_candidate or "text-embedding-3-small").removeprefix("openai/")
        if not (app_config.openai_api_key or "").strip():
            raise SemanticDependenciesMissingError("openai_api_key is required when query_embedder=openai")
        embedder = OpenAIEmbeddingProvider(
            model_name=model,
            batch_size=app_config.semantic_embedding_batch_size,
            dimensions=app_config.openai_embedding_dimensions,
            api_key=app_config.openai_api_key,
            base_url=app_config.openai_base_url,
        )
        return QueryEmbedderSelection(provider="openai", model=model, embedder=embedder)

    if not model_candidate:
        raise SemanticDependenciesMissingError(
            "query_embedder=ollama requires query_embedder_model or a model recorded with the vault embeddings"
        )
    embedder = OllamaEmbeddingProvider(
        model_candidate,
        base_url=ollama_base_url or app_config.ollama_base_url,
        dimensions=dimension or 0,
    )
    return QueryEmbedderSelection(provider="ollama", model=model_candidate, embedder=embedder)
