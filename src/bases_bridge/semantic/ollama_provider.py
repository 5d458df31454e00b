"""Ollama-based query embedder over its HTTP API."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx
from loguru import logger

from bases_bridge.semantic.embedding_provider import EmbeddingProvider

DEFAULT_OLLAMA_BASE_URL = "http://127.0.0.1:11434"


def normalize_base_url(raw: Optional[str]) -> str:
    base = (raw or "").strip() or DEFAULT_OLLAMA_BASE_URL
    return base.rstrip("/") or DEFAULT_OLLAMA_BASE_URL


def _replace_host(base_url: str, hostname: str) -> str:
    parts = urlsplit(base_url)
    netloc = f"{hostname}:{parts.port}" if parts.port else hostname
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment)).rstrip("/")


def default_gateway_ip(route_table: Path = Path("/proc/net/route")) -> Optional[str]:
    """IPv4 default gateway from the Linux routing table (the Windows host under WSL)."""
    try:
        lines = route_table.read_text(encoding="utf-8").strip().splitlines()
    except OSError:
        return None
    for line in lines[1:]:
        cols = line.split()
        if len(cols) < 3 or cols[1] != "00000000":
            continue
        gateway = cols[2]
        if len(gateway) != 8:
            return None
        try:
            octets = [int(gateway[i : i + 2], 16) for i in (6, 4, 2, 0)]
        except ValueError:
            return None
        return ".".join(str(o) for o in octets)
    return None


def extract_embedding(payload: Any) -> Optional[List[float]]:
    """Vector from any of the response shapes Ollama versions return."""
    if not isinstance(payload, dict):
        return None

    def numbers(value: Any) -> Optional[List[float]]:
        if isinstance(value, list) and value and all(isinstance(v, (int, float)) for v in value):
            return [float(v) for v in value]
        return None

    embeddings = payload.get("embeddings")
    if isinstance(embeddings, list) and embeddings:
        vec = numbers(embeddings[0])
        if vec:
            return vec
    vec = numbers(payload.get("embedding"))
    if vec:
        return vec
    data = payload.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return numbers(data[0].get("embedding"))
    return None


class OllamaEmbeddingProvider(EmbeddingProvider):
    """
    Query embedder calling a local Ollama server.

    Tries `/api/embed` first and falls back to the older `/api/embeddings`. When
    the configured host is localhost, `host.docker.internal` and the default
    gateway are tried too after connection failures.
    """

    def __init__(
        self,
        model_name: str,
        *,
        base_url: Optional[str] = None,
        dimensions: int = 0,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not model_name or not model_name.strip():
            raise ValueError("Ollama embedder requires a model name (e.g. snowflake-arctic-embed2)")
        self.model_name = model_name.strip()
        self.base_url = normalize_base_url(base_url)
        self.dimensions = dimensions
        self._timeout = timeout
        self._transport = transport

    def candidate_base_urls(self) -> List[str]:
        candidates = [self.base_url]
        if urlsplit(self.base_url).hostname not in ("localhost", "127.0.0.1"):
            return candidates
        candidates.append(_replace_host(self.base_url, "host.docker.internal"))
        gateway = default_gateway_ip()
        if gateway:
            candidates.append(_replace_host(self.base_url, gateway))
        return list(dict.fromkeys(candidates))

    async def _post(self, client: httpx.AsyncClient, url: str, body: dict) -> List[float]:
        response = await client.post(url, json=body)
        response.raise_for_status()
        vec = extract_embedding(response.json())
        if vec is None:
            raise RuntimeError(f"Ollama {url} returned an unexpected payload")
        return vec

    async def embed_query(self, text: str) -> list[float]:
        text = text.strip()
        if not text:
            return []

        bases = self.candidate_base_urls()
        last_error: Optional[Exception] = None
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for base in bases:
                try:
                    return await self._post(client, f"{base}/api/embed", {"model": self.model_name, "input": text})
                except (httpx.HTTPError, RuntimeError, ValueError) as e:
                    last_error = e
                try:
                    return await self._post(
                        client, f"{base}/api/embeddings", {"model": self.model_name, "prompt": text}
                    )
                except (httpx.HTTPError, RuntimeError, ValueError) as e:
                    last_error = e
                    if not isinstance(e, httpx.TransportError):
                        break
                    logger.debug(f"Ollama unreachable at {base}: {e}")

        raise RuntimeError(f"Failed to reach Ollama ({', '.join(bases)}): {last_error}")

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_query(text) for text in texts]
