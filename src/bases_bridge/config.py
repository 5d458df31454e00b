"""Configuration management for bases-bridge."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bases_bridge.utils import setup_logging

DATA_DIR_NAME = ".bases-bridge"
CONFIG_FILE_NAME = "config.json"

Environment = Literal["test", "dev", "user"]


class BasesBridgeConfig(BaseSettings):
    """Pydantic model for bases-bridge global configuration."""

    env: Environment = Field(default="dev", description="Environment name")

    vault_path: str = Field(
        default_factory=lambda: os.getenv("OBSIDIAN_VAULT") or str(Path.home() / "vault"),
        description="Root folder of the note vault",
    )

    config_dir: str = Field(
        default=".obsidian",
        description="Host configuration folder, excluded from query candidates",
    )

    # Live evaluation engine
    engine_enabled: bool = Field(
        default=False,
        description="Serve evaluated queries from engine snapshots when available",
    )

    # Query planner limits
    default_limit: int = Field(default=20, ge=1, description="Rows per page when neither request nor view sets one")
    max_limit: int = Field(default=500, ge=1, description="Upper bound for rows per page")
    max_page: int = Field(default=1_000_000, ge=1, description="Upper bound for page numbers")
    max_warnings: int = Field(default=200, ge=1, description="Maximum distinct warnings per query response")

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = Field(default=False, description="Also write logs to ~/.bases-bridge/bases-bridge.log")

    # Semantic search
    smart_env_dir: Optional[str] = Field(
        default=None,
        description="Directory holding precomputed embeddings (e.g. <vault>/.smart-env)",
    )
    semantic_search_enabled: bool = Field(
        default=True,
        description="Enable query embedding for semantic search",
    )
    query_embedder: str = Field(
        default="auto",
        description="Query embedder provider: auto, fastembed, ollama or openai",
    )
    query_embedder_model: Optional[str] = Field(
        default=None,
        description="Explicit model override for the query embedder",
    )
    query_embedder_model_hint: Optional[str] = Field(
        default=None,
        description="Hint used to pick a local model when the vault model is not a HuggingFace id",
    )
    semantic_embedding_batch_size: int = Field(default=64, ge=1)
    ollama_base_url: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_embedding_dimensions: Optional[int] = None
    vector_cache_ttl_ms: int = Field(default=60_000, ge=0, description="Reload precomputed vectors after this delay")
    snippet_length: int = Field(default=300, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="BASES_BRIDGE_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("query_embedder")
    @classmethod
    def normalize_query_embedder(cls, value: str) -> str:
        return (value or "auto").strip().lower()

    @property
    def vault_root(self) -> Path:
        return Path(self.vault_path).expanduser()

    @property
    def data_dir_path(self) -> Path:
        return Path.home() / DATA_DIR_NAME

    @property
    def is_test_env(self) -> bool:
        return self.env == "test" or os.getenv("PYTEST_CURRENT_TEST") is not None


class ConfigManager:
    """Manages bases-bridge configuration stored as JSON next to the log file."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        home = os.getenv("BASES_BRIDGE_HOME")
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        elif home:
            self.config_dir = Path(home).expanduser()
        else:
            self.config_dir = Path.home() / DATA_DIR_NAME
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self._config: Optional[BasesBridgeConfig] = None

    @property
    def config(self) -> BasesBridgeConfig:
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> BasesBridgeConfig:
        """Load configuration from file, environment variables take precedence."""
        file_values: Dict[str, Any] = {}
        if self.config_file.exists():
            try:
                file_values = json.loads(self.config_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load config file {self.config_file}: {e}")
                file_values = {}

        # Environment wins over the file: only pass file values that are not set in env.
        env_keys = {
            name for name in BasesBridgeConfig.model_fields if f"BASES_BRIDGE_{name.upper()}" in os.environ
        }
        overrides = {k: v for k, v in file_values.items() if k not in env_keys}
        return BasesBridgeConfig(**overrides)

    def save_config(self, config: BasesBridgeConfig) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
        self._config = config

    def set_engine_enabled(self, enabled: bool) -> BasesBridgeConfig:
        updated = self.config.model_copy(update={"engine_enabled": enabled})
        self.save_config(updated)
        logger.info(f"Engine enabled set to {enabled}")
        return updated


def init_logging(config: BasesBridgeConfig) -> None:  # pragma: no cover
    """Initialize logging for CLI and API entrypoints."""
    log_file = config.data_dir_path / "bases-bridge.log" if config.log_to_file else None
    setup_logging(log_level=config.log_level, log_file=log_file, console=not config.is_test_env)
