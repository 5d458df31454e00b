import pytest


@pytest.fixture
def cli_env(monkeypatch, tmp_path, vault_root):
    """Point the CLI at the test vault and an isolated config home."""
    monkeypatch.setenv("BASES_BRIDGE_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("BASES_BRIDGE_VAULT_PATH", str(vault_root))
    monkeypatch.setenv("BASES_BRIDGE_ENV", "test")
    for name in ("OBSIDIAN_VAULT", "BASES_BRIDGE_SMART_ENV_DIR", "BASES_BRIDGE_ENGINE_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "home"
