"""Common test fixtures."""

from pathlib import Path
from textwrap import dedent

import pytest

from bases_bridge.bases.snapshot import EngineState
from bases_bridge.bases.store import BaseSpecStore
from bases_bridge.config import BasesBridgeConfig
from bases_bridge.vault import FileVault

TASKS_BASE = dedent(
    """\
    filters: "file.ext == 'md'"
    properties:
      status:
        name: Status
        type: text
      priority: {}
      file.name: {}
    formulas:
      label: "if(priority, 'has-priority', 'none')"
    views:
      - name: All
        type: table
        limit: 50
      - name: ByPriority
        order:
          - -priority
          - file.name
      - name: Done
        filters: "status == 'done'"
    """
)


def write_note(root: Path, path: str, content: str) -> Path:
    target = root / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dedent(content), encoding="utf-8")
    return target


@pytest.fixture
def vault_root(tmp_path) -> Path:
    """An on-disk vault with four notes, one base and a hidden config folder.

    Enumeration order of the candidate notes is A, B, Projects/C, Projects/D.
    """
    root = tmp_path / "vault"
    root.mkdir()
    write_note(
        root,
        "A.md",
        """\
        ---
        status: done
        priority: 3
        tags: [work]
        ---
        # A
        """,
    )
    write_note(
        root,
        "B.md",
        """\
        ---
        status: open
        priority: 1
        tags:
          - work
          - urgent
        owner: "[[A]]"
        ---
        Depends on [[A]].
        """,
    )
    write_note(
        root,
        "Projects/C.md",
        """\
        ---
        status: open
        priority: 3
        ---
        Project note #project
        """,
    )
    write_note(
        root,
        "Projects/D.md",
        """\
        ---
        status: done
        priority: 0
        ---
        Nothing here.
        """,
    )
    write_note(root, ".obsidian/hidden.md", "---\nstatus: done\n---\n")
    write_note(root, "Tasks.base", TASKS_BASE)
    return root


@pytest.fixture
def app_config(vault_root, tmp_path) -> BasesBridgeConfig:
    return BasesBridgeConfig(env="test", vault_path=str(vault_root), smart_env_dir=None)


@pytest.fixture
def vault(vault_root) -> FileVault:
    return FileVault(vault_root)


@pytest.fixture
def store(vault) -> BaseSpecStore:
    return BaseSpecStore(vault)


@pytest.fixture
def engine() -> EngineState:
    return EngineState()


@pytest.fixture
def add_file(vault_root):
    """Write a file into the test vault: add_file("Folder/Note.md", content)."""

    def add(path: str, content: str) -> Path:
        return write_note(vault_root, path, content)

    return add
