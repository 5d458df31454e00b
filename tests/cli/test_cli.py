"""Tests for the bases-bridge command line."""

import json

from typer.testing import CliRunner

from bases_bridge.cli.main import app as cli_app

runner = CliRunner()


def paths(payload) -> list[str]:
    return [row["file"]["path"] for row in payload["rows"]]


def test_list(cli_env):
    result = runner.invoke(cli_app, ["list"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"bases": [{"id": "Tasks.base", "name": "Tasks", "path": "Tasks.base"}]}


def test_vault_option(cli_env, tmp_path):
    other = tmp_path / "other"
    other.mkdir()
    (other / "Board.base").write_text("views: []\n", encoding="utf-8")

    result = runner.invoke(cli_app, ["--vault", str(other), "list"])

    assert result.exit_code == 0, result.output
    assert [b["id"] for b in json.loads(result.stdout)["bases"]] == ["Board.base"]


def test_schema(cli_env):
    result = runner.invoke(cli_app, ["schema", "Tasks"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["id"] == "Tasks.base"
    assert payload["formulas"] == {"label": "if(priority, 'has-priority', 'none')"}


def test_query_with_options(cli_env):
    result = runner.invoke(cli_app, ["query", "Tasks.base", "--view", "ByPriority", "--sort", "status", "--limit", "2"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["total"] == 4
    assert paths(payload) == ["A.md", "Projects/D.md"]


def test_query_descending_sort_and_filter(cli_env):
    result = runner.invoke(cli_app, ["query", "Tasks", "--sort", "-priority", "--filter", "status == 'open'"])

    assert result.exit_code == 0, result.output
    assert paths(json.loads(result.stdout)) == ["Projects/C.md", "B.md"]


def test_query_evaluate(cli_env):
    result = runner.invoke(cli_app, ["query", "Tasks", "--view", "Done", "--evaluate"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["source"] == "fallback"
    assert [row["computed"]["label"] for row in payload["rows"]] == ["has-priority", "none"]


def test_query_invalid_json_filter(cli_env):
    result = runner.invoke(cli_app, ["query", "Tasks", "--filter", "{not json"])

    assert result.exit_code == 2


def test_query_missing_base(cli_env):
    result = runner.invoke(cli_app, ["query", "Missing"])

    assert result.exit_code == 1


def test_engine_toggle(cli_env):
    result = runner.invoke(cli_app, ["engine", "status"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"engineEnabled": False, "engineReady": False, "cacheSize": 0, "keys": []}

    result = runner.invoke(cli_app, ["engine", "on"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["engineEnabled"] is True
    assert json.loads((cli_env / "config.json").read_text(encoding="utf-8"))["engine_enabled"] is True

    result = runner.invoke(cli_app, ["engine", "status"])
    assert json.loads(result.stdout)["engineEnabled"] is True

    result = runner.invoke(cli_app, ["engine", "off"])
    assert json.loads(result.stdout)["engineEnabled"] is False


def test_search_requires_embeddings(cli_env):
    result = runner.invoke(cli_app, ["search", "open tasks"])

    assert result.exit_code == 1


def test_search_rejects_short_query(cli_env):
    result = runner.invoke(cli_app, ["search", " x "])

    assert result.exit_code == 1
