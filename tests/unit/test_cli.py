"""Unit tests for the CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from workflow_engine import cli


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WORKFLOW_ENGINE_PORT", raising=False)
    monkeypatch.setattr(cli, "configure_logging", lambda _level: None)


def test_check_definition_ok(tmp_path: Path, capsys, definition_payload) -> None:
    path = tmp_path / "wf.json"
    path.write_text(json.dumps(definition_payload()), encoding="utf-8")

    assert cli.main(["check-definition", str(path)]) == 0
    assert "OK 'doc-review': 4 states, 3 actions" in capsys.readouterr().out


def test_check_definition_reports_each_problem(tmp_path: Path, capsys, definition_payload) -> None:
    path = tmp_path / "wf.json"
    bad = {"id": "bad", "states": [{"id": "a", "isInitial": True}, {"id": "b", "isInitial": True}]}
    path.write_text(
        json.dumps([definition_payload(), bad, definition_payload()]), encoding="utf-8"
    )

    assert cli.main(["check-definition", str(path)]) == 1
    out = capsys.readouterr().out
    assert "OK 'doc-review'" in out
    assert "INVALID 'bad': InvalidDefinition" in out
    assert "INVALID 'doc-review': Conflict" in out


def test_check_definition_unreadable(tmp_path: Path, capsys) -> None:
    path = tmp_path / "wf.json"
    path.write_text("{not json", encoding="utf-8")

    assert cli.main(["check-definition", str(path)]) == 1
    assert "Cannot read" in capsys.readouterr().err


def test_check_definition_wrong_shape(tmp_path: Path, capsys) -> None:
    path = tmp_path / "wf.json"
    path.write_text(json.dumps({"states": []}), encoding="utf-8")

    assert cli.main(["check-definition", str(path)]) == 1
    assert "not a definition document" in capsys.readouterr().err


def test_configuration_error_exit_code(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("WORKFLOW_ENGINE_PORT", "not-a-port")

    assert cli.main(["check-definition", "whatever.json"]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_serve_runs_uvicorn_factory(monkeypatch: pytest.MonkeyPatch) -> None:
    import uvicorn

    calls: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kw: calls.append((app, kw)))

    assert cli.main(["serve", "--port", "9100"]) == 0
    app, kwargs = calls[0]
    assert app == "workflow_engine.server.app:create_app"
    assert kwargs["factory"] is True
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9100


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["--version"])
    assert exc.value.code == 0
    assert "workflow-engine" in capsys.readouterr().out


def test_command_is_required(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2
    assert "required" in capsys.readouterr().err
