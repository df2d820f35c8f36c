"""Unit tests for CLI commands."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
import typer
from typer.testing import CliRunner

import venom.cli as cli
from venom.cli import _launch_tui, app, format_project, main, mask_value
from venom.core.engine import Engine
from venom.database.http import HttpProjectStore
from venom.models import Project
from venom.sync.exporter import Exporter

runner = CliRunner()


@pytest.fixture
def cli_engine(monkeypatch: Any, fake_store, tmp_path: Path) -> Engine:
    """Make every CLI command use an engine over the fake store."""
    engine = Engine(store=fake_store, exporter=Exporter(tmp_path))
    monkeypatch.setattr("venom.cli.Engine", lambda settings=None: engine)
    return engine


def test_main_without_subcommand_launches_tui(monkeypatch: Any) -> None:
    """Bare `venom` should open the TUI."""
    calls: list[bool] = []
    monkeypatch.setattr("venom.cli._launch_tui", lambda: calls.append(True))
    main(ctx=SimpleNamespace(invoked_subcommand=None), version=False)
    assert calls == [True]


def test_launch_tui_exits_with_app_return_code(monkeypatch: Any, fake_store) -> None:
    """A startup store failure ends the process with the app's exit code."""

    class _FakeVenomApp:
        return_code = 1

        def __init__(self, engine: object, settings: object = None) -> None:
            pass

        def run(self) -> None:
            return None

    monkeypatch.setattr("venom.cli.Engine", lambda settings=None: Engine(store=fake_store))
    monkeypatch.setattr("venom.cli.VenomApp", _FakeVenomApp)

    with pytest.raises(typer.Exit) as exc:
        _launch_tui()
    assert exc.value.exit_code == 1
    assert fake_store.closed


def test_launch_tui_clean_exit(monkeypatch: Any, fake_store) -> None:
    class _FakeVenomApp:
        return_code = None

        def __init__(self, engine: object, settings: object = None) -> None:
            pass

        def run(self) -> None:
            return None

    monkeypatch.setattr("venom.cli.Engine", lambda settings=None: Engine(store=fake_store))
    monkeypatch.setattr("venom.cli.VenomApp", _FakeVenomApp)
    _launch_tui()
    assert fake_store.closed


def test_mask_value() -> None:
    assert mask_value("API_KEY", "abc") == cli.MASK
    assert mask_value("client_secret", "abc") == cli.MASK
    assert mask_value("HOST", "localhost") == "localhost"


def test_format_project_unmasked() -> None:
    lines = format_project(Project(name="p", variables={"API_KEY": "abc"}), mask=False)
    assert "    - API_KEY: abc" in lines


def test_add_set_list(cli_engine: Engine, fake_store) -> None:
    result = runner.invoke(app, ["add", "web", "--file", ".env", "--target", "apps/web"])
    assert result.exit_code == 0, result.output
    assert "Added project with name: web" in result.output

    result = runner.invoke(app, ["set", "web", "API_KEY=abc=def"])
    assert result.exit_code == 0, result.output
    assert fake_store.projects["web"].variables == {"API_KEY": "abc=def"}

    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    assert "Project Name: web" in result.output
    assert "API_KEY: *****" in result.output


def test_set_rejects_bad_format(cli_engine: Engine) -> None:
    result = runner.invoke(app, ["set", "web", "NOEQUALS"])
    assert result.exit_code == 2


def test_unset_unknown_key_fails(cli_engine: Engine, fake_store) -> None:
    fake_store.add(Project(name="web"))
    result = runner.invoke(app, ["unset", "web", "NOPE"])
    assert result.exit_code == 1
    assert "Key NOPE not found in project web" in result.output


def test_edit_missing_project_fails(cli_engine: Engine) -> None:
    result = runner.invoke(app, ["edit", "ghost", "--file", ".env", "--target", "x"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_pull_writes_files(cli_engine: Engine, fake_store, tmp_path: Path) -> None:
    fake_store.add(Project(name="web", file_name=".env", variables={"A": "1"}))
    result = runner.invoke(app, ["pull", "--name", "web"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / ".env").read_text() == "A=1\n"
    assert "Project web saved successfully." in result.output


def test_store_unavailable_exits_non_zero(monkeypatch: Any, fake_store) -> None:
    fake_store.unavailable = True
    monkeypatch.setattr("venom.cli.Engine", lambda settings=None: Engine(store=fake_store))
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "connection refused" in result.output


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.startswith("venom ")


def test_list_against_non_json_server_reports_error(monkeypatch: Any) -> None:
    """A misbehaving HTTP store ends `venom list` with exit 1 and no traceback."""
    store = HttpProjectStore(
        "http://store.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="oops")),
    )
    monkeypatch.setattr("venom.cli.Engine", lambda settings=None: Engine(store=store))
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "response is not JSON" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
