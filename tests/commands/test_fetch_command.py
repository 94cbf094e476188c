"""Tests for the `modaudit fetch` command."""

import json
import logging
from unittest.mock import AsyncMock
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from modaudit_app_cli.lib.settings import FetchSettings
from modaudit_app_cli.main import cli
from modaudit_app_cli.model import Module
from modaudit_app_cli.model import ModuleReference
from modaudit_app_cli.module_resolution.errors import CommandFailedError
from modaudit_app_cli.module_resolution.errors import ModuleNotResolvedError
from modaudit_app_cli.module_resolution.errors import UnresolvedModulesError

TEXT = ModuleReference(path="golang.org/x/text", version="v0.3.7")
TOOLS = ModuleReference(path="./tools")


@pytest.fixture(autouse=True)
def _drop_log_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
    root.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path, monkeypatch):
    monkeypatch.delenv("MODAUDIT_GO_BIN", raising=False)
    log_file = str(tmp_path / "modaudit.log.jsonl")

    def _invoke(*args):
        with patch("modaudit_app_cli.commands.fetch.get_settings") as get_settings:
            get_settings.return_value.get_fetch_settings.return_value = FetchSettings()
            return runner.invoke(cli, ["--log-file", log_file, "fetch", *args])

    return _invoke


def test_fetch_prints_table(invoke):
    modules = [
        Module(path=TEXT.path, version=TEXT.version, dir="/gopath/pkg/mod/golang.org/x/text@v0.3.7", sum="h1:abc"),
        Module.local(TOOLS),
    ]
    with patch("modaudit_app_cli.commands.fetch.fetch_modules", new=AsyncMock(return_value=modules)) as fetch:
        result = invoke("golang.org/x/text@v0.3.7", "./tools")

    assert result.exit_code == 0, result.output
    assert "golang.org/x/text" in result.output
    assert "(local)" in result.output
    refs = fetch.await_args.args[0]
    assert refs == [TEXT, TOOLS]


def test_fetch_json_output(invoke):
    modules = [Module(path=TEXT.path, version=TEXT.version, dir="/mod/text")]
    with patch("modaudit_app_cli.commands.fetch.fetch_modules", new=AsyncMock(return_value=modules)):
        result = invoke("--json", "golang.org/x/text@v0.3.7")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output.strip()) == {"Path": "golang.org/x/text", "Version": "v0.3.7", "Dir": "/mod/text"}


def test_fetch_overrides_settings(invoke):
    with patch("modaudit_app_cli.commands.fetch.fetch_modules", new=AsyncMock(return_value=[])) as fetch:
        result = invoke("--tool", "/opt/go/bin/go", "--timeout", "30")

    assert result.exit_code == 0, result.output
    assert "No modules requested" in result.output
    settings = fetch.await_args.kwargs["settings"]
    assert settings.tool == "/opt/go/bin/go"
    assert settings.timeout == 30.0


def test_fetch_lists_every_unresolved_module(invoke):
    error = UnresolvedModulesError(
        [
            ModuleNotResolvedError(ModuleReference(path="gopkg.in/yaml.v2", version="v2.4.0")),
            ModuleNotResolvedError(ModuleReference(path="github.com/google/go-cmp", version="v0.5.6")),
        ]
    )
    with patch("modaudit_app_cli.commands.fetch.fetch_modules", new=AsyncMock(side_effect=error)):
        result = invoke("gopkg.in/yaml.v2@v2.4.0", "github.com/google/go-cmp@v0.5.6")

    assert result.exit_code == 1
    assert "2 module(s) could not be resolved" in result.output
    assert "gopkg.in/yaml.v2@v2.4.0" in result.output
    assert "github.com/google/go-cmp@v0.5.6" in result.output


def test_fetch_reports_tool_failure(invoke):
    error = CommandFailedError("exit status 1", b"go: [proxy] 410 Gone")
    with patch("modaudit_app_cli.commands.fetch.fetch_modules", new=AsyncMock(side_effect=error)):
        result = invoke("golang.org/x/text@v0.3.7")

    assert result.exit_code == 1
    assert "go: [proxy] 410 Gone" in result.output


def test_fetch_rejects_empty_reference(invoke):
    result = invoke("")

    assert result.exit_code == 2
    assert "must not be empty" in result.output


def test_cli_without_command_shows_help(runner, tmp_path):
    result = runner.invoke(cli, ["--log-file", str(tmp_path / "log.jsonl")])

    assert result.exit_code == 0
    assert "fetch" in result.output


def test_fetch_interrupted(invoke):
    with patch("modaudit_app_cli.commands.fetch.fetch_modules", new=AsyncMock(side_effect=KeyboardInterrupt())):
        result = invoke("golang.org/x/text@v0.3.7")

    assert result.exit_code == 130
    assert "Operation interrupted by user." in result.output
    assert "Traceback" not in result.output
