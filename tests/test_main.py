"""Test the command-line entrypoint."""
from pathlib import Path

import pytest
import requests

from arithmetic_history_service import main as cli
from arithmetic_history_service.common.config import ENV_VARS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.mark.parametrize("input_path,expected", [
    ("resources/operations.txt", "resources/operations_txt_results.txt"),
    ("ops", "ops_results.txt"),
])
def test_build_output_path(input_path: str, expected: str) -> None:
    """The results file sits next to the input file."""
    assert cli.build_output_path(Path(input_path)) == Path(expected)


def test_build_settings_applies_overrides() -> None:
    """serve arguments override environment settings."""
    args = cli.build_parser().parse_args(["serve", "--port", "9001", "--db-path", "h.db"])
    settings = cli.build_settings(args)
    assert settings.port == 9001
    assert settings.db_path == Path("h.db")
    assert str(settings.host) == "0.0.0.0"


def test_serve_runs_uvicorn(monkeypatch, tmp_path: Path) -> None:
    """serve builds the app and hands it to uvicorn."""
    seen = {}
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, host, port: seen.update(host=host, port=port))
    cli.main(["serve", "--host", "127.0.0.1", "--port", "9002", "--db-path", str(tmp_path / "h.db")])
    assert seen == {"host": "127.0.0.1", "port": 9002}


def test_serve_rejects_invalid_port() -> None:
    """Invalid settings exit with a usage error."""
    with pytest.raises(SystemExit):
        cli.main(["serve", "--port", "0"])


def test_calc_prints_result(monkeypatch, capsys) -> None:
    """calc prints the computed result."""
    monkeypatch.setattr(cli.CalculatorClient, "calculate", lambda self, op, a, b: 5.0)
    cli.main(["calc", "add", "2", "3"])
    assert capsys.readouterr().out.strip() == "5.0"


def test_calc_service_error_exits(monkeypatch) -> None:
    """A rejected calculation exits with status 1."""
    def fail(self, op, a, b):
        raise cli.ServiceError(422, "Cannot divide by zero")

    monkeypatch.setattr(cli.CalculatorClient, "calculate", fail)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["calc", "divide", "1", "0"])
    assert excinfo.value.code == 1


def test_batch_missing_file() -> None:
    """A missing batch file is a usage error."""
    with pytest.raises(SystemExit):
        cli.main(["batch", "does-not-exist.txt"])


@pytest.mark.parametrize("command", [["calc", "add", "1", "2"], ["history"]])
def test_unreachable_service_exits(monkeypatch, capsys, command) -> None:
    """A connection failure exits with status 1 instead of a traceback."""
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "post", refuse)
    monkeypatch.setattr(requests, "get", refuse)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(command)
    assert excinfo.value.code == 1
    assert "could not reach service at http://127.0.0.1:8000" in capsys.readouterr().err
