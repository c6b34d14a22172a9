from typing import Any

import pytest
import typer
from typer.testing import CliRunner

from bigquery_mcp.cli import main as cli_main
from bigquery_mcp.errors import ConfigurationError

runner = CliRunner()


class RecordingServer:
    instances: list["RecordingServer"] = []

    def __init__(self, config) -> None:
        self.config = config
        self.served = False
        RecordingServer.instances.append(self)

    async def serve(self) -> None:
        self.served = True


def _patch_server(monkeypatch) -> None:
    for name in (
        "BIGQUERY_PROJECT_ID",
        "BIGQUERY_LOCATION",
        "BIGQUERY_KEY_FILE",
        "BIGQUERY_MAX_RESULTS",
        "BIGQUERY_MAX_BYTES_BILLED",
    ):
        monkeypatch.delenv(name, raising=False)
    RecordingServer.instances = []
    monkeypatch.setattr(cli_main, "BigQueryMcpServer", RecordingServer)
    monkeypatch.setattr(cli_main, "configure_logging", lambda _level: None)


def test_cli_requires_project_id(monkeypatch) -> None:
    _patch_server(monkeypatch)

    result = runner.invoke(cli_main.app, [])

    assert result.exit_code != 0
    assert "--project-id" in result.output
    assert RecordingServer.instances == []


def test_cli_builds_config_from_flags(monkeypatch) -> None:
    _patch_server(monkeypatch)

    result = runner.invoke(
        cli_main.app,
        [
            "--project-id",
            "my-project",
            "--location",
            "US",
            "--max-results",
            "50",
            "--max-bytes-billed",
            "1000",
        ],
    )

    assert result.exit_code == 0, result.output
    (server,) = RecordingServer.instances
    assert server.served is True
    assert server.config.project_id == "my-project"
    assert server.config.location == "US"
    assert server.config.key_file is None
    assert server.config.max_results == 50
    assert server.config.max_bytes_billed == 1000


def test_cli_defaults_and_env_fallback(monkeypatch) -> None:
    _patch_server(monkeypatch)
    monkeypatch.setenv("BIGQUERY_PROJECT_ID", "env-project")

    result = runner.invoke(cli_main.app, [])

    assert result.exit_code == 0, result.output
    config = RecordingServer.instances[0].config
    assert config.project_id == "env-project"
    assert config.location == "asia-northeast1"
    assert config.max_results == 1000
    assert config.max_bytes_billed == 500_000_000_000


def test_cli_accepts_existing_key_file(monkeypatch, tmp_path) -> None:
    _patch_server(monkeypatch)
    key_file = tmp_path / "key.json"
    key_file.write_text("{}")

    result = runner.invoke(cli_main.app, ["--project-id", "p", "--key-file", str(key_file)])

    assert result.exit_code == 0, result.output
    assert RecordingServer.instances[0].config.key_file == key_file


def test_cli_rejects_missing_key_file(monkeypatch, tmp_path) -> None:
    _patch_server(monkeypatch)

    result = runner.invoke(
        cli_main.app, ["--project-id", "p", "--key-file", str(tmp_path / "missing.json")]
    )

    assert result.exit_code != 0
    assert RecordingServer.instances == []


def test_cli_exits_non_zero_on_configuration_error(monkeypatch) -> None:
    _patch_server(monkeypatch)

    class FailingServer(RecordingServer):
        async def serve(self) -> None:
            raise ConfigurationError("Failed to authenticate with BigQuery.")

    monkeypatch.setattr(cli_main, "BigQueryMcpServer", FailingServer)

    result = runner.invoke(cli_main.app, ["--project-id", "p"])

    assert result.exit_code == 1
    assert "Failed to authenticate with BigQuery." in result.output


def test_cli_version(monkeypatch) -> None:
    _patch_server(monkeypatch)

    result = runner.invoke(cli_main.app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip()
    assert RecordingServer.instances == []


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(typer.BadParameter):
        cli_main.configure_logging("chatty")


def test_main_loads_dotenv_before_parsing(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(cli_main, "load_dotenv", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(cli_main, "app", lambda: calls.append({"app": True}))

    cli_main.main()

    assert calls[0]["override"] is False
    assert calls[1] == {"app": True}
