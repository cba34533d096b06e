"""Unit tests for CLI commands."""

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from akiclient.cli.main import app
from akiclient.models import Endpoint
from akiclient.selection import EndpointProber

runner = CliRunner()

CATALOG_YAML = """\
en:
  character:
    - api-a.test
    - api-b.test
    - api-c.test
"""


def write_catalog(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.yaml"
    path.write_text(CATALOG_YAML)
    return path


def hosts_up(*hosts: str):
    """Side effect for EndpointProber.probe marking only ``hosts`` reachable."""

    def probe(endpoint: Endpoint) -> bool:
        return endpoint.host in hosts

    return probe


class TestMainApp:
    """Tests for the main CLI application."""

    def test_help_output(self) -> None:
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "servers" in result.stdout

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "servers" in result.stdout.lower()

    def test_servers_help(self) -> None:
        result = runner.invoke(app, ["servers", "--help"])
        assert result.exit_code == 0
        assert "list" in result.stdout
        assert "probe" in result.stdout


class TestServersList:
    """Tests for `servers list`."""

    def test_default_catalog(self) -> None:
        result = runner.invoke(app, ["servers", "list"])
        assert result.exit_code == 0
        assert "Known Servers" in result.stdout
        assert "api-en1.akinator.com" in result.stdout
        assert "api-fr1.akinator.com" in result.stdout

    def test_filter_by_language(self) -> None:
        result = runner.invoke(app, ["servers", "list", "--language", "fr"])
        assert result.exit_code == 0
        assert "api-fr1.akinator.com" in result.stdout
        assert "api-en1.akinator.com" not in result.stdout

    def test_custom_catalog(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path)
        result = runner.invoke(app, ["servers", "list", "--catalog", str(path)])
        assert result.exit_code == 0
        assert "api-b.test" in result.stdout
        assert "akinator.com" not in result.stdout

    def test_no_matching_servers(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path)
        result = runner.invoke(
            app, ["servers", "list", "--catalog", str(path), "-l", "ja"]
        )
        assert result.exit_code == 0
        assert "No servers registered" in result.stdout

    def test_invalid_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("xx:\n  character:\n    - api.test\n")
        result = runner.invoke(app, ["servers", "list", "--catalog", str(path)])
        assert result.exit_code == 1
        assert "Invalid catalog" in result.stdout


class TestServersProbe:
    """Tests for `servers probe`."""

    def test_first_available(self, tmp_path: Path) -> None:
        """Test that the first reachable server is reported."""
        path = write_catalog(tmp_path)
        with patch.object(
            EndpointProber, "probe", side_effect=hosts_up("api-b.test")
        ) as probe:
            result = runner.invoke(
                app,
                ["servers", "probe", "--catalog", str(path), "--credential", "x"],
            )

        assert result.exit_code == 0
        assert "First available server: api-b.test" in result.stdout
        assert [c.args[0].host for c in probe.call_args_list] == [
            "api-a.test",
            "api-b.test",
        ]

    def test_all_down(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path)
        with patch.object(EndpointProber, "probe", side_effect=hosts_up()):
            result = runner.invoke(
                app,
                ["servers", "probe", "--catalog", str(path), "--credential", "x"],
            )

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_probe_all(self, tmp_path: Path) -> None:
        """Test that --all probes every server and reports partial outages."""
        path = write_catalog(tmp_path)
        with patch.object(
            EndpointProber, "probe", side_effect=hosts_up("api-b.test", "api-c.test")
        ) as probe:
            result = runner.invoke(
                app,
                [
                    "servers",
                    "probe",
                    "--all",
                    "--catalog",
                    str(path),
                    "--credential",
                    "x",
                ],
            )

        assert result.exit_code == 0
        assert probe.call_count == 3
        assert "Probe Results" in result.stdout
        assert "1 of 3 servers are down" in result.stdout
        assert "First available server: api-b.test" in result.stdout

    def test_probe_all_down(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path)
        with patch.object(EndpointProber, "probe", side_effect=hosts_up()):
            result = runner.invoke(
                app,
                ["servers", "probe", "-a", "--catalog", str(path), "--credential", "x"],
            )

        assert result.exit_code == 1
        assert "All 3 servers are down" in result.stdout

    def test_unsupported_combination(self) -> None:
        result = runner.invoke(
            app, ["servers", "probe", "-l", "de", "-c", "animal", "--credential", "x"]
        )
        assert result.exit_code == 1
        assert "No servers registered" in result.stdout
