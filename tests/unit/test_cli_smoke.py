import httpx
import pytest
from typer.testing import CliRunner

from bitly_shorten import cli
from bitly_shorten.cli import app
from bitly_shorten.services.bitly_client import BitlyClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> list[bool]:
    calls: list[bool] = []
    monkeypatch.setattr(cli, "setup_logging", calls.append)
    return calls


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch, fake_bitly):
    def build_client(config, token):
        return BitlyClient.from_config(
            config, token=token, transport=httpx.MockTransport(fake_bitly)
        )

    monkeypatch.setattr(cli, "build_client", build_client)
    return fake_bitly


def test_links_shortens_and_expands(backend) -> None:
    result = runner.invoke(
        app, ["--token", "t", "links", "https://example.com/one", "https://bit.ly/00001"]
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "https://example.com/one --> https://bit.ly/00001",
        "https://bit.ly/00001 <-- https://example.com/one",
    ]


def test_links_uses_token_from_environment(backend, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BITLY_ACCESS_TOKEN", "from-env")
    result = runner.invoke(app, ["links", "https://example.com"])
    assert result.exit_code == 0, result.output
    assert backend.requests[0].headers["Authorization"] == "Bearer from-env"


def test_links_without_arguments_fails(backend) -> None:
    result = runner.invoke(app, ["--token", "t", "links"])
    assert result.exit_code == 1
    assert "Try specifying one or more URLs" in result.output
    assert backend.requests == []


def test_links_without_token_fails(backend) -> None:
    result = runner.invoke(app, ["links", "https://example.com"])
    assert result.exit_code == 1
    assert "No access token configured" in result.output
    assert backend.requests == []


def test_links_reports_api_errors(backend) -> None:
    result = runner.invoke(app, ["--token", "t", "links", "https://bit.ly/unknown"])
    assert result.exit_code == 1
    assert "Error: Bitly API request failed (404): NOT_FOUND" in result.output


def test_links_reports_invalid_urls(backend) -> None:
    result = runner.invoke(app, ["--token", "t", "links", "example.com"])
    assert result.exit_code == 1
    assert "Please specify a valid URL" in result.output
    assert backend.requests == []


def test_shorten_and_expand_commands(backend) -> None:
    shortened = runner.invoke(app, ["--token", "t", "shorten", "https://example.com"])
    assert shortened.exit_code == 0, shortened.output
    assert shortened.stdout.strip() == "https://bit.ly/00001"

    expanded = runner.invoke(app, ["--token", "t", "expand", "bit.ly/00001"])
    assert expanded.exit_code == 0, expanded.output
    assert expanded.stdout.strip() == "https://example.com"


def test_verbose_flag_enables_debug_logging(backend, quiet_logging: list[bool]) -> None:
    runner.invoke(app, ["--verbose", "--token", "t", "links", "https://example.com"])
    assert quiet_logging == [True]


def test_auth_status_smoke() -> None:
    result = runner.invoke(app, ["--token", "t", "auth", "status"])
    assert result.exit_code == 0
    assert "Target Bitly API" in result.stdout
    assert "found (argument)" in result.stdout


def test_auth_status_reports_dotfile(isolated_token_sources) -> None:
    (isolated_token_sources / ".bitly").write_text("BITLY_ACCESS_TOKEN=abc\n")
    result = runner.invoke(app, ["auth", "status"])
    assert result.exit_code == 0
    assert "found (dotfile)" in result.stdout


def test_auth_status_without_token() -> None:
    result = runner.invoke(app, ["auth", "status"])
    assert result.exit_code == 1
    assert "not configured" in result.output


def test_auth_status_reads_latin1_dotfile(isolated_token_sources) -> None:
    (isolated_token_sources / ".bitly").write_bytes(b"# caf\xe9\nBITLY_ACCESS_TOKEN=abc\n")
    result = runner.invoke(app, ["auth", "status"])
    assert result.exit_code == 0, result.output
    assert "found (dotfile)" in result.stdout


def test_commands_have_help_text() -> None:
    shorten_help = runner.invoke(app, ["shorten", "--help"])
    assert shorten_help.exit_code == 0
    assert "Shorten a long URL" in shorten_help.output

    expand_help = runner.invoke(app, ["expand", "--help"])
    assert expand_help.exit_code == 0
    assert "Expand a bitlink" in expand_help.output
