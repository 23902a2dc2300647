from dataclasses import dataclass

import typer

from bitly_shorten.config import AppConfig, resolve_token_source
from bitly_shorten.errors import BitlyError
from bitly_shorten.links import is_bitlink
from bitly_shorten.logging_config import setup_logging
from bitly_shorten.services.bitly_client import BitlyClient

app = typer.Typer(help="Shorten and expand links with the Bitly API", no_args_is_help=True)
auth_app = typer.Typer(help="Authentication commands")

app.add_typer(auth_app, name="auth")


@dataclass
class CliState:
    config: AppConfig
    token: str | None = None


def build_client(config: AppConfig, token: str | None) -> BitlyClient:
    return BitlyClient.from_config(config, token=token)


def _fail(message: str) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=1)


def _open_client(state: CliState) -> BitlyClient:
    client = build_client(state.config, state.token)
    if not client.token:
        client.close()
        raise _fail(
            f"No access token configured. Pass --token, set {state.config.token_env_var}"
            f" or add it to {state.config.dotfile}."
        )
    return client


@app.callback()
def main(
    ctx: typer.Context,
    token: str | None = typer.Option(None, "--token", help="Bitly API access token."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic."),
) -> None:
    setup_logging(verbose)
    ctx.obj = CliState(config=AppConfig(), token=token)


@app.command("links")
def links(
    ctx: typer.Context,
    urls: list[str] | None = typer.Argument(
        None, help="Long URLs to shorten or bitlinks to expand."
    ),
) -> None:
    """Shorten long URLs and expand bitlinks, one line per argument."""
    state: CliState = ctx.obj
    if not urls:
        raise _fail("Try specifying one or more URLs as arguments.")
    with _open_client(state) as client:
        try:
            for url in urls:
                if is_bitlink(url, state.config.short_domain):
                    typer.echo(f"{url} <-- {client.expand(url)}")
                else:
                    typer.echo(f"{url} --> {client.shorten(url)}")
        except BitlyError as exc:
            raise _fail(f"Error: {exc}") from exc


@app.command("shorten")
def shorten(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="The long URL."),
    group_guid: str | None = typer.Option(None, "--group-guid"),
    domain: str | None = typer.Option(None, "--domain"),
) -> None:
    """Shorten a long URL and print the bitlink."""
    with _open_client(ctx.obj) as client:
        try:
            typer.echo(client.shorten(url, group_guid=group_guid, domain=domain))
        except BitlyError as exc:
            raise _fail(f"Error: {exc}") from exc


@app.command("expand")
def expand(
    ctx: typer.Context,
    bitlink: str = typer.Argument(..., help="The bitlink, with or without scheme."),
) -> None:
    """Expand a bitlink and print the long URL."""
    with _open_client(ctx.obj) as client:
        try:
            typer.echo(client.expand(bitlink))
        except BitlyError as exc:
            raise _fail(f"Error: {exc}") from exc


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    state: CliState = ctx.obj
    config = state.config
    typer.echo(f"Target Bitly API: {config.api_base_url}")
    _, source = resolve_token_source(
        state.token, dotfile=config.dotfile, key=config.token_env_var
    )
    if source is None:
        raise _fail("Access token: not configured")
    typer.echo(f"Access token: found ({source})")


if __name__ == "__main__":
    app()
