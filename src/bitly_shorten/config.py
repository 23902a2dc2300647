import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api-ssl.bitly.com/v4"
ENV_ACCESS_TOKEN = "BITLY_ACCESS_TOKEN"
SHORT_DOMAIN = "bit.ly"


def default_dotfile() -> Path:
    return Path.home() / ".bitly"


class AppConfig(BaseModel):
    api_base_url: str = Field(default=API_BASE_URL)
    short_domain: str = Field(default=SHORT_DOMAIN)
    timeout_seconds: float = Field(default=10.0, gt=0)
    token_env_var: str = Field(default=ENV_ACCESS_TOKEN, min_length=1)
    dotfile: Path = Field(default_factory=default_dotfile)


def token_from_argument(token: str | None) -> str | None:
    if token is not None and token.strip():
        return token.strip()
    return None


def token_from_env(
    environ: Mapping[str, str] | None = None, key: str = ENV_ACCESS_TOKEN
) -> str | None:
    environ = os.environ if environ is None else environ
    return token_from_argument(environ.get(key))


def token_from_dotfile(
    path: Path | None = None, key: str = ENV_ACCESS_TOKEN
) -> str | None:
    """Read ``KEY=value`` pairs from the per-user dotfile (``~/.bitly``).

    The file is decoded as ISO-8859-1 so any byte sequence is accepted. An
    unreadable file is skipped with a warning.
    """
    path = default_dotfile() if path is None else path
    if not path.is_file():
        return None
    try:
        values = dotenv_values(path, encoding="latin-1")
    except OSError as exc:
        logger.warning("Could not read access token file %s: %s", path, exc)
        return None
    return token_from_argument(values.get(key))


def resolve_token_source(
    explicit: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    dotfile: Path | None = None,
    key: str = ENV_ACCESS_TOKEN,
) -> tuple[str, str | None]:
    """Walk the fallback chain and report which step supplied the token.

    Returns ``(token, source)`` where ``source`` is ``"argument"``, ``"env"``,
    ``"dotfile"`` or ``None`` when nothing was found (token is then ``""``).
    """
    steps = (
        ("argument", lambda: token_from_argument(explicit)),
        ("env", lambda: token_from_env(environ, key)),
        ("dotfile", lambda: token_from_dotfile(dotfile, key)),
    )
    for source, step in steps:
        token = step()
        if token:
            return token, source
    return "", None


def resolve_access_token(
    explicit: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    dotfile: Path | None = None,
    key: str = ENV_ACCESS_TOKEN,
) -> str:
    token, _ = resolve_token_source(
        explicit, environ=environ, dotfile=dotfile, key=key
    )
    return token
