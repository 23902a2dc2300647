"""Pure helpers for validating and classifying links. No I/O happens here."""

import re
from urllib.parse import urlsplit

from bitly_shorten.config import API_BASE_URL, SHORT_DOMAIN
from bitly_shorten.errors import ValidationError

_HTTP_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def is_valid_url(text: str | None) -> bool:
    if not text or not text.strip() or any(c.isspace() for c in text.strip()):
        return False
    try:
        parts = urlsplit(text.strip())
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def remove_http(text: str) -> str:
    return _HTTP_SCHEME.sub("", text, count=1)


def to_endpoint(path: str, base_url: str = API_BASE_URL) -> str:
    if _HTTP_SCHEME.match(path):
        return path
    base_url = base_url.rstrip("/")
    if path.startswith("/"):
        return f"{base_url}{path}"
    return f"{base_url}/{path}"


def validate_long_url(long_url: str | None) -> str:
    if not long_url or not long_url.strip():
        raise ValidationError("Please specify a URL to shorten.")
    if not is_valid_url(long_url):
        raise ValidationError(f"Please specify a valid URL to shorten: {long_url!r}")
    return long_url.strip()


def normalize_bitlink(bitlink: str | None) -> str:
    """Reduce ``https://bit.ly/abc?x=1`` or ``bit.ly/abc`` to ``bit.ly/abc``.

    Only host and path are kept; query string, fragment and a trailing ``/``
    are dropped.
    """
    if not bitlink or not bitlink.strip():
        raise ValidationError("Please specify a bitlink to expand.")
    text = bitlink.strip()
    if any(c.isspace() for c in text):
        raise ValidationError(f"Not a valid bitlink: {bitlink!r}")
    try:
        parts = urlsplit(f"//{remove_http(text)}")
    except ValueError as exc:
        raise ValidationError(f"Not a valid bitlink: {bitlink!r}") from exc
    host = parts.netloc
    path = parts.path.rstrip("/")
    if not host or "." not in host or not path.strip("/"):
        raise ValidationError(f"Not a valid bitlink: {bitlink!r}")
    return f"{host}{path}"


def is_bitlink(text: str, short_domain: str = SHORT_DOMAIN) -> bool:
    # Substring match only; custom branded short domains are not recognised.
    return short_domain in text
