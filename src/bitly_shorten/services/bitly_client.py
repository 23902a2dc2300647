import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self, TypeVar

import httpx
import pydantic

from bitly_shorten.config import (
    API_BASE_URL,
    ENV_ACCESS_TOKEN,
    AppConfig,
    resolve_access_token,
)
from bitly_shorten.errors import AuthError, HttpError, ParseError, ValidationError
from bitly_shorten.links import normalize_bitlink, to_endpoint, validate_long_url
from bitly_shorten.models import (
    EMPTY_JSON,
    BitlinkResponse,
    CallResponse,
    CreateRequest,
    ErrorBody,
    ExpandRequest,
    ExpandResponse,
    Method,
    ShortenRequest,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=pydantic.BaseModel)

_REDACTED = "[redacted]"


def _redact(headers: httpx.Headers) -> dict[str, str]:
    return {
        key: _REDACTED if key.lower() == "authorization" else value
        for key, value in headers.items()
    }


def _log_request(request: httpx.Request) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "--> %s %s headers=%s body=%s",
            request.method,
            request.url,
            _redact(request.headers),
            request.content.decode("utf-8", errors="replace"),
        )


def _log_response(response: httpx.Response) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        response.read()
        logger.debug(
            "<-- %s %s body=%s",
            response.status_code,
            response.request.url,
            response.text,
        )


def _error_details(body: str) -> ErrorBody:
    try:
        return ErrorBody.model_validate_json(body)
    except pydantic.ValidationError:
        return ErrorBody()


def _parse(body: str, model: type[M]) -> M:
    try:
        return model.model_validate_json(body)
    except pydantic.ValidationError as exc:
        missing = [
            str(error["loc"][0])
            for error in exc.errors()
            if error["type"] == "missing" and error["loc"]
        ]
        if missing:
            raise ParseError(
                f"Response from Bitly is missing the '{missing[0]}' field.",
                body=body,
                field=missing[0],
            ) from exc
        raise ParseError(
            "An error occurred parsing the response from Bitly.", body=body
        ) from exc


@dataclass
class BitlyClient:
    """Client for the Bitly v4 link API.

    The access token is resolved once, here, from the explicit ``token``, then
    the ``BITLY_ACCESS_TOKEN`` environment variable, then ``~/.bitly``. A
    missing token only fails when a request is attempted.
    """

    token: str | None = field(default=None, repr=False)
    base_url: str = API_BASE_URL
    timeout: float = 10.0
    transport: httpx.BaseTransport | None = field(default=None, repr=False)
    dotfile: Path | None = None
    environ: Mapping[str, str] | None = field(default=None, repr=False)
    token_key: str = ENV_ACCESS_TOKEN

    def __post_init__(self) -> None:
        self.token = resolve_access_token(
            self.token,
            environ=self.environ,
            dotfile=self.dotfile,
            key=self.token_key,
        )
        self._http = httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
            headers={"Accept": "application/json"},
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )

    @classmethod
    def from_config(cls, config: AppConfig, token: str | None = None, **kwargs: Any) -> Self:
        return cls(
            token=token,
            base_url=config.api_base_url,
            timeout=config.timeout_seconds,
            dotfile=config.dotfile,
            token_key=config.token_env_var,
            **kwargs,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def shorten(
        self,
        long_url: str,
        group_guid: str | None = None,
        domain: str | None = None,
        to_json: bool = False,
    ) -> str:
        """Shorten ``long_url``; with ``to_json`` the full JSON body is returned."""
        long_url = validate_long_url(long_url)
        request = ShortenRequest(long_url=long_url, group_guid=group_guid, domain=domain)
        body = self._post("/shorten", request.payload())
        if to_json:
            return body
        return _parse(body, BitlinkResponse).link

    def expand(self, bitlink: str, to_json: bool = False) -> str:
        request = ExpandRequest(bitlink_id=normalize_bitlink(bitlink))
        body = self._post("/expand", request.payload())
        if to_json:
            return body
        return _parse(body, ExpandResponse).long_url

    def create(
        self,
        long_url: str,
        *,
        domain: str | None = None,
        title: str | None = None,
        group_guid: str | None = None,
        tags: list[str] | None = None,
        deeplinks: list[dict[str, str]] | None = None,
        to_json: bool = False,
    ) -> str:
        """Create a bitlink with extra attributes (title, tags, deeplinks...)."""
        long_url = validate_long_url(long_url)
        request = CreateRequest(
            long_url=long_url,
            domain=domain,
            title=title,
            group_guid=group_guid,
            tags=tags or [],
            deeplinks=deeplinks or [],
        )
        body = self._post("/bitlinks", request.payload())
        if to_json:
            return body
        return _parse(body, BitlinkResponse).link

    def call(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        method: Method = Method.POST,
    ) -> CallResponse:
        """Issue a raw API call.

        Non-2xx statuses are reported in the returned envelope instead of
        raised; only a missing token, a blank endpoint or a transport failure
        raise.
        """
        response = self._send(method, endpoint, params or {})
        details = (
            ErrorBody() if response.is_success else _error_details(response.text)
        )
        return CallResponse(
            body=response.text or EMPTY_JSON,
            message=details.message or "",
            description=details.description or "",
            status_code=response.status_code,
        )

    def _send(
        self, method: Method, endpoint: str, params: Mapping[str, Any]
    ) -> httpx.Response:
        if not endpoint or not endpoint.strip():
            raise ValidationError("Please specify a valid API endpoint.")
        if not self.token:
            raise AuthError()

        url = to_endpoint(endpoint.strip(), self.base_url)
        headers = {"Authorization": f"Bearer {self.token}"}
        kwargs: dict[str, Any] = {"headers": headers}
        if method in (Method.POST, Method.PATCH):
            kwargs["json"] = dict(params)
        elif method == Method.GET:
            kwargs["params"] = {k: v for k, v in params.items() if isinstance(v, str)}

        try:
            return self._http.request(method.value, url, **kwargs)
        except httpx.TransportError as exc:
            logger.debug("Transport failure calling %s: %s", url, exc)
            raise HttpError(None, message=str(exc) or type(exc).__name__) from exc

    def _post(self, endpoint: str, payload: dict[str, Any]) -> str:
        response = self._send(Method.POST, endpoint, payload)
        body = response.text
        if not response.is_success:
            details = _error_details(body)
            raise HttpError(
                response.status_code,
                body=body,
                message=details.message or "",
                description=details.description or "",
            )
        return body or EMPTY_JSON
