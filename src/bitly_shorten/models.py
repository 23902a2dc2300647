from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

EMPTY_JSON = "{}"


class Method(StrEnum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


class _Payload(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def payload(self) -> dict[str, Any]:
        """JSON body with unset, blank and empty fields left out."""
        return {
            key: value
            for key, value in self.model_dump(exclude_none=True).items()
            if value != []
        }


class ShortenRequest(_Payload):
    long_url: str
    group_guid: str | None = None
    domain: str | None = None


class ExpandRequest(_Payload):
    bitlink_id: str


class CreateRequest(_Payload):
    long_url: str
    domain: str | None = None
    title: str | None = None
    group_guid: str | None = None
    tags: list[str] = []
    deeplinks: list[dict[str, str]] = []


class BitlinkResponse(BaseModel):
    model_config = ConfigDict(extra="allow")
    link: str


class ExpandResponse(BaseModel):
    model_config = ConfigDict(extra="allow")
    long_url: str


class ErrorBody(BaseModel):
    """Shape of the JSON Bitly returns alongside a non-2xx status."""

    model_config = ConfigDict(extra="allow")
    message: str | None = None
    description: str | None = None


class CallResponse(BaseModel):
    body: str = EMPTY_JSON
    message: str = ""
    description: str = ""
    status_code: int = -1

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def is_created(self) -> bool:
        return self.status_code == 201

    @property
    def is_bad_request(self) -> bool:
        return self.status_code == 400

    @property
    def is_upgrade_required(self) -> bool:
        return self.status_code == 402

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_gone(self) -> bool:
        return self.status_code == 410

    @property
    def is_expectation_failed(self) -> bool:
        return self.status_code == 417

    @property
    def is_unprocessable_entity(self) -> bool:
        return self.status_code == 422

    @property
    def is_too_many_requests(self) -> bool:
        return self.status_code == 429

    @property
    def is_internal_error(self) -> bool:
        return self.status_code == 500

    @property
    def is_temporarily_unavailable(self) -> bool:
        return self.status_code == 503

    def __str__(self):
        return f"CallResponse(status_code={self.status_code})"
