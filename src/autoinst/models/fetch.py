"""Answer fetch settings models."""

from enum import Enum
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator

from autoinst.errors import InvalidFingerprintError
from autoinst.utils.http import parse_fingerprint


class FetchMode(str, Enum):
    """Source the answer file is retrieved from."""
    ISO = "iso"
    PARTITION = "partition"
    HTTP = "http"


class HttpOptions(BaseModel):
    """Options only valid for the ``http`` fetch mode."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: Optional[StrictStr] = Field(None, description="URL to fetch the answer file from")
    cert_fingerprint: Optional[StrictStr] = Field(None, description="SHA256 cert fingerprint for pinning")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        """URL must be absolute with an http(s) scheme and a host."""
        if v is None:
            return v
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid URL '{v}': {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"Invalid URL '{v}': expected an absolute http or https URL")
        return v

    @field_validator("cert_fingerprint")
    @classmethod
    def validate_fingerprint(cls, v):
        if v is not None:
            try:
                parse_fingerprint(v)
            except InvalidFingerprintError as e:
                raise ValueError(str(e)) from e
        return v

    @property
    def is_empty(self) -> bool:
        return self.url is None and self.cert_fingerprint is None


class AutoInstSettings(BaseModel):
    """Selected fetch mode plus its options."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: FetchMode
    http: HttpOptions = Field(default_factory=HttpOptions)

    @field_validator("mode", mode="before")
    @classmethod
    def lowercase_mode(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @model_validator(mode="after")
    def check_http_options(self):
        """URL is required for ``http`` and forbidden for the other modes."""
        if self.mode == FetchMode.HTTP:
            if self.http.url is None:
                raise ValueError("'http' fetch mode requires 'http.url' to be set")
        elif not self.http.is_empty:
            raise ValueError(
                f"'http' options are not supported for '{self.mode.value}' fetch mode"
            )
        return self
