"""Answer file models.

Parsing is two-phase: the TOML document is first checked against the wire
models below (unknown keys are rejected at every level), then each section
with mutually exclusive fields is converted into its validated form.
"""

import logging
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli_w
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
)

from autoinst.errors import AnswerParseError, AnswerValidationError
from autoinst.models.disks import Disks, DiskSetup
from autoinst.models.network import (
    NetworkInAnswer,
    NetworkSettings,
    network_settings_from_raw,
    network_settings_to_raw,
)
from autoinst.models.options import Fqdn, KeyboardLayout


logger = logging.getLogger(__name__)


class GlobalSettings(BaseModel):
    """``[global]`` table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    country: StrictStr = Field(..., min_length=2, max_length=2)
    fqdn: StrictStr = Field(..., description="Fully qualified domain name of the host")
    keyboard: KeyboardLayout
    mailto: StrictStr
    timezone: StrictStr
    root_password: Optional[StrictStr] = None
    root_password_hashed: Optional[StrictStr] = None
    reboot_on_error: StrictBool = False
    root_ssh_keys: List[StrictStr] = Field(default_factory=list)

    @field_validator("country")
    @classmethod
    def lowercase_country(cls, v):
        return v.lower()

    @field_validator("fqdn")
    @classmethod
    def validate_fqdn(cls, v):
        Fqdn.parse(v)
        return v

    @property
    def hostname(self) -> Fqdn:
        return Fqdn.parse(self.fqdn)


class PostInstallWebhook(BaseModel):
    """``[post-installation-webhook]`` table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: StrictStr = Field(..., description="URL to send a POST request to")
    cert_fingerprint: Optional[StrictStr] = Field(None, description="SHA256 cert fingerprint for pinning")


class FirstBootHookSourceMode(str, Enum):
    """Where the first-boot executable comes from."""
    FROM_URL = "from-url"
    FROM_ISO = "from-iso"


class FirstBootHookServiceOrdering(str, Enum):
    """When the first-boot service runs relative to system bring-up."""
    BEFORE_NETWORK = "before-network"
    NETWORK_ONLINE = "network-online"
    FULLY_UP = "fully-up"

    @property
    def systemd_target_name(self) -> str:
        """systemd target the service is ordered against, without ``.target``."""
        return _ORDERING_TARGETS[self]


# Must stay in sync with the service files shipped by the first-boot package.
_ORDERING_TARGETS = {
    FirstBootHookServiceOrdering.BEFORE_NETWORK: "network-pre",
    FirstBootHookServiceOrdering.NETWORK_ONLINE: "network-online",
    FirstBootHookServiceOrdering.FULLY_UP: "multi-user",
}


class FirstBootHookInfo(BaseModel):
    """``[first-boot]`` table exactly as written in the answer file."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: FirstBootHookSourceMode
    ordering: FirstBootHookServiceOrdering = FirstBootHookServiceOrdering.FULLY_UP
    url: Optional[StrictStr] = None
    cert_fingerprint: Optional[StrictStr] = Field(None, alias="cert-fingerprint")


@dataclass(frozen=True)
class FirstBootHook:
    """Validated first-boot hook."""
    source: FirstBootHookSourceMode
    ordering: FirstBootHookServiceOrdering
    url: Optional[str] = None
    cert_fingerprint: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: FirstBootHookInfo) -> "FirstBootHook":
        """URL and fingerprint are only legal when fetching from a URL."""
        if raw.source == FirstBootHookSourceMode.FROM_URL:
            if raw.url is None:
                raise AnswerValidationError("Field 'url' must be set for 'from-url' first-boot hook.")
        else:
            if raw.url is not None:
                raise AnswerValidationError("Field 'url' not supported for 'from-iso' first-boot hook.")
            if raw.cert_fingerprint is not None:
                raise AnswerValidationError(
                    "Field 'cert-fingerprint' not supported for 'from-iso' first-boot hook."
                )
        return cls(
            source=raw.source,
            ordering=raw.ordering,
            url=raw.url,
            cert_fingerprint=raw.cert_fingerprint,
        )

    def to_raw(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"source": self.source.value, "ordering": self.ordering.value}
        if self.url is not None:
            data["url"] = self.url
        if self.cert_fingerprint is not None:
            data["cert-fingerprint"] = self.cert_fingerprint
        return data


class AnswerInFile(BaseModel):
    """Top-level layout of the answer file."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    global_: GlobalSettings = Field(..., alias="global")
    network: NetworkInAnswer
    disk_setup: DiskSetup = Field(..., alias="disk-setup")
    post_installation_webhook: Optional[PostInstallWebhook] = Field(
        None, alias="post-installation-webhook"
    )
    first_boot: Optional[FirstBootHookInfo] = Field(None, alias="first-boot")


@dataclass(frozen=True)
class Answer:
    """Validated answer, immutable once parsed."""
    global_: GlobalSettings
    network: NetworkSettings
    disks: Disks
    post_installation_webhook: Optional[PostInstallWebhook] = None
    first_boot: Optional[FirstBootHook] = None

    @classmethod
    def from_raw(cls, raw: AnswerInFile) -> "Answer":
        return cls(
            global_=raw.global_,
            network=network_settings_from_raw(raw.network),
            disks=Disks.from_raw(raw.disk_setup),
            post_installation_webhook=raw.post_installation_webhook,
            first_boot=FirstBootHook.from_raw(raw.first_boot) if raw.first_boot else None,
        )

    def to_raw(self) -> Dict[str, Any]:
        """Wire form of the answer, suitable for serializing back to TOML."""
        data: Dict[str, Any] = {
            "global": self.global_.model_dump(mode="json", exclude_none=True),
            "network": network_settings_to_raw(self.network),
            "disk-setup": self.disks.to_raw(),
        }
        if self.post_installation_webhook is not None:
            data["post-installation-webhook"] = self.post_installation_webhook.model_dump(
                mode="json", exclude_none=True
            )
        if self.first_boot is not None:
            data["first-boot"] = self.first_boot.to_raw()
        return data


def parse_answer(text: str) -> Answer:
    """Parse and validate an answer document."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise AnswerParseError(f"Failed parsing answer file: {e}") from e

    try:
        raw = AnswerInFile.model_validate(data)
    except ValidationError as e:
        raise AnswerParseError(f"Failed parsing answer file: {e}") from e

    answer = Answer.from_raw(raw)
    logger.debug("Answer file parsed and validated")
    return answer


def load_answer(path: Path) -> Answer:
    """Read, parse and validate an answer file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AnswerParseError(f"Failed reading answer file {path}: {e}") from e
    return parse_answer(text)


def dump_answer(answer: Answer) -> str:
    """Serialize a validated answer back to TOML."""
    return tomli_w.dumps(answer.to_raw())
