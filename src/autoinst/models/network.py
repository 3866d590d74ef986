"""Network settings: wire shape and validated variants."""

from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, IPv6Interface
from typing import Dict, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    IPvAnyAddress,
    IPvAnyInterface,
    StrictStr,
    field_validator,
)

from autoinst.errors import AnswerValidationError


class NetworkInAnswer(BaseModel):
    """``[network]`` table exactly as written in the answer file."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: Literal["from-dhcp", "from-answer"] = Field(default="from-dhcp")
    cidr: Optional[IPvAnyInterface] = None
    dns: Optional[IPvAnyAddress] = None
    gateway: Optional[IPvAnyAddress] = None
    filter: Optional[Dict[StrictStr, StrictStr]] = None

    @field_validator("cidr", "dns", "gateway", mode="before")
    @classmethod
    def require_text(cls, v):
        """Addresses are written as strings, never as bare numbers."""
        if v is None or isinstance(v, (str, IPv4Address, IPv6Address, IPv4Interface, IPv6Interface)):
            return v
        raise ValueError(f"expected an address string, got {type(v).__name__}")

    @field_validator("cidr", mode="before")
    @classmethod
    def require_prefix(cls, v):
        """The prefix length is mandatory."""
        if isinstance(v, str) and "/" not in v:
            raise ValueError(f"'{v}' is missing the prefix length, expected <address>/<prefix>")
        return v


@dataclass(frozen=True)
class FromDhcp:
    """Network is configured from the DHCP lease of the live system."""


@dataclass(frozen=True)
class NetworkManual:
    """Static network configuration from the answer file."""
    cidr: Union[IPv4Interface, IPv6Interface]
    dns: Union[IPv4Address, IPv6Address]
    gateway: Union[IPv4Address, IPv6Address]
    filter: Dict[str, str] = field(default_factory=dict)


NetworkSettings = Union[FromDhcp, NetworkManual]

_MANUAL_FIELDS = ("cidr", "dns", "gateway", "filter")


def network_settings_from_raw(raw: NetworkInAnswer) -> NetworkSettings:
    """Convert the ``[network]`` table into a ``NetworkSettings`` variant.

    Fields are checked in a fixed order and the first offending one is
    named in the error.
    """
    if raw.source == "from-answer":
        for name in _MANUAL_FIELDS:
            if getattr(raw, name) is None:
                raise AnswerValidationError(f"Field '{name}' must be set.")

        return NetworkManual(
            cidr=raw.cidr,
            dns=raw.dns,
            gateway=raw.gateway,
            filter=dict(sorted(raw.filter.items())),
        )

    for name in _MANUAL_FIELDS:
        if getattr(raw, name) is not None:
            raise AnswerValidationError(f"Field '{name}' not supported for 'from-dhcp' config.")

    return FromDhcp()


def network_settings_to_raw(settings: NetworkSettings) -> Dict[str, object]:
    """Wire form of a validated network variant."""
    if isinstance(settings, NetworkManual):
        return {
            "source": "from-answer",
            "cidr": str(settings.cidr),
            "dns": str(settings.dns),
            "gateway": str(settings.gateway),
            "filter": dict(settings.filter),
        }
    return {"source": "from-dhcp"}
