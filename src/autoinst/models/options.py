"""Filesystem, RAID and host naming options shared by the answer models."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Filesystem(str, Enum):
    """Filesystem selectable in the answer file."""
    EXT4 = "ext4"
    XFS = "xfs"
    ZFS = "zfs"
    BTRFS = "btrfs"


class ZfsRaidLevel(str, Enum):
    """ZFS pool layout."""
    RAID0 = "raid0"
    RAID1 = "raid1"
    RAID10 = "raid10"
    RAIDZ1 = "raidz-1"
    RAIDZ2 = "raidz-2"
    RAIDZ3 = "raidz-3"

    def __str__(self) -> str:
        return self.value.upper()


class BtrfsRaidLevel(str, Enum):
    """Btrfs profile for data and metadata."""
    RAID0 = "raid0"
    RAID1 = "raid1"
    RAID10 = "raid10"

    def __str__(self) -> str:
        return self.value.upper()


class FilterMatch(str, Enum):
    """How multiple disk filter predicates combine."""
    ANY = "any"
    ALL = "all"


class KeyboardLayout(str, Enum):
    """Keyboard layouts known to the installer."""
    DE = "de"
    DE_CH = "de-ch"
    DK = "dk"
    EN_GB = "en-gb"
    EN_US = "en-us"
    ES = "es"
    FI = "fi"
    FR = "fr"
    FR_BE = "fr-be"
    FR_CA = "fr-ca"
    FR_CH = "fr-ch"
    HU = "hu"
    IS = "is"
    IT = "it"
    JP = "jp"
    LT = "lt"
    MK = "mk"
    NL = "nl"
    NO = "no"
    PL = "pl"
    PT = "pt"
    PT_BR = "pt-br"
    SE = "se"
    SI = "si"
    TR = "tr"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FsType:
    """Resolved filesystem, carrying the RAID level for ZFS and Btrfs."""
    filesystem: Filesystem
    raid: Optional[Union[ZfsRaidLevel, BtrfsRaidLevel]] = None

    @classmethod
    def ext4(cls) -> "FsType":
        return cls(Filesystem.EXT4)

    @classmethod
    def xfs(cls) -> "FsType":
        return cls(Filesystem.XFS)

    @classmethod
    def zfs(cls, raid: ZfsRaidLevel) -> "FsType":
        return cls(Filesystem.ZFS, raid)

    @classmethod
    def btrfs(cls, raid: BtrfsRaidLevel) -> "FsType":
        return cls(Filesystem.BTRFS, raid)

    @property
    def is_lvm(self) -> bool:
        """ext4 and xfs are installed on top of LVM."""
        return self.filesystem in (Filesystem.EXT4, Filesystem.XFS)

    def __str__(self) -> str:
        if self.filesystem == Filesystem.ZFS:
            return f"ZFS ({self.raid})"
        if self.filesystem == Filesystem.BTRFS:
            return f"BTRFS ({self.raid})"
        return self.filesystem.value


_LABEL_RE = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$", re.IGNORECASE)


@dataclass(frozen=True)
class Fqdn:
    """Fully qualified domain name split into host and domain."""
    host: str
    domain: str

    @classmethod
    def parse(cls, value: str) -> "Fqdn":
        """Parse and validate an FQDN such as ``pve.example.org``."""
        value = value.strip()
        if not value:
            raise ValueError("FQDN must not be empty")
        if len(value) > 253:
            raise ValueError("FQDN is longer than 253 characters")

        labels = value.split(".")
        if len(labels) < 2:
            raise ValueError(f"FQDN '{value}' has no domain part")
        for label in labels:
            if not _LABEL_RE.match(label):
                raise ValueError(f"FQDN '{value}' contains invalid label '{label}'")
        if labels[0].isdigit():
            raise ValueError(f"hostname '{labels[0]}' must not be purely numeric")

        return cls(host=labels[0], domain=".".join(labels[1:]))

    def __str__(self) -> str:
        return f"{self.host}.{self.domain}"
