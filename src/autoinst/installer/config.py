"""Projection of a validated answer onto the low-level installer configuration."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from autoinst.errors import AnswerValidationError
from autoinst.models.answer import Answer
from autoinst.models.disks import BtrfsOptions, LvmOptions, ZfsOptions
from autoinst.models.network import NetworkManual


logger = logging.getLogger(__name__)

ZFS_DEFAULT_ASHIFT = 12
ZFS_DEFAULT_COPIES = 1
ZFS_ARC_MIN_MIB = 64
ZFS_ARC_MAX_MIB = 16 * 1024


@dataclass(frozen=True)
class DhcpLease:
    """Network configuration the live system received via DHCP."""
    cidr: str
    gateway: str
    dns: str


@dataclass(frozen=True)
class InstallEnvironment:
    """Facts about the target machine that only the live system knows."""
    target_disks: List[str]
    disk_size: float
    mngmt_nic: str
    total_memory: int
    dhcp: Optional[DhcpLease] = None


class InstallZfsOption(BaseModel):
    ashift: int
    compress: str
    checksum: str
    copies: int
    arc_max: int


class InstallBtrfsOption(BaseModel):
    compress: str


class InstallRootPassword(BaseModel):
    plain: Optional[str] = None
    hashed: Optional[str] = None


class InstallFirstBootSetup(BaseModel):
    enabled: int = 0
    ordering_target: Optional[str] = None


class InstallConfig(BaseModel):
    """Record sent as the first line to the low-level installer."""
    autoreboot: int = 1

    filesys: str
    hdsize: float
    swapsize: Optional[float] = None
    maxroot: Optional[float] = None
    minfree: Optional[float] = None
    maxvz: Optional[float] = None

    zfs_opts: Optional[InstallZfsOption] = None
    btrfs_opts: Optional[InstallBtrfsOption] = None

    target_hd: Optional[str] = None
    disk_selection: Dict[str, str] = Field(default_factory=dict)

    existing_storage_auto_rename: int = 1

    country: str
    timezone: str
    keymap: str

    root_password: InstallRootPassword
    mailto: str
    root_ssh_keys: List[str] = Field(default_factory=list)

    mngmt_nic: str

    hostname: str
    domain: str
    cidr: str
    gateway: str
    dns: str

    first_boot: InstallFirstBootSetup = Field(default_factory=InstallFirstBootSetup)

    def to_json(self) -> str:
        """Single-line JSON, without unset optionals and empty collections."""
        exclude = set()
        if not self.disk_selection:
            exclude.add("disk_selection")
        if not self.root_ssh_keys:
            exclude.add("root_ssh_keys")
        return self.model_dump_json(exclude_none=True, exclude=exclude)


def default_zfs_arc_max(total_memory: int) -> int:
    """ARC limit in MiB: a tenth of the memory, clamped to 64 MiB..16 GiB."""
    return max(ZFS_ARC_MIN_MIB, min(total_memory // 10, ZFS_ARC_MAX_MIB))


def project_install_config(answer: Answer, environment: InstallEnvironment) -> InstallConfig:
    """Translate a validated answer into the installer configuration record."""
    disks = answer.disks
    options = disks.fs_options
    targets = list(environment.target_disks)
    if not targets:
        raise AnswerValidationError("No target disk matched the disk setup")

    fields = {
        "filesys": str(disks.fs_type),
        "hdsize": options.hdsize or environment.disk_size,
    }

    if isinstance(options, LvmOptions):
        if len(targets) != 1:
            raise AnswerValidationError(
                f"ext4 and xfs need exactly one target disk, {len(targets)} matched"
            )
        fields.update(
            target_hd=targets[0],
            swapsize=options.swapsize,
            maxroot=options.maxroot,
            minfree=options.minfree,
            maxvz=options.maxvz,
        )
    else:
        fields["disk_selection"] = {str(index): disk for index, disk in enumerate(targets)}
        if isinstance(options, ZfsOptions):
            fields["zfs_opts"] = InstallZfsOption(
                ashift=options.ashift or ZFS_DEFAULT_ASHIFT,
                compress=options.compress or "on",
                checksum=options.checksum or "on",
                copies=options.copies or ZFS_DEFAULT_COPIES,
                arc_max=options.arc_max or default_zfs_arc_max(environment.total_memory),
            )
        elif isinstance(options, BtrfsOptions):
            fields["btrfs_opts"] = InstallBtrfsOption(compress=options.compress or "off")

    network = answer.network
    if isinstance(network, NetworkManual):
        fields.update(cidr=str(network.cidr), gateway=str(network.gateway), dns=str(network.dns))
    else:
        if environment.dhcp is None:
            raise AnswerValidationError("Network is set 'from-dhcp' but no DHCP lease is available")
        fields.update(
            cidr=environment.dhcp.cidr,
            gateway=environment.dhcp.gateway,
            dns=environment.dhcp.dns,
        )

    global_ = answer.global_
    fqdn = global_.hostname
    first_boot = InstallFirstBootSetup()
    if answer.first_boot is not None:
        first_boot = InstallFirstBootSetup(
            enabled=1,
            ordering_target=answer.first_boot.ordering.systemd_target_name,
        )

    config = InstallConfig(
        country=global_.country,
        timezone=global_.timezone,
        keymap=str(global_.keyboard),
        root_password=InstallRootPassword(
            plain=global_.root_password,
            hashed=global_.root_password_hashed,
        ),
        mailto=global_.mailto,
        root_ssh_keys=list(global_.root_ssh_keys),
        mngmt_nic=environment.mngmt_nic,
        hostname=fqdn.host,
        domain=fqdn.domain,
        first_boot=first_boot,
        **fields,
    )
    logger.debug(f"Projected install config for {fqdn}: {config.filesys} on {targets}")
    return config
