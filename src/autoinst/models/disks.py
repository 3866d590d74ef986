"""Disk setup: wire shape, option blocks and validated result."""

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from autoinst.errors import AnswerValidationError
from autoinst.models.options import BtrfsRaidLevel, Filesystem, FilterMatch, FsType, ZfsRaidLevel


class LvmOptions(BaseModel):
    """Sizing options for ext4/xfs on LVM, all in GiB."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    hdsize: Optional[StrictFloat] = Field(default=None, gt=0)
    swapsize: Optional[StrictFloat] = Field(default=None, ge=0)
    maxroot: Optional[StrictFloat] = Field(default=None, gt=0)
    maxvz: Optional[StrictFloat] = Field(default=None, ge=0)
    minfree: Optional[StrictFloat] = Field(default=None, ge=0)


class ZfsOptions(BaseModel):
    """ZFS pool options."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    raid: Optional[ZfsRaidLevel] = None
    ashift: Optional[StrictInt] = Field(default=None, ge=9, le=16)
    arc_max: Optional[StrictInt] = Field(default=None, gt=0)
    checksum: Optional[Literal["on", "fletcher4", "sha256"]] = None
    compress: Optional[Literal["on", "off", "lzjb", "lz4", "zle", "gzip", "zstd"]] = None
    copies: Optional[StrictInt] = Field(default=None, ge=1, le=3)
    hdsize: Optional[StrictFloat] = Field(default=None, gt=0)


class BtrfsOptions(BaseModel):
    """Btrfs options."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    hdsize: Optional[StrictFloat] = Field(default=None, gt=0)
    raid: Optional[BtrfsRaidLevel] = None
    compress: Optional[Literal["on", "off", "zlib", "lzo", "zstd"]] = None


class DiskSetup(BaseModel):
    """``[disk-setup]`` table exactly as written in the answer file."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    filesystem: Filesystem
    disk_list: List[StrictStr] = Field(default_factory=list)
    filter: Optional[Dict[StrictStr, StrictStr]] = None
    filter_match: Optional[FilterMatch] = None
    zfs: Optional[ZfsOptions] = None
    lvm: Optional[LvmOptions] = None
    btrfs: Optional[BtrfsOptions] = None


@dataclass(frozen=True)
class DiskList:
    """Disks named explicitly, in installation order."""
    disks: List[str]


@dataclass(frozen=True)
class DiskFilter:
    """Disks chosen at install time by matching udev properties."""
    filter: Dict[str, str]


DiskSelection = Union[DiskList, DiskFilter]
FsOptions = Union[LvmOptions, ZfsOptions, BtrfsOptions]


@dataclass(frozen=True)
class Disks:
    """Validated disk setup."""
    fs_type: FsType
    disk_selection: DiskSelection
    filter_match: Optional[FilterMatch]
    fs_options: FsOptions

    @classmethod
    def from_raw(cls, source: DiskSetup) -> "Disks":
        """Apply the disk selection and filesystem option rules."""
        has_filter = bool(source.filter)
        if not source.disk_list and not has_filter:
            raise AnswerValidationError("Need either 'disk_list' or 'filter' set")
        if source.disk_list and has_filter:
            raise AnswerValidationError("Cannot use both, 'disk_list' and 'filter'")

        if source.disk_list:
            disk_selection = DiskList(list(source.disk_list))
        else:
            disk_selection = DiskFilter(dict(sorted(source.filter.items())))

        if source.filesystem in (Filesystem.EXT4, Filesystem.XFS):
            if source.zfs is not None or source.btrfs is not None:
                raise AnswerValidationError("make sure only 'lvm' options are set")
            if len(source.disk_list) > 1:
                raise AnswerValidationError("make sure to define only one disk for ext4 and xfs")
            fs_type = FsType(source.filesystem)
            fs_options = source.lvm or LvmOptions()

        elif source.filesystem == Filesystem.ZFS:
            if source.lvm is not None or source.btrfs is not None:
                raise AnswerValidationError("make sure only 'zfs' options are set")
            if source.zfs is None or source.zfs.raid is None:
                raise AnswerValidationError("ZFS raid level 'zfs.raid' must be set")
            fs_type = FsType.zfs(source.zfs.raid)
            fs_options = source.zfs

        else:
            if source.zfs is not None or source.lvm is not None:
                raise AnswerValidationError("make sure only 'btrfs' options are set")
            if source.btrfs is None or source.btrfs.raid is None:
                raise AnswerValidationError("BTRFS raid level 'btrfs.raid' must be set")
            fs_type = FsType.btrfs(source.btrfs.raid)
            fs_options = source.btrfs

        return cls(
            fs_type=fs_type,
            disk_selection=disk_selection,
            filter_match=source.filter_match,
            fs_options=fs_options,
        )

    def to_raw(self) -> Dict[str, object]:
        """Wire form of the validated disk setup."""
        data: Dict[str, object] = {"filesystem": self.fs_type.filesystem.value}
        if isinstance(self.disk_selection, DiskList):
            data["disk_list"] = list(self.disk_selection.disks)
        else:
            data["filter"] = dict(self.disk_selection.filter)
        if self.filter_match is not None:
            data["filter_match"] = self.filter_match.value

        block = self.fs_type.filesystem.value
        if self.fs_type.is_lvm:
            block = "lvm"
        options = self.fs_options.model_dump(mode="json", exclude_none=True)
        if options:
            data[block] = options
        return data
