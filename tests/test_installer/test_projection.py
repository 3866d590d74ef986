"""Tests for projecting answers onto the installer configuration."""

import json

import pytest

from autoinst.errors import AnswerValidationError
from autoinst.installer.config import (
    DhcpLease,
    InstallEnvironment,
    default_zfs_arc_max,
    project_install_config,
)
from autoinst.models.answer import parse_answer


GLOBAL = """
[global]
country = "at"
fqdn = "pve.example.org"
keyboard = "de-ch"
mailto = "admin@example.org"
timezone = "Europe/Vienna"
root_password = "secret"
root_ssh_keys = ["ssh-ed25519 AAAAC3Nza admin"]
"""

DHCP = """
[network]
source = "from-dhcp"
"""

MANUAL = """
[network]
source = "from-answer"
cidr = "10.0.0.5/24"
dns = "10.0.0.1"
gateway = "10.0.0.254"
filter.ID_NET_NAME = "enp1s0"
"""

EXT4 = """
[disk-setup]
filesystem = "ext4"
disk_list = ["sda"]
lvm.swapsize = 4
lvm.maxroot = 32
"""

ZFS = """
[disk-setup]
filesystem = "zfs"
disk_list = ["sda", "sdb"]
zfs.raid = "raid1"
zfs.compress = "lz4"
"""

BTRFS = """
[disk-setup]
filesystem = "btrfs"
filter.ID_SERIAL = "*QEMU*"
btrfs.raid = "raid1"
btrfs.hdsize = 64
"""

LEASE = DhcpLease(cidr="192.168.1.50/24", gateway="192.168.1.1", dns="192.168.1.1")


def environment(targets=("sda",), dhcp=LEASE, memory=8192) -> InstallEnvironment:
    return InstallEnvironment(
        target_disks=list(targets),
        disk_size=128.0,
        mngmt_nic="enp1s0",
        total_memory=memory,
        dhcp=dhcp,
    )


class TestProjection:
    """Test project_install_config."""

    def test_ext4_with_dhcp(self):
        """Test the LVM layout and DHCP network values."""
        config = project_install_config(parse_answer(GLOBAL + DHCP + EXT4), environment())

        assert config.filesys == "ext4"
        assert config.target_hd == "sda"
        assert config.disk_selection == {}
        assert config.hdsize == 128.0
        assert config.swapsize == 4
        assert config.maxroot == 32
        assert config.hostname == "pve"
        assert config.domain == "example.org"
        assert config.keymap == "de-ch"
        assert config.cidr == "192.168.1.50/24"
        assert config.root_password.plain == "secret"
        assert config.root_password.hashed is None
        assert config.autoreboot == 1
        assert config.existing_storage_auto_rename == 1
        assert config.first_boot.enabled == 0

    def test_manual_network(self):
        """Test that static addresses come from the answer."""
        config = project_install_config(parse_answer(GLOBAL + MANUAL + EXT4), environment(dhcp=None))

        assert config.cidr == "10.0.0.5/24"
        assert config.gateway == "10.0.0.254"
        assert config.dns == "10.0.0.1"
        assert config.mngmt_nic == "enp1s0"

    def test_dhcp_without_lease(self):
        """Test that DHCP mode needs a lease."""
        with pytest.raises(AnswerValidationError) as exc_info:
            project_install_config(parse_answer(GLOBAL + DHCP + EXT4), environment(dhcp=None))

        assert "DHCP" in str(exc_info.value)

    def test_zfs(self):
        """Test ZFS options and their defaults."""
        config = project_install_config(
            parse_answer(GLOBAL + DHCP + ZFS),
            environment(targets=["sda", "sdb"], memory=32768),
        )

        assert config.filesys == "ZFS (RAID1)"
        assert config.target_hd is None
        assert config.disk_selection == {"0": "sda", "1": "sdb"}
        assert config.zfs_opts.compress == "lz4"
        assert config.zfs_opts.checksum == "on"
        assert config.zfs_opts.ashift == 12
        assert config.zfs_opts.copies == 1
        assert config.zfs_opts.arc_max == 3276

    def test_btrfs(self):
        """Test Btrfs options and explicit hdsize."""
        config = project_install_config(
            parse_answer(GLOBAL + DHCP + BTRFS),
            environment(targets=["vda", "vdb"]),
        )

        assert config.filesys == "BTRFS (RAID1)"
        assert config.hdsize == 64
        assert config.btrfs_opts.compress == "off"
        assert config.zfs_opts is None

    def test_lvm_needs_single_target(self):
        """Test that ext4 refuses several matched disks."""
        with pytest.raises(AnswerValidationError):
            project_install_config(parse_answer(GLOBAL + DHCP + EXT4), environment(targets=["sda", "sdb"]))

    def test_no_targets(self):
        """Test that an empty target list is refused."""
        with pytest.raises(AnswerValidationError):
            project_install_config(parse_answer(GLOBAL + DHCP + ZFS), environment(targets=[]))

    @pytest.mark.parametrize("ordering,target", [
        ("before-network", "network-pre"),
        ("network-online", "network-online"),
        ("fully-up", "multi-user"),
    ])
    def test_first_boot(self, ordering, target):
        """Test that a hook enables the first-boot service with its target."""
        text = GLOBAL + DHCP + EXT4 + f'\n[first-boot]\nsource = "from-iso"\nordering = "{ordering}"\n'

        config = project_install_config(parse_answer(text), environment())

        assert config.first_boot.enabled == 1
        assert config.first_boot.ordering_target == target


class TestToJson:
    """Test the wire form of the configuration record."""

    def test_single_line_without_unset_fields(self):
        """Test that the record is one line and omits unset values."""
        config = project_install_config(parse_answer(GLOBAL + DHCP + EXT4), environment())

        line = config.to_json()
        data = json.loads(line)

        assert "\n" not in line
        assert "disk_selection" not in data
        assert "zfs_opts" not in data
        assert "minfree" not in data
        assert data["root_password"] == {"plain": "secret"}
        assert data["root_ssh_keys"] == ["ssh-ed25519 AAAAC3Nza admin"]
        assert data["first_boot"] == {"enabled": 0}

    def test_disk_selection_present_for_zfs(self):
        """Test that multi-disk layouts carry the selection."""
        config = project_install_config(parse_answer(GLOBAL + DHCP + ZFS), environment(targets=["sda", "sdb"]))

        data = json.loads(config.to_json())

        assert data["disk_selection"] == {"0": "sda", "1": "sdb"}
        assert "target_hd" not in data


@pytest.mark.parametrize("memory,expected", [(256, 64), (8192, 819), (1024 * 1024, 16384)])
def test_default_zfs_arc_max(memory, expected):
    """Test ARC sizing bounds."""
    assert default_zfs_arc_max(memory) == expected
