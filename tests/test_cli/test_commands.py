"""Tests for CLI command implementations."""

from unittest.mock import patch

import pytest

from autoinst.cli.commands import show_install_config, validate_answer
from autoinst.errors import AnswerParseError
from autoinst.installer.config import InstallEnvironment


ANSWER = """
[global]
country = "at"
fqdn = "pve.example.org"
keyboard = "de"
mailto = "admin@example.org"
timezone = "Europe/Vienna"
root_password_hashed = "$y$j9T$abc$def"

[network]
source = "from-answer"
cidr = "10.0.0.5/24"
dns = "10.0.0.1"
gateway = "10.0.0.254"
filter.ID_NET_NAME = "enp1s0"

[disk-setup]
filesystem = "btrfs"
filter.ID_SERIAL = "*QEMU*"
btrfs.raid = "raid1"

[first-boot]
source = "from-iso"
ordering = "before-network"
"""


@pytest.fixture
def answer_path(tmp_path):
    path = tmp_path / "answer.toml"
    path.write_text(ANSWER)
    return path


class TestValidateAnswer:
    """Tests for validate_answer."""

    @patch("autoinst.cli.commands.console")
    def test_quiet(self, mock_console, answer_path):
        """Verify quiet mode returns the answer without printing."""
        answer = validate_answer(answer_path, quiet=True)

        assert answer.global_.fqdn == "pve.example.org"
        mock_console.print.assert_not_called()

    @patch("autoinst.cli.commands.console")
    def test_summary(self, mock_console, answer_path):
        """Verify the summary table and the success line are printed."""
        validate_answer(answer_path)

        table = mock_console.print.call_args_list[0].args[0]
        values = {
            setting: value
            for setting, value in zip(table.columns[0]._cells, table.columns[1]._cells)
        }
        assert values["Root password"] == "hashed"
        assert values["Network"] == "10.0.0.5/24 via 10.0.0.254, dns 10.0.0.1"
        assert values["Disks"] == "filter (any): ID_SERIAL=*QEMU*"
        assert values["First boot"] == "installation media (network-pre.target)"
        assert "is valid" in mock_console.print.call_args_list[1].args[0]

    def test_invalid_file(self, tmp_path):
        """Verify parse failures propagate."""
        path = tmp_path / "answer.toml"
        path.write_text("[global]\n")

        with pytest.raises(AnswerParseError):
            validate_answer(path)


@patch("autoinst.cli.commands.console")
def test_show_install_config(mock_console, answer_path):
    """Verify the projected record is printed without markup processing."""
    environment = InstallEnvironment(
        target_disks=["vda", "vdb"],
        disk_size=64.0,
        mngmt_nic="enp1s0",
        total_memory=4096,
    )

    show_install_config(answer_path, environment)

    args, kwargs = mock_console.print.call_args
    assert '"filesys":"BTRFS (RAID1)"' in args[0]
    assert kwargs["markup"] is False
