"""Boundary towards the low-level installer."""

from autoinst.installer.config import (
    DhcpLease,
    InstallConfig,
    InstallEnvironment,
    project_install_config,
)
from autoinst.installer.protocol import LowLevelMessage, LowLevelSession, parse_message

__all__ = [
    "DhcpLease",
    "InstallConfig",
    "InstallEnvironment",
    "project_install_config",
    "LowLevelMessage",
    "LowLevelSession",
    "parse_message",
]
