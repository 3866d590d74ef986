"""Pydantic models for answer files and fetch settings."""

from autoinst.models.answer import (
    Answer,
    FirstBootHook,
    GlobalSettings,
    PostInstallWebhook,
    dump_answer,
    load_answer,
    parse_answer,
)
from autoinst.models.disks import Disks, DiskFilter, DiskList
from autoinst.models.fetch import AutoInstSettings, FetchMode, HttpOptions
from autoinst.models.network import FromDhcp, NetworkManual
from autoinst.models.options import FsType

__all__ = [
    "Answer",
    "FirstBootHook",
    "GlobalSettings",
    "PostInstallWebhook",
    "dump_answer",
    "load_answer",
    "parse_answer",
    "Disks",
    "DiskFilter",
    "DiskList",
    "AutoInstSettings",
    "FetchMode",
    "HttpOptions",
    "FromDhcp",
    "NetworkManual",
    "FsType",
]
