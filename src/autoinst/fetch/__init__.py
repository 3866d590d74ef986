"""Answer sources and fetch orchestration."""

from autoinst.fetch.base import BaseFetcher
from autoinst.fetch.orchestrator import fetch_answer
from autoinst.fetch.registry import FetcherRegistry

__all__ = [
    "BaseFetcher",
    "FetcherRegistry",
    "fetch_answer",
]
