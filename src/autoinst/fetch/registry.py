"""Fetcher registry mapping fetch modes to answer sources."""

import logging
from typing import Dict, Optional, Type

from autoinst.fetch.base import BaseFetcher
from autoinst.fetch.http import HttpFetcher
from autoinst.fetch.iso import IsoFetcher
from autoinst.fetch.partition import PartitionFetcher
from autoinst.models.fetch import FetchMode


logger = logging.getLogger(__name__)


class FetcherRegistry:
    """Registry for answer fetchers."""

    def __init__(self, fetchers: Optional[Dict[FetchMode, BaseFetcher]] = None):
        """Initialize fetcher registry, optionally with preconfigured fetchers."""
        self._fetchers: Dict[FetchMode, BaseFetcher] = dict(fetchers or {})
        self._fetcher_classes: Dict[FetchMode, Type[BaseFetcher]] = {
            FetchMode.ISO: IsoFetcher,
            FetchMode.PARTITION: PartitionFetcher,
            FetchMode.HTTP: HttpFetcher,
        }

    def get_fetcher(self, mode: FetchMode) -> BaseFetcher:
        """Get the fetcher for a mode, instantiating it on first use."""
        if mode not in self._fetchers:
            self._fetchers[mode] = self._fetcher_classes[mode]()
            logger.debug(f"Instantiated fetcher for mode {mode.value}")
        return self._fetchers[mode]

    def list_modes(self) -> list[FetchMode]:
        """List supported fetch modes."""
        return list(self._fetcher_classes.keys())
