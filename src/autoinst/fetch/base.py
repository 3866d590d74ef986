"""Base fetcher interface."""

from abc import ABC, abstractmethod

from autoinst.models.fetch import AutoInstSettings


class BaseFetcher(ABC):
    """Interface all answer sources must implement."""

    @abstractmethod
    def fetch(self, settings: AutoInstSettings) -> str:
        """Return the raw answer document or raise ``FetchError``."""
        pass
