"""Answer acquisition from the configured source."""

import logging
from typing import Optional

from autoinst.errors import FetchError, NoAnswerFoundError
from autoinst.fetch.registry import FetcherRegistry
from autoinst.models.fetch import AutoInstSettings


logger = logging.getLogger(__name__)


def fetch_answer(settings: AutoInstSettings, registry: Optional[FetcherRegistry] = None) -> str:
    """Fetch the raw answer document from the configured source.

    Exactly one attempt is made against the source selected by
    ``settings.mode``; other sources are never tried.
    """
    registry = registry or FetcherRegistry()
    logger.info(f"Fetching answer file in mode {settings.mode.value}")

    fetcher = registry.get_fetcher(settings.mode)
    try:
        answer = fetcher.fetch(settings)
    except FetchError as e:
        logger.info(f"Fetching answer file via {settings.mode.value} failed: {e}")
        raise NoAnswerFoundError("Could not find any answer file!") from e

    logger.info("Queried answer file for automatic installation successfully")
    return answer
