"""Fetch the answer file from an HTTP endpoint."""

import logging

from autoinst.errors import ConfigurationError
from autoinst.fetch.base import BaseFetcher
from autoinst.models.fetch import AutoInstSettings
from autoinst.utils import http


logger = logging.getLogger(__name__)


class HttpFetcher(BaseFetcher):
    """GETs the answer file, optionally pinning the server certificate."""

    def fetch(self, settings: AutoInstSettings) -> str:
        url = settings.http.url
        if not url:
            raise ConfigurationError("No URL configured for 'http' fetch mode")

        logger.info(f"Fetching answer file from {url}")
        return http.get(url, settings.http.cert_fingerprint)
