"""Fetch the answer file baked into the installation media."""

import logging
from pathlib import Path
from typing import Optional

from autoinst.errors import FileReadError
from autoinst.fetch.base import BaseFetcher
from autoinst.models.fetch import AutoInstSettings


logger = logging.getLogger(__name__)

ISO_ANSWER_PATH = Path("/cdrom/answer.toml")


class IsoFetcher(BaseFetcher):
    """Reads the answer file from the mounted installation media."""

    def __init__(self, answer_path: Optional[Path] = None):
        self.answer_path = Path(answer_path) if answer_path else ISO_ANSWER_PATH

    def fetch(self, settings: AutoInstSettings) -> str:
        logger.info(f"Reading answer file from {self.answer_path}")
        try:
            return self.answer_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(self.answer_path, e) from e
