"""Post-installation webhook and first-boot hook retrieval."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from autoinst.errors import FileReadError
from autoinst.models.answer import FirstBootHook, FirstBootHookSourceMode, PostInstallWebhook
from autoinst.utils import http


logger = logging.getLogger(__name__)

ISO_FIRST_BOOT_HOOK_PATH = Path("/cdrom/autoinst-first-boot")


def notify_post_install(webhook: PostInstallWebhook, payload: Dict[str, Any]) -> str:
    """POST installation details to the configured webhook."""
    logger.info(f"Sending POST request to {webhook.url}")
    response = http.post(webhook.url, webhook.cert_fingerprint, json.dumps(payload))
    logger.debug("Post-installation webhook accepted the notification")
    return response


def fetch_first_boot_hook(hook: FirstBootHook, iso_path: Optional[Path] = None) -> bytes:
    """Return the first-boot executable from the media or its URL."""
    if hook.source == FirstBootHookSourceMode.FROM_ISO:
        path = Path(iso_path) if iso_path else ISO_FIRST_BOOT_HOOK_PATH
        logger.info(f"Reading first-boot hook from {path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise FileReadError(path, e) from e

    logger.info(f"Fetching first-boot hook from {hook.url}")
    return http.get_bytes(hook.url, hook.cert_fingerprint)
