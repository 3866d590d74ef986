"""Fetch settings from the mode file or the command line."""

import logging
import os
import tomllib
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from autoinst.errors import ConfigurationError, UsageError
from autoinst.models.fetch import AutoInstSettings, FetchMode, HttpOptions


logger = logging.getLogger(__name__)

AUTOINST_MODE_FILE = Path("/cdrom/auto-installer-mode.toml")
MODE_FILE_ENV = "AUTOINST_MODE_FILE"


def default_mode_file() -> Path:
    """Mode file location, overridable through the environment."""
    override = os.environ.get(MODE_FILE_ENV)
    return Path(override) if override else AUTOINST_MODE_FILE


def usage(prog: str) -> str:
    return f"usage: {prog} <http|iso|partition> [<http-url>] [<tls-cert-fingerprint>]"


def settings_from_cli_args(args: Sequence[str]) -> AutoInstSettings:
    """Build fetch settings from ``[prog, mode, url?, fingerprint?]``."""
    prog = args[0] if args else "autoinst-fetch-answer"
    if len(args) < 2:
        raise ConfigurationError(usage(prog))

    keyword = args[1].lower()
    if keyword in ("-h", "--help"):
        raise UsageError(usage(prog))

    modes = {mode.value: mode for mode in FetchMode}
    if keyword not in modes:
        raise ConfigurationError(
            "failed to parse fetch-from argument, not one of 'http', 'iso', or 'partition'"
        )
    mode = modes[keyword]

    if len(args) > 4:
        raise ConfigurationError(f"too many arguments\n{usage(prog)}")
    if len(args) > 2 and mode != FetchMode.HTTP:
        raise ConfigurationError(
            "only 'http' fetch-from mode supports additional url and cert-fingerprint arguments"
        )

    url: Optional[str] = args[2] if len(args) > 2 else None
    fingerprint: Optional[str] = args[3] if len(args) > 3 else None

    try:
        return AutoInstSettings(
            mode=mode,
            http=HttpOptions(url=url, cert_fingerprint=fingerprint),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid fetch settings: {_first_error(e)}") from e


def load_settings(path: Optional[Path] = None) -> AutoInstSettings:
    """Read fetch settings from the mode file."""
    path = Path(path) if path else default_mode_file()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Could not find needed file '{path}' in live environment: {e}"
        ) from e
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Failed to parse '{path}': {e}") from e

    try:
        data = tomllib.loads(raw)
        settings = AutoInstSettings.model_validate(data)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Failed to parse '{path}': {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Failed to parse '{path}': {_first_error(e)}") from e

    logger.debug(f"Loaded fetch settings from {path}: mode {settings.mode.value}")
    return settings


def resolve_settings(argv: List[str], mode_file: Optional[Path] = None) -> AutoInstSettings:
    """Command-line arguments win over the mode file."""
    if len(argv) > 1:
        return settings_from_cli_args(argv)
    return load_settings(mode_file)


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = first["msg"]
    return f"{location}: {message}" if location else message
