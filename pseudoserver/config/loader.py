"""Settings loading utilities."""

from __future__ import annotations

import logging
import os
import sys

from pydantic import ValidationError

from ..constants import CONF_FILE_ENV, DEFAULT_CONF_FILE
from ..errors import SettingsLoadError
from .model import LinkSettings
from .repository import SettingsRepository


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def settings_path() -> str:
    """Settings file path, taken from the environment when set."""
    return os.environ.get(CONF_FILE_ENV, DEFAULT_CONF_FILE)


def load_settings(path: str | os.PathLike[str]) -> LinkSettings:
    """Load and validate the settings record at ``path``.

    Raises:
        SettingsLoadError: If the file cannot be read or parsed, or if any
            field fails validation.
    """
    repo = SettingsRepository(path)
    raw = repo.load_raw()
    try:
        return LinkSettings.from_dict(raw)
    except ValidationError as e:
        raise SettingsLoadError(
            f"invalid settings in {repo.path}: {_format_validation_error(e)}",
            path=repo.path,
        ) from e


def get_configuration() -> LinkSettings:
    """Load settings from the configured path.

    Returns:
        The validated LinkSettings.

    Raises:
        SystemExit: If the settings cannot be loaded; the link never starts
            without a complete settings record.
    """
    path = settings_path()
    try:
        settings = load_settings(path)
    except SettingsLoadError as e:
        logging.error(f"⚠️ Cannot load settings: {e}")
        sys.exit(1)
    logging.info(f"✅ Settings loaded from {path}")
    return settings


def print_config_summary(settings: LinkSettings) -> None:
    """Log a summary of the settings, secrets masked."""
    summary = settings.to_summary()
    logging.info(
        f"📊 Linking {summary['server_name']} ({summary['sid']}) to "
        f"{settings.remote_host}:{settings.remote_port}"
    )
    logging.info(
        f"👤 Bot {summary['nick']} ({summary['full_uid']}) in "
        f"{len(settings.channels)} channel(s)"
    )
    for key, value in summary.items():
        logging.debug(f"   {key}={value}")
