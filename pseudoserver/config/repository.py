"""Reading the ``key=value`` settings file."""

from __future__ import annotations

import os

from ..errors import SettingsLoadError

_COMMENT_PREFIXES = ("#", ";")


def parse_settings_text(text: str, *, path: str | None = None) -> dict[str, str]:
    """Parse a ``key=value`` settings record.

    Blank lines and lines starting with ``#`` or ``;`` are ignored. Keys and
    values are stripped; keys are lower-cased. Keys with an empty value are
    left out so the model defaults apply.

    Args:
        text: Full text of the settings file.
        path: File name used in error messages.

    Returns:
        Mapping of keys to raw string values.

    Raises:
        SettingsLoadError: On a line without ``=``, an empty key or a
            duplicate key.
    """
    values: dict[str, str] = {}
    seen: set[str] = set()
    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        key, sep, value = line.partition("=")
        key = key.strip().lower()
        if not sep or not key:
            raise SettingsLoadError(
                f"line {lineno}: expected key=value", path=path, lineno=lineno
            )
        if key in seen:
            raise SettingsLoadError(
                f"line {lineno}: duplicate key {key!r}", path=path, lineno=lineno
            )
        seen.add(key)
        value = value.strip()
        if value:
            values[key] = value
    return values


class SettingsRepository:
    """Reads the raw settings record from a file on disk."""

    def __init__(self, path: str | os.PathLike[str]):
        """Initialize the SettingsRepository.

        Args:
            path: Path to the settings file.
        """
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)

    def load_raw(self) -> dict[str, str]:
        """Load raw key/value pairs from the file.

        Raises:
            SettingsLoadError: If the file is missing, unreadable or malformed.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            raise SettingsLoadError(
                f"settings file {self.path} not found", path=self.path
            ) from None
        except (OSError, UnicodeDecodeError) as e:
            raise SettingsLoadError(
                f"cannot read settings file {self.path}: {e}", path=self.path
            ) from e
        return parse_settings_text(text, path=self.path)
