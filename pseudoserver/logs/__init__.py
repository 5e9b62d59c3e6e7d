"""Project logging package.

Contains internal logging utilities (event catalog + LinkLogger). Avoid
importing stdlib logging through this package name externally.
"""

from .event_catalog import EVENT_TEMPLATES  # noqa: F401
from .logger import LinkLogger, logger  # noqa: F401

__all__ = ["LinkLogger", "logger", "EVENT_TEMPLATES"]
