import logging

import pytest

from pseudoserver.logging_config import error_aggregator
from tests.fixtures.link_fixtures import RecordingLink, make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def link():
    return RecordingLink()


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    """Keep error counts from leaking between tests."""
    yield
    error_aggregator.clear()


@pytest.fixture(autouse=True)
def _quiet_debug_env(monkeypatch):
    # The logger reads DEBUG on every call; tests opt in explicitly.
    monkeypatch.delenv("DEBUG", raising=False)
    logging.getLogger("pseudoserver").setLevel(logging.NOTSET)
