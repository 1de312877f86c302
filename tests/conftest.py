"""Shared fixtures."""

import pytest
import structlog

from py_efgy.config import Settings
from py_efgy.core import create_empty


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test (or the CLI) installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings():
    return Settings(
        bounding_box_size=1000.0,
        kernel="float",
        duplicate_policy="ignore",
        perimeter_sweep=True,
        centre_on_first_site=False,
    )


@pytest.fixture
def empty(settings):
    """Empty diagram with a bounding half-width of 1000."""
    return create_empty(1000, settings=settings)
