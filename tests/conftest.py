"""py.test standard config file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from pslresolver import Rules, TopLevelDomains

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_log_level() -> None:
    """Automatically reset log level verbosity between tests.

    Generally want test output the Unix way: silence is golden.
    """
    logging.getLogger().setLevel(logging.WARN)


@pytest.fixture(scope="session")
def fixture_path() -> Callable[[str], Path]:
    """Map a file name to its path under tests/fixtures."""
    return lambda name: FIXTURES_DIR / name


@pytest.fixture(scope="session")
def rules() -> Rules:
    """Rules loaded from the bundled Public Suffix List excerpt."""
    return Rules.from_path(FIXTURES_DIR / "public_suffix_list.dat")


@pytest.fixture(scope="session")
def tlds() -> TopLevelDomains:
    """Top level domains loaded from the bundled Root Zone Database excerpt."""
    return TopLevelDomains.from_path(FIXTURES_DIR / "root_zones.dat")
