"""Shared fixtures: clean environment and fresh global instances per test."""

import pytest

from c_layout_analyzer.config import reset_config
from c_layout_analyzer.cpp_analyzer import set_scanner
from c_layout_analyzer.layout import HostArchitecture, set_engine, set_resolver

CONFIG_ENV_VARS = (
    "LAYOUT_ARCHITECTURE",
    "LAYOUT_SHOW_ARCHITECTURE",
    "C_CPP_INTELLISENSE_MODE",
    "ANALYZER_CACHE_ENABLED",
    "ANALYZER_CACHE_MAX_SIZE",
)


def _reset_globals():
    reset_config()
    set_resolver(None)
    set_engine(None)
    set_scanner(None)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Run every test without configuration env vars and with fresh globals."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    _reset_globals()
    yield
    _reset_globals()


@pytest.fixture
def host64() -> HostArchitecture:
    return HostArchitecture(machine="x86_64", is_64bit=True)


@pytest.fixture
def host32() -> HostArchitecture:
    return HostArchitecture(machine="i686", is_64bit=False)
