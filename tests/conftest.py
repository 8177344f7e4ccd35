"""Shared pytest fixtures for staycal tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_staycal_env(monkeypatch):
    """Drop STAYCAL_* variables so settings come from defaults.

    A developer shell exporting STAYCAL_TIMEZONE or a custom host block
    label would otherwise leak into every test.
    """
    import os

    for key in list(os.environ):
        if key.startswith("STAYCAL_"):
            monkeypatch.delenv(key, raising=False)
