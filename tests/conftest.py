"""
Root conftest.py - Fixtures shared across all tests.

Puts the ``src`` directory on the path so the tests run from a plain checkout.
"""

import os
from pathlib import Path
import sys

import pytest

CFMISSING_SRC_DIR = Path(__file__).parent.parent.resolve() / "src"
if str(CFMISSING_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(CFMISSING_SRC_DIR))


@pytest.fixture(autouse=True)
def _clear_cfmissing_env(monkeypatch):
    """Keep CFMISSING_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("CFMISSING_"):
            monkeypatch.delenv(key, raising=False)
