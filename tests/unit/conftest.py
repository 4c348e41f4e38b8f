"""Unit test collection hooks: mark everything as unit, search modules as search."""

from pathlib import Path

import pytest


def pytest_collection_modifyitems(config, items):
    for item in items:
        parts = Path(str(item.fspath)).parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        if "search" in parts:
            item.add_marker(pytest.mark.search)
