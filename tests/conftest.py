from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.package_builder import PackageBuilder


@pytest.fixture
def package_builder(tmp_path: Path) -> PackageBuilder:
    """Provide a reusable workspace builder rooted at the pytest tmp_path."""
    return PackageBuilder(tmp_path)
