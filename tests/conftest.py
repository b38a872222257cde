from typing import List

import pytest

from maze import Cell


@pytest.fixture
def footprints() -> List[Cell]:
    """List that collects cells handed to a footprint hook."""

    return []
