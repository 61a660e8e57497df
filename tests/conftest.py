from __future__ import annotations

from collections.abc import Iterator

import pytest

from undercroft import config
from undercroft.util import rng


@pytest.fixture(autouse=True)
def reset_rng_streams() -> Iterator[None]:
    """Give every test the same deterministic shared streams."""
    rng.init(config.RANDOM_SEED)
    yield
    rng.init(config.RANDOM_SEED)
