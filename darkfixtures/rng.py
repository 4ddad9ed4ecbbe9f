# darkfixtures/rng.py
from __future__ import annotations

from typing import Optional

import numpy as np

# Process-wide source used when a caller does not inject one. Not thread-safe:
# give each thread its own RandomState.
_shared = np.random.RandomState()


def random_state(rs: Optional[np.random.RandomState] = None) -> np.random.RandomState:
    return _shared if rs is None else rs


def seeded(seed: int) -> np.random.RandomState:
    return np.random.RandomState(seed)
