import pytest
from hypothesis import settings

import numpy as np

from sparsematrix import DOK

settings.register_profile("sparsematrix", deadline=None)
settings.load_profile("sparsematrix")


@pytest.fixture(scope="session")
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def permutation():
    return DOK((5, 5), {(0, 1): 1, (1, 2): 1, (2, 3): 1, (3, 4): 1, (4, 0): 1})


@pytest.fixture
def parallel(monkeypatch):
    from sparsematrix import _settings

    monkeypatch.setattr(_settings, "PARALLEL", True)
    monkeypatch.setattr(_settings, "MAX_WORKERS", 4)
    monkeypatch.setattr(_settings, "PARALLEL_THRESHOLD", 0)
