"""Shared fixtures for the evolution engine tests."""

import pytest

from bodyevolve import EvolveConfig, EvolveState, Integrator, System
from bodyevolve.reporting import reset_counts


@pytest.fixture(autouse=True)
def _fresh_diag_counts():
    reset_counts()
    yield
    reset_counts()


@pytest.fixture
def make_integrator():
    """Build an Integrator around a ready-made body list and matrix."""

    def _make(bodies, matrix, **cfg_kw):
        cfg_kw.setdefault("verbose", 0)
        cfg = EvolveConfig(**cfg_kw)
        state = EvolveState(cfg)
        return Integrator(bodies, System(), matrix, state, cfg)

    return _make
