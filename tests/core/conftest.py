"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def scenario():
    """Tree with A -> L and B -> L and no containers."""
    from tests.core.graph_test_helpers import scenario_host

    return scenario_host()


@pytest.fixture
def engine(scenario):
    """RelocationEngine over the scenario tree."""
    from slnmove.relocation import RelocationEngine

    return RelocationEngine(scenario)
