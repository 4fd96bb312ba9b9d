"""
conftest.py — pytest fixtures shared across the test suite.

Every test starts from the default configuration; interval tests that compare
exact bounds run under the hardware rounding controller and are skipped on
platforms where fenv is not reachable through ctypes.
"""

import pytest

from interval_enclosure import (
    FenvRoundingController,
    Interval,
    RoundingError,
    SimulatedRoundingController,
    reset_config,
    use_controller,
)


# =========================================================================
# Configuration / controller fixtures
# =========================================================================

@pytest.fixture(autouse=True)
def default_config():
    """Reset global config (and the active controller) around each test."""
    yield reset_config()
    reset_config()


@pytest.fixture()
def fenv_controller():
    """Hardware rounding controller installed as the active one."""
    try:
        controller = FenvRoundingController()
    except RoundingError as exc:
        pytest.skip(f"fenv unavailable: {exc}")
    with use_controller(controller):
        yield controller


@pytest.fixture()
def simulated_controller():
    """Simulated (ulp-widening) controller installed as the active one."""
    controller = SimulatedRoundingController()
    with use_controller(controller):
        yield controller


# =========================================================================
# Interval fixtures
# =========================================================================

@pytest.fixture()
def pair():
    """The ([1, 2], [3, 4]) pair used by most arithmetic tests."""
    return Interval.with_range(1., 2.), Interval.with_range(3., 4.)
