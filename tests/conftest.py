"""
Pytest Configuration and Fixtures.

Deterministic seams for the calculation engines: fixed random draws and a
frozen clock, plus a few fully-populated boundary records.
"""

import os
from datetime import datetime, timezone

import pytest

# Set testing mode before importing gameecon
os.environ["ENVIRONMENT"] = "testing"

from gameecon.common.clock import FixedClock
from gameecon.common.randomness import SeededRandomSource, SequenceRandomSource
from gameecon.schemas.achievement import AlignmentProfile, CapabilityProfile


FROZEN_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(FROZEN_NOW)


@pytest.fixture
def seeded_random() -> SeededRandomSource:
    return SeededRandomSource(seed=42)


@pytest.fixture
def draws():
    """Factory: draws(0.1, 0.9) -> a source replaying exactly those values."""
    def _make(*values: float) -> SequenceRandomSource:
        return SequenceRandomSource(values)
    return _make


@pytest.fixture
def mid_capability() -> CapabilityProfile:
    return CapabilityProfile(
        reasoning_score=50,
        planning_capability=50,
        self_improvement_rate=0.5,
        generalization_ability=50,
        creativity_score=50,
        learning_efficiency=50,
    )


@pytest.fixture
def full_alignment() -> AlignmentProfile:
    return AlignmentProfile(
        safety_measures=100,
        control_mechanisms=100,
        value_alignment_score=100,
        robustness=100,
        interpretability=100,
        ethical_constraints=100,
    )
