"""Shared pytest fixtures for link simulator tests."""

from random import Random

import pytest

from link_sim.config import LinkConfig
from link_sim.sampler import MetricsSampler

FIXED_TIME = 1754258000.0


@pytest.fixture
def config() -> LinkConfig:
    """Default link bounds."""
    return LinkConfig()


@pytest.fixture
def sampler(config: LinkConfig) -> MetricsSampler:
    """Create a sampler with a seeded generator and a frozen clock."""
    return MetricsSampler(config, rng=Random(42), clock=lambda: FIXED_TIME)
