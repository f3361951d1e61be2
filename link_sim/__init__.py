"""Synthetic microwave radio link telemetry."""

from link_sim.config import AppConfig, LinkConfig, validate_config
from link_sim.metrics import LinkMetrics
from link_sim.sampler import MetricsSampler, bandwidth_for_signal

__all__ = [
    "AppConfig",
    "LinkConfig",
    "LinkMetrics",
    "MetricsSampler",
    "bandwidth_for_signal",
    "validate_config",
]
