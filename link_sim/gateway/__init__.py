from link_sim.gateway.source import (
    MetricsSource,
    ProcessSource,
    SamplerSource,
    SimulatorUnavailableError,
    generate_mock_metrics,
)

__all__ = [
    "MetricsSource",
    "ProcessSource",
    "SamplerSource",
    "SimulatorUnavailableError",
    "generate_mock_metrics",
]
