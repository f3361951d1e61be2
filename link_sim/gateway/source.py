"""Where the gateway gets its samples from."""

from __future__ import annotations

import json
import logging
import subprocess
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from link_sim.metrics import LinkMetrics

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from random import Random

    from link_sim.sampler import MetricsSampler

logger = logging.getLogger(__name__)


class SimulatorUnavailableError(RuntimeError):
    """The simulator could not produce a sample."""


class MetricsSource(ABC):
    @abstractmethod
    def fetch(self) -> LinkMetrics:
        """Return a fresh sample or raise SimulatorUnavailableError."""
        ...

    @abstractmethod
    def is_available(self) -> bool: ...


class SamplerSource(MetricsSource):
    """Samples in-process from a shared MetricsSampler."""

    def __init__(self, sampler: MetricsSampler) -> None:
        self.sampler = sampler

    def fetch(self) -> LinkMetrics:
        return self.sampler.generate_metrics()

    def is_available(self) -> bool:
        return True


def extract_json(output: str) -> str:
    """Cut the JSON object out of simulator output that may carry banners."""
    start = output.find("{")
    end = output.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise SimulatorUnavailableError(f"Could not extract JSON from simulator output: {output!r}")
    return output[start : end + 1]


class ProcessSource(MetricsSource):
    """Runs the simulator as a subprocess in one-shot JSON mode."""

    def __init__(self, command: Sequence[str], timeout: float = 5.0) -> None:
        self.command = list(command)
        self.timeout = timeout

    def _run(self) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                [*self.command, "--json"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise SimulatorUnavailableError(f"Failed to run {self.command[0]}: {e}") from e

    def fetch(self) -> LinkMetrics:
        result = self._run()
        if result.returncode != 0:
            raise SimulatorUnavailableError(
                f"Link simulator failed with exit code: {result.returncode}"
            )

        payload = extract_json(result.stdout.strip())
        logger.debug("Received JSON from link simulator: %s", payload)
        try:
            return LinkMetrics.from_dict(json.loads(payload))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise SimulatorUnavailableError(f"Malformed simulator output: {e}") from e

    def is_available(self) -> bool:
        try:
            return self._run().returncode == 0
        except SimulatorUnavailableError as e:
            logger.warning("Link simulator not available: %s", e)
            return False


def generate_mock_metrics(rng: Random, clock: Callable[[], float] = time.time) -> LinkMetrics:
    """Independent draws in plausible ranges, used when the simulator is down.

    Unlike the real sampler these values are uncorrelated.
    """
    return LinkMetrics(
        latency_ms=15.0 + rng.random() * 4.0,
        jitter_ms=0.1 + rng.random() * 4.9,
        signal_strength_db=-85.0 + rng.random() * 40.0,
        packet_loss_rate=rng.random() * 2.0,
        bandwidth_mbps=50.0 + rng.random() * 950.0,
        snr_db=-75.0 + rng.random() * 20.0,
        timestamp=int(clock()),
    )
