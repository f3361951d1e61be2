"""Correlated random sampler for microwave link metrics."""

from __future__ import annotations

import logging
import threading
import time
from random import Random
from typing import TYPE_CHECKING

from link_sim.config import (
    BANDWIDTH_FACTOR_RANGE,
    JITTER_FLOOR_MS,
    LATENCY_VARIATION_MS,
    SNR_OFFSET_DB,
    LinkConfig,
)
from link_sim.metrics import LinkMetrics

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def bandwidth_for_signal(signal_strength_db: float, config: LinkConfig) -> float:
    """Interpolate available bandwidth from signal strength.

    The normalized signal position is clamped to [0.1, 1.0], so even the
    weakest signal keeps a tenth of the usable bandwidth span.
    """
    signal_min, signal_max = config.signal_strength_range
    low, high = BANDWIDTH_FACTOR_RANGE
    if signal_max == signal_min:
        factor = high  # degenerate range: the only signal level is the best one
    else:
        factor = (signal_strength_db - signal_min) / (signal_max - signal_min)
    factor = max(low, min(high, factor))
    bw_min, bw_max = config.bandwidth_range
    return bw_min + (bw_max - bw_min) * factor


class MetricsSampler:
    """Produces independent LinkMetrics samples from a shared random stream.

    The generator is created lazily on first use unless one is injected.
    Initialization and every draw happen under a lock, so a single sampler
    can serve concurrent connection handlers.
    """

    def __init__(
        self,
        config: LinkConfig | None = None,
        rng: Random | None = None,
        seed: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config if config is not None else LinkConfig()
        self._rng = rng
        self._seed = seed
        self._clock = clock
        self._lock = threading.Lock()
        self._initialized = rng is not None

    @property
    def config(self) -> LinkConfig:
        return self._config

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def initialized(self) -> bool:
        return self._initialized

    def ensure_initialized(self) -> None:
        with self._lock:
            self._ensure_initialized_locked()

    def _ensure_initialized_locked(self) -> None:
        if self._initialized:
            return
        if self._seed is None:
            self._seed = int(self._clock())
        self._rng = Random(self._seed)
        self._initialized = True
        logger.info("Link simulator initialized with seed: %d", self._seed)

    def _random_double(self, low: float, high: float) -> float:
        assert self._rng is not None
        return low + self._rng.random() * (high - low)

    def random_double(self, low: float, high: float) -> float:
        with self._lock:
            self._ensure_initialized_locked()
            return self._random_double(low, high)

    def generate_metrics(self) -> LinkMetrics:
        config = self._config
        with self._lock:
            self._ensure_initialized_locked()

            # Latency is left unclamped; overshooting the nominal range is allowed
            latency_ms = config.base_latency_ms + self._random_double(*LATENCY_VARIATION_MS)
            jitter_ms = self._random_double(JITTER_FLOOR_MS, config.jitter_range_ms)
            signal_strength_db = self._random_double(*config.signal_strength_range)
            packet_loss_rate = self._random_double(0.0, config.packet_loss_max_percent)
            snr_offset = self._random_double(*SNR_OFFSET_DB)

        return LinkMetrics(
            latency_ms=latency_ms,
            jitter_ms=jitter_ms,
            signal_strength_db=signal_strength_db,
            packet_loss_rate=packet_loss_rate,
            bandwidth_mbps=bandwidth_for_signal(signal_strength_db, config),
            snr_db=signal_strength_db + snr_offset,
            timestamp=int(self._clock()),
        )
