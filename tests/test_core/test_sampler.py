"""Tests for the link metrics sampler."""

import logging
from concurrent.futures import ThreadPoolExecutor
from random import Random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from link_sim.config import LinkConfig
from link_sim.metrics import LinkMetrics
from link_sim.sampler import MetricsSampler, bandwidth_for_signal

DEFAULTS = LinkConfig()


def assert_within_bounds(metrics: LinkMetrics, config: LinkConfig) -> None:
    assert config.signal_strength_min_db <= metrics.signal_strength_db
    assert metrics.signal_strength_db <= config.signal_strength_max_db
    assert 0.0 <= metrics.packet_loss_rate <= config.packet_loss_max_percent
    assert config.bandwidth_min_mbps <= metrics.bandwidth_mbps <= config.bandwidth_max_mbps
    assert metrics.signal_strength_db < metrics.snr_db <= metrics.signal_strength_db + 20.0
    assert 0.1 <= metrics.jitter_ms <= config.jitter_range_ms
    assert abs(metrics.latency_ms - config.base_latency_ms) <= 2.0


class TestEnsureInitialized:
    def test_seeds_from_clock_on_first_call(self) -> None:
        sampler = MetricsSampler(clock=lambda: 1234.9)
        assert not sampler.initialized

        sampler.ensure_initialized()

        assert sampler.initialized
        assert sampler.seed == 1234

    def test_is_idempotent(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="link_sim.sampler")
        ticks = iter([100.0, 200.0, 300.0])
        sampler = MetricsSampler(clock=lambda: next(ticks))

        sampler.ensure_initialized()
        sampler.ensure_initialized()

        assert sampler.seed == 100
        assert caplog.text.count("Link simulator initialized with seed: 100") == 1

    def test_explicit_seed_wins_over_clock(self) -> None:
        sampler = MetricsSampler(seed=99, clock=lambda: 5.0)
        sampler.ensure_initialized()
        assert sampler.seed == 99

    def test_injected_generator_needs_no_initialization(self) -> None:
        sampler = MetricsSampler(rng=Random(1))
        assert sampler.initialized
        assert sampler.seed is None

    def test_generate_initializes_lazily(self) -> None:
        sampler = MetricsSampler(seed=3)
        sampler.generate_metrics()
        assert sampler.initialized


class TestGenerateMetrics:
    def test_follows_draw_order(self, sampler: MetricsSampler) -> None:
        """Each field comes from the expected draw of the shared stream."""
        reference = Random(42)
        r_latency, r_jitter, r_signal, r_loss, r_snr = (reference.random() for _ in range(5))

        metrics = sampler.generate_metrics()

        signal = -85.0 + r_signal * 40.0
        assert metrics.latency_ms == pytest.approx(15.0 - 2.0 + r_latency * 4.0)
        assert metrics.jitter_ms == pytest.approx(0.1 + r_jitter * 4.9)
        assert metrics.signal_strength_db == pytest.approx(signal)
        assert metrics.packet_loss_rate == pytest.approx(r_loss * 2.0)
        assert metrics.bandwidth_mbps == pytest.approx(bandwidth_for_signal(signal, DEFAULTS))
        assert metrics.snr_db == pytest.approx(signal + 10.0 + r_snr * 10.0)

    def test_timestamp_is_whole_seconds(self) -> None:
        sampler = MetricsSampler(rng=Random(0), clock=lambda: 1754258000.75)
        metrics = sampler.generate_metrics()
        assert metrics.timestamp == 1754258000
        assert isinstance(metrics.timestamp, int)

    def test_same_seed_same_samples(self) -> None:
        clock = lambda: 1.0  # noqa: E731
        first = MetricsSampler(seed=5, clock=clock)
        second = MetricsSampler(seed=5, clock=clock)
        assert first.generate_metrics() == second.generate_metrics()

    def test_consecutive_samples_are_independent(self, sampler: MetricsSampler) -> None:
        first = sampler.generate_metrics()
        second = sampler.generate_metrics()

        assert first != second
        assert_within_bounds(first, DEFAULTS)
        assert_within_bounds(second, DEFAULTS)

    def test_samples_are_immutable(self, sampler: MetricsSampler) -> None:
        metrics = sampler.generate_metrics()
        with pytest.raises(AttributeError):
            metrics.latency_ms = 0.0  # type: ignore[misc]

    def test_custom_bounds_are_respected(self) -> None:
        config = LinkConfig(
            base_latency_ms=40.0,
            jitter_range_ms=1.0,
            signal_strength_min_db=-70.0,
            signal_strength_max_db=-60.0,
            packet_loss_max_percent=0.5,
            bandwidth_min_mbps=100.0,
            bandwidth_max_mbps=200.0,
        )
        sampler = MetricsSampler(config, rng=Random(11))
        for _ in range(200):
            assert_within_bounds(sampler.generate_metrics(), config)

    def test_shared_sampler_across_threads(self) -> None:
        sampler = MetricsSampler(clock=lambda: 77.0)

        with ThreadPoolExecutor(max_workers=8) as pool:
            samples = list(pool.map(lambda _: sampler.generate_metrics(), range(400)))

        assert sampler.seed == 77
        assert len(samples) == 400
        for metrics in samples:
            assert_within_bounds(metrics, DEFAULTS)

    def test_random_double_interpolates(self) -> None:
        sampler = MetricsSampler(rng=Random(8))
        reference = Random(8).random()
        assert sampler.random_double(10.0, 20.0) == pytest.approx(10.0 + reference * 10.0)


class TestBandwidthForSignal:
    def test_midpoint(self) -> None:
        assert bandwidth_for_signal(-65.0, DEFAULTS) == pytest.approx(525.0)

    def test_strongest_signal_gives_max_bandwidth(self) -> None:
        assert bandwidth_for_signal(-45.0, DEFAULTS) == pytest.approx(1000.0)

    def test_weakest_signal_is_clamped_to_floor(self) -> None:
        """The factor never drops below 0.1 of the bandwidth span."""
        assert bandwidth_for_signal(-85.0, DEFAULTS) == pytest.approx(145.0)
        assert bandwidth_for_signal(-82.0, DEFAULTS) == pytest.approx(145.0)

    def test_out_of_range_signal_is_clamped(self) -> None:
        assert bandwidth_for_signal(-120.0, DEFAULTS) == pytest.approx(145.0)
        assert bandwidth_for_signal(-10.0, DEFAULTS) == pytest.approx(1000.0)

    def test_degenerate_signal_range(self) -> None:
        config = LinkConfig(signal_strength_min_db=-60.0, signal_strength_max_db=-60.0)
        assert bandwidth_for_signal(-60.0, config) == pytest.approx(1000.0)


class TestSamplerProperties:
    """Property-based tests over seeds and signal levels."""

    @given(seed=st.integers(min_value=0, max_value=2**32 - 1))
    @settings(max_examples=200)
    def test_every_sample_within_bounds(self, seed: int) -> None:
        sampler = MetricsSampler(seed=seed, clock=lambda: 0.0)
        for _ in range(5):
            assert_within_bounds(sampler.generate_metrics(), DEFAULTS)

    @given(
        low=st.floats(min_value=-150.0, max_value=0.0),
        delta=st.floats(min_value=0.0, max_value=100.0),
    )
    @settings(max_examples=200)
    def test_bandwidth_is_monotonic_in_signal(self, low: float, delta: float) -> None:
        assert bandwidth_for_signal(low, DEFAULTS) <= bandwidth_for_signal(low + delta, DEFAULTS)

    @given(signal=st.floats(min_value=-200.0, max_value=50.0))
    @settings(max_examples=200)
    def test_bandwidth_always_within_bounds(self, signal: float) -> None:
        bandwidth = bandwidth_for_signal(signal, DEFAULTS)
        assert DEFAULTS.bandwidth_min_mbps <= bandwidth <= DEFAULTS.bandwidth_max_mbps
