"""Console and JSON rendering of link metrics."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from link_sim.metrics import LinkMetrics


def format_console(metrics: LinkMetrics) -> str:
    return "\n".join(
        [
            "=== Microwave Link Metrics ===",
            f"Latency: {metrics.latency_ms:.2f} ms",
            f"Jitter: {metrics.jitter_ms:.2f} ms",
            f"Signal Strength: {metrics.signal_strength_db:.2f} dBm",
            f"Packet Loss Rate: {metrics.packet_loss_rate:.3f}%",
            f"Bandwidth: {metrics.bandwidth_mbps:.2f} Mbps",
            f"SNR: {metrics.snr_db:.2f} dB",
            f"Timestamp: {metrics.timestamp}",
            "=============================",
        ]
    )


def format_json(metrics: LinkMetrics) -> str:
    """Render a sample as a JSON object with fixed precision.

    Numbers are written with a fixed number of decimals rather than through
    json.dumps, which would drop trailing zeros (15.0 instead of 15.00).
    """
    return "\n".join(
        [
            "{",
            f'  "latency_ms": {metrics.latency_ms:.2f},',
            f'  "jitter_ms": {metrics.jitter_ms:.2f},',
            f'  "signal_strength_db": {metrics.signal_strength_db:.2f},',
            f'  "packet_loss_rate": {metrics.packet_loss_rate:.3f},',
            f'  "bandwidth_mbps": {metrics.bandwidth_mbps:.2f},',
            f'  "snr_db": {metrics.snr_db:.2f},',
            f'  "timestamp": {metrics.timestamp:d}',
            "}",
        ]
    )


def print_metrics(metrics: LinkMetrics, file: TextIO | None = None) -> None:
    print(format_console(metrics), file=file or sys.stdout, flush=True)


def export_metrics_json(metrics: LinkMetrics, file: TextIO | None = None) -> None:
    print(format_json(metrics), file=file or sys.stdout, flush=True)
