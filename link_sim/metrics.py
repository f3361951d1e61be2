"""Link metrics sample data structure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

# Key order of the exported JSON object
FIELD_ORDER = (
    "latency_ms",
    "jitter_ms",
    "signal_strength_db",
    "packet_loss_rate",
    "bandwidth_mbps",
    "snr_db",
    "timestamp",
)


@dataclass(frozen=True)
class LinkMetrics:
    """One point-in-time sample of a microwave radio link."""

    latency_ms: float  # Round-trip latency
    jitter_ms: float  # Variation in latency
    signal_strength_db: float  # dBm
    packet_loss_rate: float  # Percentage, 0-100
    bandwidth_mbps: float  # Available bandwidth
    snr_db: float  # Signal-to-noise ratio
    timestamp: int  # Unix seconds

    def to_dict(self) -> dict[str, float | int]:
        return {
            "latency_ms": self.latency_ms,
            "jitter_ms": self.jitter_ms,
            "signal_strength_db": self.signal_strength_db,
            "packet_loss_rate": self.packet_loss_rate,
            "bandwidth_mbps": self.bandwidth_mbps,
            "snr_db": self.snr_db,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> LinkMetrics:
        """Build a sample from a parsed JSON object.

        Raises KeyError for a missing field and TypeError or ValueError for a
        field that is not numeric.
        """
        values: dict[str, float] = {}
        for name in FIELD_ORDER[:-1]:
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(f"{name} must be a number, got {type(value).__name__}")
            values[name] = float(value)

        timestamp = data["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, int | float):
            raise TypeError(f"timestamp must be a number, got {type(timestamp).__name__}")
        if timestamp != int(timestamp):
            raise ValueError(f"timestamp must be whole seconds, got {timestamp}")

        return cls(**values, timestamp=int(timestamp))
