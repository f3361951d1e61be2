"""Link simulator configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from pathlib import Path

FloatRange: TypeAlias = tuple[float, float]

LATENCY_VARIATION_MS: FloatRange = (-2.0, 2.0)
JITTER_FLOOR_MS = 0.1
BANDWIDTH_FACTOR_RANGE: FloatRange = (0.1, 1.0)
SNR_OFFSET_DB: FloatRange = (10.0, 20.0)  # added to signal strength

DEFAULT_INTERVAL_SECS = 5.0
DEFAULT_HTTP_PORT = 8080
DEFAULT_GATEWAY_PORT = 8000


@dataclass(frozen=True)
class LinkConfig:
    """Bound parameters for a simulated microwave link.

    Signal strength is in dBm, so both bounds are negative for realistic links.
    Packet loss is a percentage, not a fraction.
    """

    base_latency_ms: float = 15.0
    jitter_range_ms: float = 5.0

    signal_strength_min_db: float = -85.0
    signal_strength_max_db: float = -45.0

    packet_loss_max_percent: float = 2.0

    bandwidth_min_mbps: float = 50.0
    bandwidth_max_mbps: float = 1000.0

    @property
    def signal_strength_range(self) -> FloatRange:
        return (self.signal_strength_min_db, self.signal_strength_max_db)

    @property
    def bandwidth_range(self) -> FloatRange:
        return (self.bandwidth_min_mbps, self.bandwidth_max_mbps)


def validate_config(config: LinkConfig) -> tuple[bool, list[str]]:
    errors: list[str] = []

    if config.jitter_range_ms < JITTER_FLOOR_MS:
        errors.append(f"jitter_range_ms ({config.jitter_range_ms}) < {JITTER_FLOOR_MS}")

    if config.signal_strength_min_db > config.signal_strength_max_db:
        errors.append(
            f"signal_strength_min_db ({config.signal_strength_min_db}) > "
            f"signal_strength_max_db ({config.signal_strength_max_db})"
        )

    if config.packet_loss_max_percent < 0.0:
        errors.append(f"packet_loss_max_percent ({config.packet_loss_max_percent}) < 0")

    if config.bandwidth_min_mbps > config.bandwidth_max_mbps:
        errors.append(
            f"bandwidth_min_mbps ({config.bandwidth_min_mbps}) > "
            f"bandwidth_max_mbps ({config.bandwidth_max_mbps})"
        )

    return (len(errors) == 0, errors)


def config_to_dict(config: LinkConfig) -> dict[str, float]:
    return {f.name: getattr(config, f.name) for f in fields(config)}


@dataclass
class AppConfig:
    link: LinkConfig = field(default_factory=LinkConfig)
    interval_seconds: float = DEFAULT_INTERVAL_SECS
    host: str = "0.0.0.0"
    http_port: int = DEFAULT_HTTP_PORT
    gateway_port: int = DEFAULT_GATEWAY_PORT
    seed: int | None = None  # None seeds from wall-clock time
    simulator_command: list[str] | None = None  # None samples in-process
    simulator_timeout: float = 5.0

    @classmethod
    def from_toml(cls, path: Path) -> AppConfig:
        import tomllib

        with path.open("rb") as f:
            data = tomllib.load(f)

        link_data = data.get("link", {})
        console = data.get("console", {})
        server = data.get("server", {})
        gateway = data.get("gateway", {})

        known = {f.name for f in fields(LinkConfig)}
        unknown = sorted(set(link_data) - known)
        if unknown:
            raise ValueError(f"unknown [link] keys: {', '.join(unknown)}")

        link = replace(LinkConfig(), **{k: float(v) for k, v in link_data.items()})

        command = gateway.get("simulator_command")
        if isinstance(command, str):
            import shlex

            command = shlex.split(command)

        return cls(
            link=link,
            interval_seconds=console.get("interval_seconds", DEFAULT_INTERVAL_SECS),
            host=server.get("host", "0.0.0.0"),
            http_port=server.get("port", DEFAULT_HTTP_PORT),
            gateway_port=gateway.get("port", DEFAULT_GATEWAY_PORT),
            seed=data.get("seed"),
            simulator_command=command,
            simulator_timeout=gateway.get("simulator_timeout", 5.0),
        )
