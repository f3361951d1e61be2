from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path

from link_sim.config import (
    DEFAULT_GATEWAY_PORT,
    DEFAULT_HTTP_PORT,
    AppConfig,
    validate_config,
)
from link_sim.render import export_metrics_json
from link_sim.sampler import MetricsSampler

logger = logging.getLogger("link_sim")

USE_CONFIGURED_PORT = -1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="link-sim", description="Microwave radio link metrics simulator"
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON sample and exit",
    )
    mode_group.add_argument(
        "--http",
        type=int,
        nargs="?",
        const=USE_CONFIGURED_PORT,
        metavar="PORT",
        help=f"Serve GET /metrics and GET /health (default port: {DEFAULT_HTTP_PORT})",
    )
    mode_group.add_argument(
        "--gateway",
        type=int,
        nargs="?",
        const=USE_CONFIGURED_PORT,
        metavar="PORT",
        help=f"Serve the /api/v1 REST gateway (default port: {DEFAULT_GATEWAY_PORT})",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to TOML configuration file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Generator seed for reproducible samples (default: wall-clock time)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between console samples (default: 5)",
    )
    parser.add_argument(
        "--count",
        type=int,
        help="Stop console mode after this many samples (default: unlimited)",
    )
    parser.add_argument(
        "--host",
        help="Bind address for --http and --gateway (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--simulator-command",
        help="Gateway runs this command with --json instead of sampling in-process",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    app_config = AppConfig.from_toml(args.config) if args.config is not None else AppConfig()

    if args.seed is not None:
        app_config.seed = args.seed
    if args.interval is not None:
        app_config.interval_seconds = args.interval
    if args.host is not None:
        app_config.host = args.host
    if args.simulator_command is not None:
        app_config.simulator_command = shlex.split(args.simulator_command)
    return app_config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        app_config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    is_valid, errors = validate_config(app_config.link)
    if not is_valid:
        for error in errors:
            print(f"Invalid configuration: {error}", file=sys.stderr)
        return 2

    sampler = MetricsSampler(app_config.link, seed=app_config.seed)
    sampler.ensure_initialized()

    if args.json:
        export_metrics_json(sampler.generate_metrics())
        return 0

    if args.http is not None:
        from link_sim.server import run_server

        port = args.http if args.http != USE_CONFIGURED_PORT else app_config.http_port
        try:
            run_server(sampler, host=app_config.host, port=port)
        except OSError as e:
            logger.error("Failed to start HTTP server on port %d: %s", port, e)
            return 1
        return 0

    if args.gateway is not None:
        from link_sim.gateway.app import run_gateway
        from link_sim.gateway.source import MetricsSource, ProcessSource, SamplerSource

        source: MetricsSource
        if app_config.simulator_command:
            source = ProcessSource(app_config.simulator_command, app_config.simulator_timeout)
        else:
            source = SamplerSource(sampler)
        port = args.gateway if args.gateway != USE_CONFIGURED_PORT else app_config.gateway_port
        run_gateway(source, host=app_config.host, port=port)
        return 0

    from link_sim.monitor import ConsoleMonitor

    monitor = ConsoleMonitor(sampler, interval=app_config.interval_seconds)
    monitor.install_signal_handlers()
    monitor.run(max_samples=args.count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
