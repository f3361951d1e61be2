"""FastAPI gateway exposing link metrics as a REST API."""

from __future__ import annotations

import logging
import time
from random import Random
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from link_sim.config import DEFAULT_GATEWAY_PORT
from link_sim.gateway.source import SimulatorUnavailableError, generate_mock_metrics

if TYPE_CHECKING:
    from link_sim.gateway.source import MetricsSource
    from link_sim.metrics import LinkMetrics

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class LinkMetricsModel(BaseModel):
    latency_ms: float
    jitter_ms: float
    signal_strength_db: float
    packet_loss_rate: float
    bandwidth_mbps: float
    snr_db: float
    timestamp: int

    @classmethod
    def from_metrics(cls, metrics: LinkMetrics) -> LinkMetricsModel:
        return cls(**metrics.to_dict())


class HealthStatus(BaseModel):
    status: str
    simulator_available: bool
    timestamp: int  # milliseconds


class Receipt(BaseModel):
    status: str
    message: str


def create_app(source: MetricsSource, rng: Random | None = None) -> FastAPI:
    app = FastAPI(title="Link Metrics API")
    mock_rng = rng if rng is not None else Random()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unexpected error: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )

    @app.get(f"{API_PREFIX}/metrics")
    def get_metrics() -> LinkMetricsModel:
        logger.info("Received request for link metrics")
        try:
            metrics = source.fetch()
        except SimulatorUnavailableError as e:
            logger.warning("Failed to get metrics from simulator, using mock data: %s", e)
            metrics = generate_mock_metrics(mock_rng)
        return LinkMetricsModel.from_metrics(metrics)

    @app.get(f"{API_PREFIX}/metrics/health")
    def get_health() -> HealthStatus:
        available = source.is_available()
        return HealthStatus(
            status="healthy" if available else "degraded",
            simulator_available=available,
            timestamp=int(time.time() * 1000),
        )

    @app.post(f"{API_PREFIX}/metrics")
    def post_metrics(metrics: LinkMetricsModel) -> Receipt:
        logger.info("Received external metrics: %s", metrics)
        return Receipt(status="received", message="Metrics received successfully")

    return app


def run_gateway(
    source: MetricsSource, host: str = "0.0.0.0", port: int = DEFAULT_GATEWAY_PORT
) -> None:
    import uvicorn

    app = create_app(source)
    print(f"Starting link metrics gateway at http://{host}:{port}{API_PREFIX}/metrics")
    uvicorn.run(app, host=host, port=port)
