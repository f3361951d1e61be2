"""Fixed-route request dispatch for the raw HTTP endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from link_sim.render import format_json

if TYPE_CHECKING:
    from link_sim.sampler import MetricsSampler

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"

_REASONS = {200: "OK", 404: "Not Found"}


@dataclass(frozen=True)
class Response:
    status: int
    content_type: str
    body: str

    @property
    def reason(self) -> str:
        return _REASONS[self.status]

    def encode(self) -> bytes:
        body = self.body.encode("utf-8")
        head = (
            f"HTTP/1.1 {self.status} {self.reason}\r\n"
            f"Content-Type: {self.content_type}\r\n"
            f"Content-Length: {len(body)}\r\n"
            "Access-Control-Allow-Origin: *\r\n"
            "Connection: close\r\n"
            "\r\n"
        )
        return head.encode("ascii") + body


NOT_FOUND = Response(404, TEXT_CONTENT_TYPE, "Not Found")
HEALTHY = Response(200, TEXT_CONTENT_TYPE, "OK")


def parse_request_line(request: str | bytes) -> tuple[str, str] | None:
    """Return (method, path) from the first request line, or None if malformed.

    The query string is dropped from the path.
    """
    if isinstance(request, bytes):
        request = request.decode("latin-1")
    line = request.split("\n", 1)[0].strip()
    parts = line.split()
    if len(parts) < 2:
        return None
    method, target = parts[0], parts[1]
    return (method, target.split("?", 1)[0])


def dispatch(request: str | bytes, sampler: MetricsSampler) -> Response:
    parsed = parse_request_line(request)
    if parsed is None:
        return NOT_FOUND

    method, path = parsed
    if method != "GET":
        return NOT_FOUND
    if path == "/metrics":
        return Response(200, JSON_CONTENT_TYPE, format_json(sampler.generate_metrics()))
    if path == "/health":
        return HEALTHY
    return NOT_FOUND
