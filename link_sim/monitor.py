"""Periodic console printing of link metrics."""

from __future__ import annotations

import signal
import sys
import threading
from typing import TYPE_CHECKING, TextIO

from link_sim.config import DEFAULT_INTERVAL_SECS
from link_sim.render import print_metrics

if TYPE_CHECKING:
    from link_sim.sampler import MetricsSampler


class ConsoleMonitor:
    """Prints a fresh sample every interval until stopped.

    The wait between samples is an Event wait, so stop() takes effect
    immediately instead of after the current sleep.
    """

    def __init__(
        self,
        sampler: MetricsSampler,
        interval: float = DEFAULT_INTERVAL_SECS,
        out: TextIO | None = None,
    ) -> None:
        self.sampler = sampler
        self.interval = interval
        self.out = out
        self._stop = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def _handle_signal(self, signum: int, frame: object) -> None:
        self.stop()

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def run(self, max_samples: int | None = None) -> int:
        out = self.out or sys.stdout
        print("Starting microwave link simulation...", file=out)
        print("Press Ctrl+C to stop\n", file=out, flush=True)

        count = 0
        while not self._stop.is_set():
            if max_samples is not None and count >= max_samples:
                break

            print_metrics(self.sampler.generate_metrics(), file=out)
            count += 1

            if max_samples is not None and count >= max_samples:
                break
            self._stop.wait(self.interval)

        return count
