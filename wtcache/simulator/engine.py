from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Iterable
import logging

from wtcache.config import SimulatorConfig
from wtcache.requests.models import Request
from wtcache.cache.clock import EPOCH, Clock, FakeClock
from wtcache.cache.lru import LRUCache
from wtcache.analysis.metrics import MetricsCollector, MetricsReport
from wtcache.errors import DataNotFoundError

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 10_000


@dataclass
class Simulator:
    cfg: SimulatorConfig
    cache: LRUCache[Any]
    metrics: MetricsCollector
    clock: Clock
    _last_written: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def handle_request(self, req: Request) -> None:
        self._advance_clock(req)
        hits_before = self.cache.hits
        evictions_before = self.cache.evictions

        if req.is_write:
            self.cache.write(req.tag, req.data)
            self._last_written[req.tag] = req.data
            self.metrics.record_request(
                req,
                hit=self.cache.hits > hits_before,
                evictions=self.cache.evictions - evictions_before,
            )
            return

        try:
            item = self.cache.read(req.tag)
        except DataNotFoundError:
            self.metrics.record_request(req, hit=False, not_found=True)
            return

        stale = req.tag in self._last_written and item.data != self._last_written[req.tag]
        if stale:
            logger.warning(
                "Stale read for %r: got %r, last written %r",
                req.tag,
                item.data,
                self._last_written[req.tag],
            )
        self.metrics.record_request(
            req,
            hit=self.cache.hits > hits_before,
            evictions=self.cache.evictions - evictions_before,
            stale=stale,
        )

    def run(self, requests: Iterable[Request]) -> MetricsReport:
        for count, req in enumerate(requests, start=1):
            self.handle_request(req)
            if count % PROGRESS_EVERY == 0:
                logger.info("Replayed %d requests (%s)", count, self.cache.stats())
        return self.metrics.finalize()

    def _advance_clock(self, req: Request) -> None:
        if not isinstance(self.clock, FakeClock):
            return
        if req.timestamp_ms is not None:
            target = EPOCH + timedelta(milliseconds=req.timestamp_ms)
            # Out-of-order trace timestamps leave the clock where it is.
            if target > self.clock.now():
                self.clock.set(target)
            return
        self.clock.advance(delta=timedelta(milliseconds=self.cfg.clock_step_ms))
