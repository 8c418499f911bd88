from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from wtcache.requests.models import Request

DEFAULT_WINDOW_SIZE = 100


@dataclass
class MetricsReport:
    total_requests: int
    reads: int
    writes: int
    hits: int
    misses: int
    hit_rate: float
    read_hits: int
    read_hit_rate: float
    write_hits: int
    write_hit_rate: float
    not_found: int
    evictions: int
    stale_reads: int
    window_size: int
    window_hit_rate_mean: float
    window_hit_rate_p5: float

    def to_text(self) -> str:
        return (
            "Write-through LRU Cache Report\n"
            f"Total requests: {self.total_requests}\n"
            f"Reads: {self.reads}\n"
            f"Writes: {self.writes}\n"
            f"Hits: {self.hits}\n"
            f"Misses: {self.misses}\n"
            f"Hit rate: {self.hit_rate:.4f}\n"
            f"Read hit rate: {self.read_hit_rate:.4f}\n"
            f"Write hit rate: {self.write_hit_rate:.4f}\n"
            f"Reads not found: {self.not_found}\n"
            f"Evictions: {self.evictions}\n"
            f"Stale reads: {self.stale_reads}\n"
            f"Windowed hit rate mean (window={self.window_size}): {self.window_hit_rate_mean:.4f}\n"
            f"Windowed hit rate p5 (window={self.window_size}): {self.window_hit_rate_p5:.4f}\n"
        )


class MetricsCollector:
    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        if window_size <= 0:
            raise ValueError("window_size must be positive")
        self.window_size = window_size
        self.total_requests = 0
        self.reads = 0
        self.writes = 0
        self.read_hits = 0
        self.write_hits = 0
        self.not_found = 0
        self.evictions = 0
        self.stale_reads = 0
        self._hit_flags: List[bool] = []

    def record_request(
        self,
        req: Request,
        hit: bool,
        not_found: bool = False,
        evictions: int = 0,
        stale: bool = False,
    ) -> None:
        self.total_requests += 1
        self.evictions += evictions
        self._hit_flags.append(hit)
        if req.is_write:
            self.writes += 1
            if hit:
                self.write_hits += 1
            return

        self.reads += 1
        if hit:
            self.read_hits += 1
        if not_found:
            self.not_found += 1
        if stale:
            self.stale_reads += 1

    def finalize(self) -> MetricsReport:
        hits = self.read_hits + self.write_hits
        misses = self.total_requests - hits
        window_mean, window_p5 = self._window_hit_rates()
        return MetricsReport(
            total_requests=self.total_requests,
            reads=self.reads,
            writes=self.writes,
            hits=hits,
            misses=misses,
            hit_rate=_ratio(hits, self.total_requests),
            read_hits=self.read_hits,
            read_hit_rate=_ratio(self.read_hits, self.reads),
            write_hits=self.write_hits,
            write_hit_rate=_ratio(self.write_hits, self.writes),
            not_found=self.not_found,
            evictions=self.evictions,
            stale_reads=self.stale_reads,
            window_size=self.window_size,
            window_hit_rate_mean=window_mean,
            window_hit_rate_p5=window_p5,
        )

    def _window_hit_rates(self) -> tuple[float, float]:
        if not self._hit_flags:
            return 0.0, 0.0
        flags = np.asarray(self._hit_flags, dtype=np.float64)
        num_windows = len(flags) // self.window_size
        if num_windows == 0:
            rate = float(flags.mean())
            return rate, rate
        windows = flags[: num_windows * self.window_size].reshape(num_windows, self.window_size)
        rates = windows.mean(axis=1)
        return float(np.mean(rates)), float(np.percentile(rates, 5))


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0
