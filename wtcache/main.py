from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from wtcache.config import SimulatorConfig, load_config
from wtcache.requests.generator import RequestGenerator
from wtcache.requests.trace_utils import count_unique_tags
from wtcache.simulator.engine import Simulator
from wtcache.analysis.metrics import MetricsCollector, MetricsReport
from wtcache.cache.factory import build_cache, build_clock
from wtcache.cache.lru import LRUCache
from wtcache.errors import CacheConfigError, WTCacheError

logger = logging.getLogger("wtcache")

DEMO_CAPACITY = 5
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write-through LRU cache simulator")
    parser.add_argument("--config", help="Path to YAML config; without it a short demo runs")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (overrides config log_level)",
    )
    return parser.parse_args(argv)


def resolve_capacity(cfg: SimulatorConfig) -> SimulatorConfig:
    if cfg.capacity_fraction is None:
        return cfg
    if cfg.workload.type != "trace" or cfg.workload.trace_path is None:
        raise CacheConfigError("capacity_fraction requires a trace workload with trace_path")
    unique_tags = count_unique_tags(cfg.workload.trace_path)
    if unique_tags <= 0:
        raise CacheConfigError(f"No tags found in trace: {cfg.workload.trace_path}")
    capacity = int(unique_tags * cfg.capacity_fraction)
    if capacity <= 0:
        raise CacheConfigError("Computed cache capacity is zero; check capacity_fraction")
    logger.info("Sized capacity to %d (%d unique tags x %.2f)", capacity, unique_tags, cfg.capacity_fraction)
    return replace(cfg, capacity=capacity)


def run_simulation(cfg: SimulatorConfig) -> MetricsReport:
    cfg = resolve_capacity(cfg)
    clock = build_clock(cfg)
    cache = build_cache(cfg, clock=clock)
    metrics = MetricsCollector()
    generator = RequestGenerator(cfg.workload, seed=cfg.seed)
    sim = Simulator(cfg, cache, metrics, clock)
    report = sim.run(generator.generate())
    logger.info("Final cache stats: %s", cache.stats())
    return report


def run_demo() -> None:
    cache: LRUCache[int] = LRUCache(DEMO_CAPACITY)
    cache.write("a", 0)
    item = cache.read("a")
    logger.info("Expected item: tag='a' data=0")
    logger.info("Got item: tag=%r data=%r", item.tag, item.data)


def _configure_logging(level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.log_level or "INFO")

    try:
        if not args.config:
            run_demo()
            return 0
        cfg = load_config(args.config)
        if args.log_level is None:
            logging.getLogger().setLevel(cfg.log_level)
        report = run_simulation(cfg)
    except WTCacheError as exc:
        logger.error("%s", exc)
        return 1

    print(report.to_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
