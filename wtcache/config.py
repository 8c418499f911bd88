from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from wtcache.errors import CacheConfigError

CLOCK_KINDS = {"fake", "real"}
REUSE_MODELS = {"zipf", "uniform"}
WORKLOAD_TYPES = {"synthetic", "trace"}


@dataclass(frozen=True)
class WorkloadConfig:
    type: str = "synthetic"
    trace_path: Optional[Path] = None
    num_requests: int = 1000
    num_tags: int = 100
    write_fraction: float = 0.3
    reuse_model: str = "zipf"
    reuse_zipf_a: float = 1.2


@dataclass
class SimulatorConfig:
    seed: int
    capacity: int
    capacity_fraction: Optional[float]
    policy: str
    clock: str
    clock_step_ms: int
    log_level: str
    workload: WorkloadConfig


def load_config(path: str | Path) -> SimulatorConfig:
    data = _read_yaml(path)
    base_dir = Path(path).resolve().parent

    workload_data = data.get("workload", {}) if isinstance(data.get("workload", {}), dict) else {}
    workload_type = str(workload_data.get("type", "synthetic")).lower()
    trace_path = workload_data.get("trace_path")
    if trace_path:
        trace_path = Path(trace_path)
        if not trace_path.is_absolute():
            trace_path = base_dir / trace_path

    workload = WorkloadConfig(
        type=workload_type,
        trace_path=trace_path or None,
        num_requests=_as_int(workload_data, "num_requests", 1000, prefix="workload."),
        num_tags=_as_int(workload_data, "num_tags", 100, prefix="workload."),
        write_fraction=_as_float(workload_data, "write_fraction", 0.3, prefix="workload."),
        reuse_model=str(workload_data.get("reuse_model", "zipf")).lower(),
        reuse_zipf_a=_as_float(workload_data, "reuse_zipf_a", 1.2, prefix="workload."),
    )

    if "capacity" not in data:
        raise CacheConfigError(f"Missing required key 'capacity' in {path}")

    cfg = SimulatorConfig(
        seed=_as_int(data, "seed", 1),
        capacity=_as_int(data, "capacity", None),
        capacity_fraction=_as_float(data, "capacity_fraction", None),
        policy=str(data.get("policy", "lru")).lower(),
        clock=str(data.get("clock", "fake")).lower(),
        clock_step_ms=_as_int(data, "clock_step_ms", 1),
        log_level=str(data.get("log_level", "INFO")).upper(),
        workload=workload,
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: SimulatorConfig) -> None:
    if isinstance(cfg.capacity, bool) or cfg.capacity <= 0:
        raise CacheConfigError(f"capacity must be positive, got {cfg.capacity}")
    if cfg.clock not in CLOCK_KINDS:
        raise CacheConfigError(f"Unknown clock: {cfg.clock} (expected one of {sorted(CLOCK_KINDS)})")
    if not isinstance(logging.getLevelName(cfg.log_level), int):
        raise CacheConfigError(f"Unknown log_level: {cfg.log_level}")
    if cfg.clock_step_ms < 0:
        raise CacheConfigError("clock_step_ms must not be negative")
    if cfg.capacity_fraction is not None and not 0 < cfg.capacity_fraction <= 1:
        raise CacheConfigError("capacity_fraction must be in the (0, 1] range")

    workload = cfg.workload
    if workload.type not in WORKLOAD_TYPES:
        raise CacheConfigError(f"Unknown workload type: {workload.type}")
    if workload.type == "trace" and workload.trace_path is None:
        raise CacheConfigError("Trace workload requires workload.trace_path")
    if workload.type == "synthetic":
        if workload.num_requests < 0:
            raise CacheConfigError("workload.num_requests must not be negative")
        if workload.num_tags <= 0:
            raise CacheConfigError("workload.num_tags must be positive")
        if not 0.0 <= workload.write_fraction <= 1.0:
            raise CacheConfigError("workload.write_fraction must be in the [0, 1] range")
        if workload.reuse_model not in REUSE_MODELS:
            raise CacheConfigError(f"Unknown reuse model: {workload.reuse_model}")
        if workload.reuse_model == "zipf" and workload.reuse_zipf_a <= 1.0:
            raise CacheConfigError("workload.reuse_zipf_a must be greater than 1")


def _read_yaml(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CacheConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CacheConfigError(f"Config root must be a mapping: {path}")
    return data


def _as_int(data: Dict[str, Any], key: str, default: Optional[int], prefix: str = "") -> int:
    value = data.get(key, default)
    if value is None:
        value = default
    # bool is an int subclass; LRUCache rejects it too.
    if isinstance(value, bool):
        raise CacheConfigError(f"{prefix}{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise CacheConfigError(f"{prefix}{key} must be an integer, got {value!r}") from exc


def _as_float(data: Dict[str, Any], key: str, default: Optional[float], prefix: str = "") -> Optional[float]:
    value = data.get(key, default)
    if value is None:
        value = default
    if value is None:
        return None
    if isinstance(value, bool):
        raise CacheConfigError(f"{prefix}{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise CacheConfigError(f"{prefix}{key} must be a number, got {value!r}") from exc
