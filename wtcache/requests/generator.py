from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional
import csv
import json
import logging

import numpy as np

from wtcache.config import WorkloadConfig
from wtcache.requests.models import READ, WRITE, Request
from wtcache.errors import CacheConfigError, TraceFormatError

logger = logging.getLogger(__name__)


@dataclass
class RequestGenerator:
    workload: WorkloadConfig
    seed: int = 1

    def generate(self) -> Iterable[Request]:
        if self.workload.type == "trace":
            if not self.workload.trace_path:
                raise CacheConfigError("Trace workload requires trace_path in config")
            yield from iter_trace(self.workload.trace_path)
            return

        rng = np.random.default_rng(self.seed)
        reuse_pool = _build_reuse_pool(self.workload, rng)

        for i in range(self.workload.num_requests):
            tag_id = int(rng.choice(reuse_pool))
            is_write = bool(rng.random() < self.workload.write_fraction)
            yield Request(
                request_id=i,
                op=WRITE if is_write else READ,
                tag=tag_name(tag_id),
                data=i if is_write else None,
            )


def tag_name(tag_id: int) -> str:
    return f"tag-{tag_id}"


def _build_reuse_pool(workload: WorkloadConfig, rng: np.random.Generator) -> np.ndarray:
    if workload.reuse_model == "uniform":
        return np.arange(workload.num_tags, dtype=np.int64)

    # Zipf-like reuse: smaller ids are reused more frequently.
    base = rng.zipf(a=workload.reuse_zipf_a, size=workload.num_tags)
    base = np.clip(base, 1, workload.num_tags)
    return base - 1


def iter_trace(trace_path: Path) -> Iterator[Request]:
    if trace_path.suffix.lower() == ".csv":
        with open(trace_path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for idx, row in enumerate(reader):
                yield _request_from_record(idx, row)
        return

    if trace_path.suffix.lower() == ".jsonl":
        malformed = 0
        with open(trace_path, "r", encoding="utf-8") as f:
            for idx, line in enumerate(f):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    malformed += 1
                    continue
                if not isinstance(record, dict):
                    malformed += 1
                    continue
                yield _request_from_record(idx, record)
        if malformed:
            logger.warning("Skipped %d malformed JSONL lines in %s", malformed, trace_path)
        return

    raise TraceFormatError(f"Unsupported trace format: {trace_path.suffix}")


def _request_from_record(idx: int, record: Mapping[str, Any]) -> Request:
    op = str(record.get("op") or READ).strip().lower()
    if op not in {READ, WRITE}:
        raise TraceFormatError(f"Unknown op {op!r} in trace record {idx}")
    tag = record.get("tag")
    if tag is None or str(tag) == "":
        raise TraceFormatError(f"Missing tag in trace record {idx}")
    data = record.get("data")
    if data == "":
        data = None
    return Request(
        request_id=idx,
        op=op,
        tag=str(tag),
        data=data,
        timestamp_ms=_maybe_int(record.get("timestamp_ms"), idx),
    )


def _maybe_int(value: object, idx: int) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise TraceFormatError(f"Invalid timestamp_ms {value!r} in trace record {idx}")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise TraceFormatError(f"Invalid timestamp_ms {value!r} in trace record {idx}") from exc
