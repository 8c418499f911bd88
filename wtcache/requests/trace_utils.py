from __future__ import annotations

from pathlib import Path
import csv
import json

from wtcache.errors import TraceFormatError


def count_unique_tags(trace_path: Path) -> int:
    unique_tags: set[str] = set()
    suffix = trace_path.suffix.lower()

    if suffix == ".csv":
        with open(trace_path, "r", encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                tag = row.get("tag")
                if tag:
                    unique_tags.add(tag)
        return len(unique_tags)

    if suffix == ".jsonl":
        with open(trace_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if not isinstance(record, dict):
                    continue
                tag = record.get("tag")
                if tag is not None:
                    unique_tags.add(str(tag))
        return len(unique_tags)

    raise TraceFormatError(f"Unsupported trace format: {trace_path.suffix}")
