from __future__ import annotations

import json
from pathlib import Path

import pytest

from wtcache.config import WorkloadConfig
from wtcache.errors import CacheConfigError, TraceFormatError
from wtcache.requests.generator import RequestGenerator, iter_trace
from wtcache.requests.models import READ, WRITE
from wtcache.requests.trace_utils import count_unique_tags


def test_synthetic_stream_is_reproducible() -> None:
    workload = WorkloadConfig(num_requests=300, num_tags=25, write_fraction=0.4)

    first = list(RequestGenerator(workload, seed=3).generate())
    second = list(RequestGenerator(workload, seed=3).generate())

    assert first == second
    assert len(first) == 300
    assert [r.request_id for r in first] == list(range(300))
    assert {r.op for r in first} == {READ, WRITE}
    for req in first:
        assert 0 <= int(req.tag.split("-")[1]) < 25
        if req.is_write:
            assert req.data == req.request_id
        else:
            assert req.data is None


@pytest.mark.parametrize("write_fraction, expected_ops", [(0.0, {READ}), (1.0, {WRITE})])
def test_write_fraction_extremes(write_fraction: float, expected_ops: set) -> None:
    workload = WorkloadConfig(
        num_requests=50, num_tags=10, write_fraction=write_fraction, reuse_model="uniform"
    )
    ops = {req.op for req in RequestGenerator(workload).generate()}
    assert ops == expected_ops


def test_jsonl_trace_skips_malformed_lines(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    trace = tmp_path / "trace.jsonl"
    lines = [
        json.dumps({"op": "write", "tag": "a", "data": 1, "timestamp_ms": 10}),
        "{not json",
        "",
        json.dumps({"op": "READ", "tag": "a"}),
    ]
    trace.write_text("\n".join(lines) + "\n", encoding="utf-8")

    requests = list(iter_trace(trace))

    assert [(r.op, r.tag, r.data, r.timestamp_ms) for r in requests] == [
        (WRITE, "a", 1, 10),
        (READ, "a", None, None),
    ]
    assert "Skipped 1 malformed JSONL lines" in caplog.text


def test_csv_trace(tmp_path: Path) -> None:
    trace = tmp_path / "trace.csv"
    trace.write_text("op,tag,data,timestamp_ms\nwrite,x,hello,5\nread,x,,\n", encoding="utf-8")

    requests = list(iter_trace(trace))

    assert requests[0].op == WRITE and requests[0].data == "hello" and requests[0].timestamp_ms == 5
    assert requests[1].op == READ and requests[1].data is None and requests[1].timestamp_ms is None
    assert count_unique_tags(trace) == 1


def test_trace_rejects_unknown_op_and_format(tmp_path: Path) -> None:
    trace = tmp_path / "trace.jsonl"
    trace.write_text(json.dumps({"op": "delete", "tag": "a"}) + "\n", encoding="utf-8")
    with pytest.raises(ValueError):
        list(iter_trace(trace))

    with pytest.raises(ValueError):
        list(iter_trace(tmp_path / "trace.parquet"))


def test_count_unique_tags_jsonl(tmp_path: Path) -> None:
    trace = tmp_path / "trace.jsonl"
    records = [{"op": "write", "tag": t, "data": i} for i, t in enumerate("abcab")]
    trace.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")

    assert count_unique_tags(trace) == 3


def test_jsonl_trace_skips_non_object_lines(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    trace = tmp_path / "trace.jsonl"
    lines = ["[1, 2]", "5", '"text"', json.dumps({"op": "write", "tag": "a", "data": 1})]
    trace.write_text("\n".join(lines) + "\n", encoding="utf-8")

    requests = list(iter_trace(trace))

    assert [(r.op, r.tag) for r in requests] == [(WRITE, "a")]
    assert "Skipped 3 malformed JSONL lines" in caplog.text
    assert count_unique_tags(trace) == 1


@pytest.mark.parametrize(
    "record",
    [
        {"op": "delete", "tag": "a"},
        {"op": "read"},
        {"op": "read", "tag": ""},
        {"op": "write", "tag": "a", "timestamp_ms": "noon"},
        {"op": "write", "tag": "a", "timestamp_ms": [1]},
        {"op": "write", "tag": "a", "timestamp_ms": True},
    ],
)
def test_bad_trace_records_raise_trace_format_error(tmp_path: Path, record: dict) -> None:
    trace = tmp_path / "trace.jsonl"
    trace.write_text(json.dumps(record) + "\n", encoding="utf-8")

    with pytest.raises(TraceFormatError):
        list(iter_trace(trace))


def test_unsupported_suffix_raises_trace_format_error(tmp_path: Path) -> None:
    with pytest.raises(TraceFormatError):
        list(iter_trace(tmp_path / "trace.parquet"))
    with pytest.raises(TraceFormatError):
        count_unique_tags(tmp_path / "trace.parquet")


def test_trace_workload_without_path_is_a_config_error() -> None:
    workload = WorkloadConfig(type="trace")
    with pytest.raises(CacheConfigError):
        list(RequestGenerator(workload).generate())
