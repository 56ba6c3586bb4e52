"""
Chart adapters: reshape metric JSON into [x, y] point arrays for plotting.

Every traversal step checks the shape it expects and falls back to
skipping the record, so a partial payload yields fewer points, not an
exception.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

NANOS_PER_SEC = 1_000_000_000

# d3.schemeTableau10
TABLEAU10 = (
    "#4e79a7", "#f28e2c", "#e15759", "#76b7b2", "#59a14f",
    "#edc949", "#af7aa1", "#ff9da7", "#9c755f", "#bab0ab",
)


class PerfKind(str, enum.Enum):
    LATENCY = "latency"
    THROUGHPUT = "throughput"
    COMPUTE = "compute"
    MEMORY = "memory"
    STORAGE = "storage"


_Y_LABELS = {
    PerfKind.LATENCY: "↑ Nanoseconds",
    PerfKind.THROUGHPUT: "↑ Events per Nanoseconds",
    PerfKind.COMPUTE: "↑ Average Performance",
    PerfKind.MEMORY: "↑ Average Performance",
    PerfKind.STORAGE: "↑ Average Performance",
}


@dataclass(frozen=True)
class PerfLine:
    index: int
    color: str
    points: list[tuple[str, Any]]


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def _number(value: Any) -> Optional[int | float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def y_axis_label(kind: Any) -> str:
    try:
        return _Y_LABELS.get(PerfKind(kind), "↑ UNITS")
    except ValueError:
        return "↑ UNITS"


def duration_to_nanos(duration: Any) -> Optional[int]:
    """{secs, nanos} → total nanoseconds, or None when either part is missing."""
    secs = _number(_get(duration, "secs"))
    nanos = _number(_get(duration, "nanos"))
    if secs is None or nanos is None:
        return None
    return int(secs) * NANOS_PER_SEC + int(nanos)


def latency_points(metrics: Any, benchmark: str) -> list[list[Any]]:
    """
    Project `[{date_time, metrics: {<benchmark>: {latency: {duration}}}}]`
    into `[[date_time, nanoseconds], ...]` for one benchmark.
    """
    if not isinstance(metrics, list):
        return []
    points = []
    for record in metrics:
        date_time = _get(record, "date_time")
        latency = _get(_get(_get(record, "metrics"), benchmark), "latency")
        nanos = duration_to_nanos(_get(latency, "duration"))
        if date_time is None or nanos is None:
            continue
        points.append([date_time, nanos])
    return points


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def perf_lines(perf: Any, active: Optional[Sequence[bool]] = None) -> list[PerfLine]:
    """
    One line per active result of a perf query.

    x is the metric's start_time shifted by its iteration in seconds, y is
    metric.value. Results default to active when `active` is shorter.
    """
    results = _get(perf, "results")
    if not isinstance(results, list):
        return []

    lines = []
    for index, result in enumerate(results):
        if active is not None and index < len(active) and not active[index]:
            continue
        perf_metrics = _get(result, "metrics")
        if not isinstance(perf_metrics, list):
            continue
        points = []
        for perf_metric in perf_metrics:
            start = _parse_time(_get(perf_metric, "start_time"))
            if start is None:
                continue
            iteration = _number(_get(perf_metric, "iteration")) or 0
            x = start + timedelta(seconds=iteration)
            points.append((x.isoformat(), _get(_get(perf_metric, "metric"), "value")))
        lines.append(PerfLine(index=index, color=TABLEAU10[index % 10], points=points))
    return lines
