"""
Chart payload schemas.

GET  /perf/latency?benchmark=...   → LatencyResponse
POST /perf/plot   PerfPlotRequest  → PerfPlotResponse
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from console.schemas.common import ErrorResponse


class LatencyResponse(BaseModel):
    benchmark: str
    label: str = Field(description="Y-axis label.")
    points: list[list[Any]] = Field(description="[date_time, nanoseconds] pairs.")
    status: Literal["ready", "error"] = "ready"
    error: Optional[ErrorResponse] = Field(default=None, description="Set when the metrics could not be read; points is then empty.")


class PerfPlotRequest(BaseModel):
    perf: dict[str, Any] = Field(
        description="Perf query result: {kind, results: [{metrics: [{start_time, iteration, metric}]}]}.",
    )
    active: Optional[list[bool]] = Field(
        default=None,
        description="Per-result visibility toggles; missing entries count as active.",
    )


class PerfLineOut(BaseModel):
    index: int
    color: str
    points: list[list[Any]]


class PerfPlotResponse(BaseModel):
    label: str
    lines: list[PerfLineOut]
