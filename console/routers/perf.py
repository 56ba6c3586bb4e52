"""
Perf router.

GET  /perf/latency   latency of one benchmark over time, in nanoseconds
POST /perf/plot      project a perf query result into plot lines
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from console.core.config import settings
from console.core.deps import get_api_client
from console.core.errors import FetchFailedError
from console.schemas.common import ErrorResponse
from console.schemas.perf import LatencyResponse, PerfLineOut, PerfPlotRequest, PerfPlotResponse
from console.services.api_client import BencherApiClient
from console.services.perf import PerfKind, latency_points, perf_lines, y_axis_label

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/perf", tags=["perf"])


@router.get(
    "/latency",
    response_model=LatencyResponse,
    summary="Latency points for one benchmark",
)
async def latency(
    benchmark: str = Query(
        min_length=1,
        description="Benchmark name as reported by the adapter.",
        examples=["tests::benchmark_a"],
    ),
    api: BencherApiClient = Depends(get_api_client),
):
    """
    Fetches `{base}/v0/metrics` and returns `[date_time, nanoseconds]` pairs.

    An unreadable upstream still returns **200** with `status: "error"` and no
    points.
    """
    try:
        metrics = await api.get_json(f"{settings.api_url}/v0/metrics")
    except FetchFailedError as exc:
        logger.warning(f"Latency for {benchmark} failed to load: {exc.message}")
        return LatencyResponse(
            benchmark=benchmark,
            label=y_axis_label(PerfKind.LATENCY),
            points=[],
            status="error",
            error=ErrorResponse(**exc.to_dict()),
        )
    points = latency_points(metrics, benchmark)
    logger.debug(f"Projected {len(points)} latency points for {benchmark}")
    return LatencyResponse(
        benchmark=benchmark,
        label=y_axis_label(PerfKind.LATENCY),
        points=points,
    )


@router.post("/plot", response_model=PerfPlotResponse, summary="Project perf data into plot lines")
def plot(payload: PerfPlotRequest):
    lines = perf_lines(payload.perf, payload.active)
    return PerfPlotResponse(
        label=y_axis_label(payload.perf.get("kind")),
        lines=[
            PerfLineOut(index=line.index, color=line.color, points=[list(p) for p in line.points])
            for line in lines
        ],
    )
