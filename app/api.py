"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from app.schemas import LedgerState, MotionState, TelemetryState, WindowSnapshot
from feed.realtime import MockRealtimeDatabase, build_default_feed
from services.aggregator import TelemetryAggregator, build_default_aggregator

router = APIRouter()


def get_aggregator() -> TelemetryAggregator:
    return build_default_aggregator()


def get_feed() -> MockRealtimeDatabase:
    return build_default_feed()


def _motion_state(aggregator: TelemetryAggregator) -> MotionState:
    return MotionState(motion=aggregator.motion.value, alert=aggregator.alert.value)


@router.get(
    "/telemetry",
    response_model=TelemetryState,
    summary="Latest temperature, humidity and derived status.",
)
async def get_telemetry(
    aggregator: TelemetryAggregator = Depends(get_aggregator),
) -> TelemetryState:
    return aggregator.telemetry.value


@router.get(
    "/telemetry/window",
    response_model=WindowSnapshot,
    summary="Rolling window of recent readings with statistics.",
)
async def get_window(
    aggregator: TelemetryAggregator = Depends(get_aggregator),
) -> WindowSnapshot:
    return aggregator.readings.value


@router.delete(
    "/telemetry/window",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard every reading held in the rolling window.",
)
async def clear_window(
    aggregator: TelemetryAggregator = Depends(get_aggregator),
) -> Response:
    aggregator.clear_window()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/motion",
    response_model=MotionState,
    summary="Motion flag and intruder alert state.",
)
async def get_motion(
    aggregator: TelemetryAggregator = Depends(get_aggregator),
) -> MotionState:
    return _motion_state(aggregator)


@router.post(
    "/motion/alert/dismiss",
    response_model=MotionState,
    summary="Clear an active intruder alert before it expires.",
)
async def dismiss_alert(
    aggregator: TelemetryAggregator = Depends(get_aggregator),
) -> MotionState:
    aggregator.dismiss_alert()
    return _motion_state(aggregator)


@router.get(
    "/ledger",
    response_model=LedgerState,
    summary="Reconciled transaction, alarm and door histories.",
)
async def get_ledger(
    aggregator: TelemetryAggregator = Depends(get_aggregator),
) -> LedgerState:
    return aggregator.ledger.value


@router.put(
    "/feed/{path:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Write a snapshot into the realtime feed.",
)
async def put_snapshot(
    path: str,
    snapshot: Any = Body(...),
    feed: MockRealtimeDatabase = Depends(get_feed),
) -> Response:
    try:
        feed.set(path, snapshot)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
