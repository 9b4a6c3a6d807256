"""HTTP route definitions for the service."""

from __future__ import annotations

from concurrent.futures import CancelledError, Future
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from app.schemas import SensorViewModelResponse
from models.records import SensorType, SensorViewModel, SeriesState, TimeRange
from services.controller import (
    ControllerRegistry,
    SensorSeriesController,
    build_default_registry,
)
from services.export import to_csv

router = APIRouter()


def get_registry() -> ControllerRegistry:
    return build_default_registry()


def _await(controller: SensorSeriesController, future: Future[bool]) -> SensorViewModel:
    """Wait until the latest request for the view has settled."""
    current: Optional[Future[bool]] = future
    while current is not None:
        try:
            if current.result():
                break
        except CancelledError:
            pass
        # Superseded by a newer request for the same view; follow it.
        current = controller.pending
    return controller.view_model


def _respond(controller: SensorSeriesController, model: SensorViewModel) -> SensorViewModelResponse:
    if model.state is SeriesState.error and model.updated_at is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=model.last_error or "Reading source unavailable.",
        )
    optimal = controller.classifier.optimal_range(controller.sensor_type)
    return SensorViewModelResponse.from_domain(model, optimal)


@router.get(
    "/sensors/{sensor_id}/series",
    response_model=SensorViewModelResponse,
    summary="Load a sensor's readings for a time range and return the view model.",
)
def get_series(
    sensor_id: str,
    sensor_type: SensorType = Query(..., description="Sensor category."),
    time_range: TimeRange = Query(TimeRange.day, alias="range"),
    registry: ControllerRegistry = Depends(get_registry),
) -> SensorViewModelResponse:
    controller = registry.get(sensor_id, sensor_type)
    model = _await(controller, controller.select_range(time_range))
    return _respond(controller, model)


@router.post(
    "/sensors/{sensor_id}/refresh",
    response_model=SensorViewModelResponse,
    summary="Reload the currently selected range for a sensor.",
)
def refresh_series(
    sensor_id: str,
    sensor_type: SensorType = Query(..., description="Sensor category."),
    registry: ControllerRegistry = Depends(get_registry),
) -> SensorViewModelResponse:
    controller = registry.get(sensor_id, sensor_type)
    model = _await(controller, controller.refresh())
    return _respond(controller, model)


@router.get(
    "/sensors/{sensor_id}/export",
    response_class=PlainTextResponse,
    summary="Export the full reading series for a range as CSV.",
)
def export_series(
    sensor_id: str,
    sensor_type: SensorType = Query(..., description="Sensor category."),
    time_range: TimeRange = Query(TimeRange.day, alias="range"),
    registry: ControllerRegistry = Depends(get_registry),
) -> PlainTextResponse:
    controller = registry.get(sensor_id, sensor_type)
    model = _await(controller, controller.select_range(time_range))
    if model.state is SeriesState.error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=model.last_error or "Reading source unavailable.",
        )
    return PlainTextResponse(to_csv(model.readings), media_type="text/csv")


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
