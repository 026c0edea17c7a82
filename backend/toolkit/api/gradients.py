"""
ToolKit Gradient Generator Routes
"""
import random
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from toolkit.schemas import GradientRequest, GradientResponse, GradientStopModel, GradientStopsResponse
from toolkit.services.colors.gradients import (
    GradientStop, add_stop, build_gradient, export_gradient, randomize_stops, remove_stop
)

router = APIRouter(prefix="/gradients", tags=["Gradient Generator"])


def _stops(request: GradientRequest):
    try:
        return [GradientStop(s.color, s.position) for s in request.stops]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/css", response_model=GradientResponse)
def gradient_css(request: GradientRequest):
    """CSS gradient plus ready-to-copy CSS and Tailwind snippets."""
    stops = _stops(request)
    try:
        gradient = build_gradient(stops, request.type, request.angle)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GradientResponse(
        gradient=gradient,
        css=export_gradient(gradient, "css"),
        tailwind=export_gradient(gradient, "tailwind")
    )


def _stops_response(stops) -> GradientStopsResponse:
    return GradientStopsResponse(
        stops=[GradientStopModel(color=s.color, position=s.position) for s in stops]
    )


@router.post("/stops/add", response_model=GradientStopsResponse)
def gradient_add_stop(request: GradientRequest):
    """Append a white stop after the last one."""
    try:
        return _stops_response(add_stop(_stops(request)))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/stops/remove", response_model=GradientStopsResponse)
def gradient_remove_stop(request: GradientRequest, index: int = Query(..., ge=0)):
    try:
        return _stops_response(remove_stop(_stops(request), index))
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/randomize", response_model=GradientStopsResponse)
def gradient_randomize(request: GradientRequest, seed: Optional[int] = Query(None)):
    """Random colors for every stop, positions unchanged."""
    rng = random.Random(seed) if seed is not None else random.Random()
    return _stops_response(randomize_stops(_stops(request), rng))
