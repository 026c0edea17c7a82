"""
ToolKit Color Extractor Routes
Upload an image, get its dominant color and palette; convert single colors.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Header, HTTPException, Query, UploadFile

from toolkit.api.deps import get_session_registry
from toolkit.config import config
from toolkit.schemas import (
    ColorConvertResponse, ColorEntry, ColorExtractRequestB64, ColorExtractResponse
)
from toolkit.services.colors.conversion import Color
from toolkit.services.colors.extract_api import handle_extract
from toolkit.services.sessions import SessionRegistry

router = APIRouter(prefix="/colors", tags=["Color Extractor"])


def _extract_params(color_count: int, quality: int, method: str, ignore_white: bool,
                    include_swatch: bool) -> dict:
    return {
        'color_count': color_count,
        'quality': quality,
        'method': method,
        'max_edge': config.MAX_EDGE,
        'alpha_threshold': config.ALPHA_THRESHOLD,
        'ignore_white': ignore_white,
        'include_swatch': include_swatch,
        'chip_size': config.SWATCH_CHIP_SIZE,
        'rng_seed': config.KMEANS_SEED
    }


@router.post("/extract", response_model=ColorExtractResponse)
async def extract_colors(
    file: UploadFile = File(..., description="Image file (any raster format)"),
    color_count: int = Query(config.PALETTE_SIZE, ge=1, le=8, description="Palette size"),
    quality: int = Query(config.SAMPLE_QUALITY, ge=1, le=100, description="Sample every Nth pixel"),
    method: str = Query(config.QUANTIZER_DEFAULT, pattern="^(median_cut|kmeans)$",
                        description="Quantization method"),
    ignore_white: bool = Query(config.IGNORE_WHITE, description="Skip near-white pixels"),
    include_swatch: bool = Query(True, description="Include swatch strip PNG in response"),
    session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    sessions: SessionRegistry = Depends(get_session_registry)
):
    """
    Extract the dominant color and a palette of up to 8 colors.

    - **file**: image upload, at most the configured size limit
    - **color_count**: number of palette entries (1-8)
    - **quality**: sampling stride; higher is faster and coarser
    - **method**: median_cut (default) or kmeans
    - **X-Session-ID**: when sent, only the newest request of the session is
      committed; superseded responses come back with ``stale: true``
    """
    guard = sessions.guard(session_id) if session_id else None
    params = _extract_params(color_count, quality, method, ignore_white, include_swatch)
    return await handle_extract(file=file, params=params, guard=guard)


@router.post("/extract/b64", response_model=ColorExtractResponse)
async def extract_colors_b64(
    request: ColorExtractRequestB64,
    color_count: int = Query(config.PALETTE_SIZE, ge=1, le=8),
    quality: int = Query(config.SAMPLE_QUALITY, ge=1, le=100),
    method: str = Query(config.QUANTIZER_DEFAULT, pattern="^(median_cut|kmeans)$"),
    ignore_white: bool = Query(config.IGNORE_WHITE),
    include_swatch: bool = Query(True),
    session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    sessions: SessionRegistry = Depends(get_session_registry)
):
    """Same as /colors/extract for base64 image data or a data URL."""
    guard = sessions.guard(session_id) if session_id else None
    params = _extract_params(color_count, quality, method, ignore_white, include_swatch)
    return await handle_extract(image_b64=request.image_b64, params=params, guard=guard)


@router.get("/sessions/{session_id}/latest", response_model=ColorExtractResponse)
def latest_extraction(
    session_id: str,
    sessions: SessionRegistry = Depends(get_session_registry)
):
    """Most recent committed extraction of a session."""
    latest = sessions.latest(session_id)
    if latest is None:
        raise HTTPException(status_code=404, detail="No extraction for this session")
    return latest


@router.get("/convert", response_model=ColorConvertResponse)
def convert_color(hex: str = Query(..., description="Hex color, #rrggbb or #rgb")):
    """Every representation of a single color, for the per-swatch copy buttons."""
    try:
        color = Color.from_hex(hex)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ColorConvertResponse(color=ColorEntry.from_color(color))
