"""
ToolKit Palette Generator Routes
Generate harmonious palettes, export them as text, and manage saved palettes.
"""
import random
from typing import List, Optional

from fastapi import APIRouter, Depends

from toolkit.api.deps import get_palette_store
from toolkit.errors import InvalidPaletteError
from toolkit.schemas import (
    ColorEntry, GeneratePaletteRequest, PaletteExportRequest, PaletteExportResponse,
    PaletteResponse, SavedPalette, SavedPaletteList, SavePaletteRequest
)
from toolkit.services.colors.conversion import Color
from toolkit.services.colors.export import format_palette
from toolkit.services.colors.generation import generate_palette
from toolkit.services.palette_store import PaletteStore
from toolkit.utils.logging import get_logger
from toolkit.utils.metrics import get_metrics

router = APIRouter(prefix="/palettes", tags=["Color Palette Generator"])


def parse_colors(values: List[str]) -> List[Color]:
    """Hex strings from a request body to Colors."""
    try:
        return [Color.from_hex(value) for value in values]
    except ValueError as e:
        raise InvalidPaletteError(str(e)) from e


@router.post("/generate", response_model=PaletteResponse)
def generate(request: Optional[GeneratePaletteRequest] = None):
    """Five colors 72° apart with random saturation and lightness."""
    request = request or GeneratePaletteRequest()
    rng = random.Random(request.seed) if request.seed is not None else random.Random()
    colors = generate_palette(rng=rng, base_hue=request.base_hue)
    get_metrics().increment_counter("palette_generate_total")
    return PaletteResponse(colors=[ColorEntry.from_color(c) for c in colors])


@router.post("/export", response_model=PaletteExportResponse)
def export(request: PaletteExportRequest):
    """Format a palette as a hex list, CSS custom properties or a design-token map."""
    colors = parse_colors(request.colors)
    text = format_palette(colors, request.format)
    get_metrics().increment_counter(f"palette_export_total_{request.format}")
    return PaletteExportResponse(format=request.format, text=text)


@router.get("", response_model=SavedPaletteList)
def list_palettes(store: PaletteStore = Depends(get_palette_store)):
    return SavedPaletteList(palettes=store.list())


@router.post("", response_model=SavedPalette, status_code=201)
def save_palette(request: SavePaletteRequest, store: PaletteStore = Depends(get_palette_store)):
    """Save the current palette under a name."""
    record = store.save(request.name, parse_colors(request.colors))
    get_logger().info("Palette saved", extra={"palette_id": record["id"]})
    get_metrics().increment_counter("palette_saved_total")
    return record


@router.get("/{palette_id}", response_model=SavedPalette)
def get_palette(palette_id: str, store: PaletteStore = Depends(get_palette_store)):
    return store.get(palette_id)


@router.delete("/{palette_id}", response_model=SavedPalette)
def delete_palette(palette_id: str, store: PaletteStore = Depends(get_palette_store)):
    record = store.delete(palette_id)
    get_metrics().increment_counter("palette_deleted_total")
    return record
