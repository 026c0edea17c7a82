"""
ToolKit API Schemas
Pydantic models for color extraction, palette and gradient request/response validation.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from toolkit.services.colors.conversion import Color


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("toolkit-colors", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# COLORS
# ============================================================================

class ColorEntry(BaseModel):
    """Single color with its representations."""
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Lowercase hex code #rrggbb")
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="[r, g, b], 0-255")
    hsl: List[int] = Field(..., min_length=3, max_length=3, description="[h, s, l], degrees/percent")
    css_rgb: str = Field(..., description="CSS rgb() string")
    css_hsl: str = Field(..., description="CSS hsl() string")
    ratio: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Share of sampled pixels in this color's cluster (extraction only)"
    )

    @classmethod
    def from_color(cls, color: Color, ratio: Optional[float] = None) -> "ColorEntry":
        return cls(
            hex=color.hex,
            rgb=list(color.rgb),
            hsl=list(color.hsl),
            css_rgb=color.css_rgb,
            css_hsl=color.css_hsl,
            ratio=None if ratio is None else min(1.0, float(ratio)),
        )


class ExtractArtifacts(BaseModel):
    """Optional extraction outputs."""
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG strip of the palette, dominant color outlined"
    )


class ColorExtractResponse(BaseModel):
    """Dominant color and ranked palette of an uploaded image."""
    request_id: str
    width: int = Field(..., description="Width of the analyzed (possibly downscaled) image")
    height: int = Field(..., description="Height of the analyzed (possibly downscaled) image")
    original_width: int
    original_height: int
    sampled_pixels: int = Field(..., description="Number of pixels fed to quantization")
    method: Literal["median_cut", "kmeans"]
    dominant: ColorEntry
    palette: List[ColorEntry] = Field(..., min_length=1, max_length=8)
    artifacts: Optional[ExtractArtifacts] = None
    request_token: Optional[int] = Field(
        None, description="Session token for this request when X-Session-ID was sent"
    )
    stale: bool = Field(
        False, description="True when a newer request in the same session superseded this one"
    )


class EmptyExtractResponse(BaseModel):
    """Explicit empty result when no pixels could be sampled."""
    detail: str
    palette: List[ColorEntry] = Field(default_factory=list)


class ColorExtractRequestB64(BaseModel):
    """Extraction request with base64 image data (a data URL is accepted)."""
    image_b64: str = Field(..., min_length=1)


class ColorConvertResponse(BaseModel):
    """All representations of one color."""
    color: ColorEntry


# ============================================================================
# PALETTES
# ============================================================================

class GeneratePaletteRequest(BaseModel):
    """Palette generation parameters; everything optional."""
    seed: Optional[int] = Field(None, description="PRNG seed for a reproducible palette")
    base_hue: Optional[int] = Field(None, ge=0, lt=360, description="Fixed starting hue")


class PaletteResponse(BaseModel):
    """A transient palette."""
    colors: List[ColorEntry]


class PaletteExportRequest(BaseModel):
    """Export a palette as text."""
    colors: List[str] = Field(..., max_length=8, description="Hex colors in palette order")
    format: str = Field("hex", description="hex, css or design-token")


class PaletteExportResponse(BaseModel):
    format: str
    text: str


class SavePaletteRequest(BaseModel):
    """Save a palette under a name."""
    name: str = Field(..., max_length=100)
    colors: List[str] = Field(..., min_length=1, max_length=8)


class SavedColor(BaseModel):
    hex: str
    rgb: str
    hsl: str


class SavedPalette(BaseModel):
    """Persisted palette record."""
    id: str
    name: str
    colors: List[SavedColor]
    createdAt: str


class SavedPaletteList(BaseModel):
    palettes: List[SavedPalette]


# ============================================================================
# GRADIENTS
# ============================================================================

class GradientStopModel(BaseModel):
    color: str = Field(..., description="Hex color")
    position: int = Field(..., ge=0, le=100)


class GradientRequest(BaseModel):
    """Gradient definition."""
    type: Literal["linear", "radial"] = "linear"
    angle: int = Field(90, ge=0, le=360)
    stops: List[GradientStopModel] = Field(..., min_length=2, max_length=5)


class GradientResponse(BaseModel):
    gradient: str
    css: str
    tailwind: str


class GradientStopsResponse(BaseModel):
    stops: List[GradientStopModel]
