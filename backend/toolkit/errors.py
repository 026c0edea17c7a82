"""
ToolKit Errors
Domain exceptions raised by the color services and mapped to HTTP responses in main.py.
"""


class ToolkitError(Exception):
    """Base class for color tool failures."""
    pass


class ImageDecodeError(ToolkitError):
    """Uploaded bytes could not be decoded as a raster image."""
    pass


class EmptyInputError(ToolkitError):
    """No pixels survived sampling, so there is nothing to quantize."""
    pass


class ExportError(ToolkitError):
    """Palette could not be formatted or handed to the clipboard writer."""
    pass


class PaletteNotFoundError(ToolkitError):
    """Saved palette id does not exist."""

    def __init__(self, palette_id: str):
        super().__init__(f"Palette not found: {palette_id}")
        self.palette_id = palette_id


class InvalidPaletteError(ToolkitError, ValueError):
    """Palette payload failed validation (name, size or color format)."""
    pass
