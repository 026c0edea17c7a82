"""
ToolKit Imaging Utilities
Handles upload validation, decoding and downscaling of user images.
"""
import base64
import binascii
import io
from typing import Optional, Tuple

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from toolkit.config import config
from toolkit.errors import EmptyInputError, ImageDecodeError


def _max_bytes() -> int:
    return config.MAX_FILE_MB * 1024 * 1024


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate an uploaded file before reading it.

    Raises:
        HTTPException: 413 for oversized files, 415 for non-image content types
    """
    # file.size might be None for some clients
    if file.size and file.size > _max_bytes():
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds {config.MAX_FILE_MB}MB limit"
        )

    if not (file.content_type or "").startswith(config.SUPPORTED_MIME_PREFIX):
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type: {file.content_type}. Upload an image."
        )


def decode_image_bytes(file_bytes: bytes) -> np.ndarray:
    """
    Decode raw image bytes into an RGBA array.

    Returns:
        numpy array (H, W, 4) uint8 in RGBA order

    Raises:
        ImageDecodeError: If the bytes are not a decodable raster image
        EmptyInputError: If the image has no pixels
    """
    if not file_bytes:
        raise ImageDecodeError("Empty file")

    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        pil_image.load()
        rgba = np.array(pil_image.convert("RGBA"))
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Failed to decode image: {str(e)}") from e

    if rgba.ndim != 3 or rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise EmptyInputError("Image has no pixels")

    return rgba


def decode_base64_image(b64_data: str) -> np.ndarray:
    """
    Decode base64 (optionally a data URL) image data to an RGBA array.

    Raises:
        HTTPException: 413 when the decoded bytes exceed the upload limit
        ImageDecodeError: If the data is not valid base64 or not an image
    """
    if ',' in b64_data:
        b64_data = b64_data.split(',', 1)[1]

    try:
        img_bytes = base64.b64decode(b64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image data: {str(e)}") from e

    if len(img_bytes) > _max_bytes():
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds {config.MAX_FILE_MB}MB limit"
        )

    return decode_image_bytes(img_bytes)


async def read_image(file: UploadFile) -> np.ndarray:
    """
    Validate, read and decode an uploaded image.

    Raises:
        HTTPException: 413/415 for uploads rejected before decoding
        ImageDecodeError: If decoding fails
    """
    validate_file_upload(file)
    file_bytes = await file.read()

    # Validate file size after reading
    if len(file_bytes) > _max_bytes():
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds {config.MAX_FILE_MB}MB limit"
        )

    return decode_image_bytes(file_bytes)


def resize_long_edge(image: np.ndarray, max_edge: Optional[int] = None) -> np.ndarray:
    """
    Resize image so the longest edge is at most max_edge pixels.

    Returns the input unchanged when it is already small enough; otherwise a new array.
    """
    if max_edge is None:
        max_edge = config.MAX_EDGE

    height, width = image.shape[:2]
    current_max = max(height, width)

    if current_max <= max_edge:
        return image

    scale = max_edge / current_max
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    # INTER_AREA for downscaling
    return cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_AREA)


def get_image_dimensions(image: np.ndarray) -> Tuple[int, int]:
    """Get image width and height."""
    height, width = image.shape[:2]
    return width, height
