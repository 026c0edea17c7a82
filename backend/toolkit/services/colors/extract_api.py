"""
Color Extraction API Orchestrator

Coordinates an extraction request from upload decoding through downscaling and
quantization to the response, including the optional swatch artifact and the
per-session latest-request guard.
"""

import asyncio
import time
from typing import Any, Dict, Optional

from fastapi import UploadFile

from toolkit.config import config
from toolkit.schemas import ColorEntry, ColorExtractResponse, ExtractArtifacts
from toolkit.services.colors.extraction import extract_palette
from toolkit.services.colors.swatches import render_swatch_strip
from toolkit.services.imaging import (
    decode_base64_image, get_image_dimensions, read_image, resize_long_edge
)
from toolkit.services.sessions import RequestGuard
from toolkit.utils.ids import generate_request_id
from toolkit.utils.logging import get_logger
from toolkit.utils.metrics import get_metrics


async def handle_extract(
    file: Optional[UploadFile] = None,
    image_b64: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
    guard: Optional[RequestGuard] = None
) -> ColorExtractResponse:
    """
    Extract the dominant color and palette of one uploaded image.

    Args:
        file: Multipart upload
        image_b64: Base64 image data, used when no file is given
        params: Extraction parameters (color_count, quality, method, ...)
        guard: Session guard; when given, the result is committed only if no
            newer request started in the same session meanwhile

    Returns:
        ColorExtractResponse, with ``stale=True`` if superseded

    Raises:
        ValueError: If neither or both inputs are given
        ImageDecodeError / EmptyInputError: For undecodable or pixel-less images
    """
    params = params or {}
    logger = get_logger()
    request_id = generate_request_id("extract")
    start_time = time.time()

    if (file is None) == (image_b64 is None):
        raise ValueError("Provide exactly one of 'file' or 'image_b64'")

    color_count = params.get('color_count', config.PALETTE_SIZE)
    quality = params.get('quality', config.SAMPLE_QUALITY)
    method = params.get('method', config.QUANTIZER_DEFAULT)
    max_edge = params.get('max_edge', config.MAX_EDGE)
    alpha_threshold = params.get('alpha_threshold', config.ALPHA_THRESHOLD)
    ignore_white = params.get('ignore_white', config.IGNORE_WHITE)
    include_swatch = params.get('include_swatch', True)
    chip_size = params.get('chip_size', config.SWATCH_CHIP_SIZE)
    rng_seed = params.get('rng_seed', config.KMEANS_SEED)

    token = guard.begin() if guard is not None else None
    logger.info("Starting color extraction", extra={"request_id": request_id, "token": token})

    metrics = get_metrics()
    try:
        if file is not None:
            rgba = await read_image(file)
        else:
            rgba = await asyncio.to_thread(decode_base64_image, image_b64)
        original_width, original_height = get_image_dimensions(rgba)
        decode_time = time.time() - start_time

        analyzed = resize_long_edge(rgba, max_edge)

        extract_start = time.time()
        result = await asyncio.to_thread(
            extract_palette,
            analyzed,
            color_count=color_count,
            quality=quality,
            method=method,
            alpha_threshold=alpha_threshold,
            ignore_white=ignore_white,
            rng_seed=rng_seed
        )
        extract_time = time.time() - extract_start

        artifacts = None
        if include_swatch:
            swatch_b64 = None
            try:
                swatch_b64 = render_swatch_strip(
                    [c.hex for c in result.palette], chip_size=chip_size, highlight_index=0
                )
            except (ValueError, RuntimeError) as e:
                logger.warning(f"Swatch generation failed: {str(e)}",
                               extra={"request_id": request_id})
            artifacts = ExtractArtifacts(swatch_png_b64=swatch_b64)

        response = ColorExtractResponse(
            request_id=request_id,
            width=result.width,
            height=result.height,
            original_width=original_width,
            original_height=original_height,
            sampled_pixels=result.sampled_pixels,
            method=result.method,
            dominant=ColorEntry.from_color(result.dominant, result.ratios[0]),
            palette=[ColorEntry.from_color(c, r) for c, r in zip(result.palette, result.ratios)],
            artifacts=artifacts,
            request_token=token
        )

        if guard is not None and not guard.commit(token, response):
            response.stale = True
            metrics.increment_counter("color_extract_stale_total")
            logger.info("Discarding stale extraction result",
                        extra={"request_id": request_id, "token": token})

        total_time = time.time() - start_time
        logger.info("Color extraction completed successfully",
                    extra={
                        "request_id": request_id,
                        "dims": f"{result.width}x{result.height}",
                        "method": method,
                        "sampled_pixels": result.sampled_pixels,
                        "dominant_hex": result.dominant.hex,
                        "ms_decode": decode_time * 1000,
                        "ms_extract": extract_time * 1000,
                        "ms_total": total_time * 1000,
                        "result": "ok"
                    })

        metrics.increment_counter("color_extract_requests_total")
        metrics.increment_counter(f"color_extract_method_total_{method}")
        metrics.record_timing("color_extract", total_time * 1000)
        metrics.record_palette_size(len(result.palette))

        return response

    except Exception as e:
        error_time = time.time() - start_time
        logger.error(f"Color extraction failed: {str(e)}",
                     extra={
                         "request_id": request_id,
                         "ms_total": error_time * 1000,
                         "result": "error",
                         "error_type": type(e).__name__
                     })
        metrics.increment_failure_count("color_extract", type(e).__name__)
        raise
