from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables before the config is read
load_dotenv()

from toolkit import __version__
from toolkit.api.colors import router as colors_router
from toolkit.api.gradients import router as gradients_router
from toolkit.api.palettes import router as palettes_router
from toolkit.config import config
from toolkit.errors import (
    EmptyInputError, ExportError, ImageDecodeError, InvalidPaletteError, PaletteNotFoundError
)
from toolkit.schemas import EmptyExtractResponse, HealthResponse
from toolkit.utils.logging import get_logger
from toolkit.utils.metrics import get_metrics

logger = get_logger()

app = FastAPI(
    title="ToolKit Color Tools",
    description="Color extraction, palette generation and gradient building",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"]
)

app.include_router(colors_router)
app.include_router(palettes_router)
app.include_router(gradients_router)


# =============================================================================
# Error mapping
# =============================================================================

@app.exception_handler(ImageDecodeError)
async def image_decode_error_handler(request: Request, exc: ImageDecodeError):
    logger.warning(f"Image decode failed: {exc}", extra={"path": request.url.path})
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(EmptyInputError)
async def empty_input_error_handler(request: Request, exc: EmptyInputError):
    logger.warning(f"Empty input: {exc}", extra={"path": request.url.path})
    return JSONResponse(status_code=422, content=EmptyExtractResponse(detail=str(exc)).model_dump())


@app.exception_handler(ExportError)
async def export_error_handler(request: Request, exc: ExportError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidPaletteError)
async def invalid_palette_error_handler(request: Request, exc: InvalidPaletteError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(PaletteNotFoundError)
async def palette_not_found_handler(request: Request, exc: PaletteNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# =============================================================================
# Service endpoints
# =============================================================================

@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Liveness probe."""
    return HealthResponse(ok=True, version=__version__, service="toolkit-colors")


@app.get("/metrics")
def metrics():
    """In-process counters and timings."""
    try:
        return get_metrics().get_summary()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get metrics: {str(e)}")
