"""
ToolKit Configuration
Manages environment variables and defaults for the color tools service.
"""
import os
from typing import Literal, Tuple


class Config:
    """Configuration class for ToolKit color services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("TOOLKIT_MAX_FILE_MB", "10"))
    MAX_EDGE: int = int(os.environ.get("TOOLKIT_MAX_EDGE", "1024"))

    # Extraction defaults
    PALETTE_SIZE: int = int(os.environ.get("TOOLKIT_PALETTE_SIZE", "8"))
    SAMPLE_QUALITY: int = int(os.environ.get("TOOLKIT_SAMPLE_QUALITY", "10"))
    ALPHA_THRESHOLD: int = int(os.environ.get("TOOLKIT_ALPHA_THRESHOLD", "125"))
    IGNORE_WHITE: bool = bool(int(os.environ.get("TOOLKIT_IGNORE_WHITE", "0")))
    QUANTIZER_DEFAULT: Literal["median_cut", "kmeans"] = os.environ.get(
        "TOOLKIT_QUANTIZER_DEFAULT", "median_cut"
    )
    KMEANS_SEED: int = int(os.environ.get("TOOLKIT_KMEANS_SEED", "42"))

    # Palette generation
    GENERATE_COUNT: int = int(os.environ.get("TOOLKIT_GENERATE_COUNT", "5"))
    GENERATE_HUE_STEP: int = int(os.environ.get("TOOLKIT_GENERATE_HUE_STEP", "72"))
    GENERATE_SATURATION: Tuple[int, int] = (
        int(os.environ.get("TOOLKIT_GENERATE_SAT_MIN", "60")),
        int(os.environ.get("TOOLKIT_GENERATE_SAT_MAX", "90")),
    )
    GENERATE_LIGHTNESS: Tuple[int, int] = (
        int(os.environ.get("TOOLKIT_GENERATE_LIGHT_MIN", "40")),
        int(os.environ.get("TOOLKIT_GENERATE_LIGHT_MAX", "60")),
    )

    # Saved palettes
    STORE_PATH: str = os.environ.get("TOOLKIT_STORE_PATH", "./data/palettes.json")
    STORE_KEY: str = os.environ.get("TOOLKIT_STORE_KEY", "colorPalettes")

    # Logging
    LOG_LEVEL: str = os.environ.get("TOOLKIT_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("TOOLKIT_LOG_JSON", "0")))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get(
        "TOOLKIT_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:3001"
    )

    # Swatch artifact
    SWATCH_CHIP_SIZE: int = int(os.environ.get("TOOLKIT_SWATCH_CHIP_SIZE", "40"))

    # Latest-request guards kept in memory
    MAX_SESSIONS: int = int(os.environ.get("TOOLKIT_MAX_SESSIONS", "1000"))

    # Supported uploads
    SUPPORTED_MIME_PREFIX = "image/"

    @classmethod
    def allowed_origins(cls) -> list:
        """Split the comma separated CORS origin list."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
