"""
chromasift Configuration
Manages environment variables and defaults for the palette service.
"""
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    return int(value) if value else None


class Config:
    """Configuration class for chromasift services."""

    SERVICE_NAME: str = "chromasift"
    SERVICE_VERSION: str = os.environ.get("CHROMASIFT_VERSION", "1.0.0")

    # Logging
    LOG_LEVEL: str = os.environ.get("CHROMASIFT_LOG_LEVEL", "INFO")

    # Quantization defaults
    DEFAULT_ALGORITHM: str = os.environ.get("CHROMASIFT_DEFAULT_ALGORITHM", "medianCut")
    DEFAULT_COLOR_COUNT: int = int(os.environ.get("CHROMASIFT_DEFAULT_COLOR_COUNT", "8"))
    MAX_COLOR_COUNT: int = int(os.environ.get("CHROMASIFT_MAX_COLOR_COUNT", "256"))

    # Largest pixel buffer accepted over HTTP
    MAX_PIXELS: int = int(os.environ.get("CHROMASIFT_MAX_PIXELS", "4000000"))

    # Unset means every stochastic request draws fresh entropy
    RANDOM_SEED: Optional[int] = _optional_int("CHROMASIFT_RANDOM_SEED")

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("CHROMASIFT_ALLOWED_ORIGINS", "http://localhost:3000")

    @classmethod
    def validate_color_count(cls, color_count: int) -> bool:
        """Validate requested palette size."""
        return 1 <= color_count <= cls.MAX_COLOR_COUNT

    @classmethod
    def validate_pixel_count(cls, pixel_count: int) -> bool:
        """Validate pixel buffer size."""
        return 0 <= pixel_count <= cls.MAX_PIXELS

    @classmethod
    def allowed_origins(cls) -> List[str]:
        return [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]


# Global config instance
config = Config()
