"""
chromasift API Schemas
Pydantic models for palette extraction request/response validation.
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from chromasift.config import config
from chromasift.services.colors.metric import hex_to_rgb


class PixelBufferPayload(BaseModel):
    """Raw pixel snapshot: flat row-major bytes, base64-encoded."""
    width: int = Field(..., ge=0, description="Buffer width in pixels")
    height: int = Field(..., ge=0, description="Buffer height in pixels")
    channels: Literal[3, 4] = Field(4, description="Bytes per pixel (RGBA=4, RGB=3)")
    data_b64: str = Field(
        ...,
        description="Base64-encoded pixel bytes, width*height*channels long"
    )


class ColorEntry(BaseModel):
    """Single palette color with its coverage estimate."""
    hex: str = Field(
        ...,
        pattern=r"^[0-9a-f]{6}$",
        description="Lowercase hex color code RRGGBB without '#'"
    )
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="[R, G, B]")
    percentage: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Estimated share of the image (0-100); not guaranteed to sum to 100"
    )

    @field_validator("rgb")
    @classmethod
    def validate_rgb(cls, v):
        for channel in v:
            if not 0 <= channel <= 255:
                raise ValueError("rgb channels must be within 0-255")
        return v

    @model_validator(mode="after")
    def check_hex_matches_rgb(self):
        if hex_to_rgb(self.hex) != tuple(self.rgb):
            raise ValueError(f"hex {self.hex} does not encode rgb {self.rgb}")
        return self


class QuantizeRequest(BaseModel):
    """Palette extraction request."""
    algorithm: str = Field(
        config.DEFAULT_ALGORITHM,
        description="medianCut, minimumDifference, kMeans, octree or popularity"
    )
    color_count: int = Field(
        config.DEFAULT_COLOR_COUNT,
        ge=1,
        le=config.MAX_COLOR_COUNT,
        description="Requested palette size"
    )
    seed: Optional[int] = Field(None, ge=0, description="Seed for stochastic algorithms")
    include_background: bool = Field(True, description="Also pick a background color")
    pixels: PixelBufferPayload


class PaletteResponse(BaseModel):
    """Palette extraction response."""
    algorithm: str = Field(..., description="Algorithm that produced the palette")
    color_count: int = Field(..., description="Requested palette size")
    pixel_count: int = Field(..., description="Number of pixels quantized")
    palette: List[ColorEntry] = Field(..., description="Palette in algorithm order")
    background_hex: Optional[str] = Field(
        None,
        pattern=r"^[0-9a-f]{6}$",
        description="Palette color closest to the image border"
    )
    debug: Dict[str, Any] = Field(default_factory=dict, description="Processing details")


class BackgroundRequest(BaseModel):
    """Background selection request for an existing palette."""
    palette: List[ColorEntry] = Field(..., min_length=1)
    pixels: PixelBufferPayload


class BackgroundResponse(BaseModel):
    """Background selection response."""
    hex: str = Field(..., pattern=r"^[0-9a-f]{6}$")


class CompareRequest(BaseModel):
    """Run several algorithms over the same pixel buffer."""
    algorithms: Optional[List[str]] = Field(
        None,
        min_length=1,
        description="Algorithms to run; all of them when omitted"
    )
    color_count: int = Field(config.DEFAULT_COLOR_COUNT, ge=1, le=config.MAX_COLOR_COUNT)
    seed: Optional[int] = Field(None, ge=0)
    pixels: PixelBufferPayload


class CompareResponse(BaseModel):
    """Palettes keyed by algorithm id."""
    color_count: int
    pixel_count: int
    results: Dict[str, List[ColorEntry]]


class AlgorithmInfo(BaseModel):
    id: str
    label: str
    stochastic: bool


class AlgorithmsResponse(BaseModel):
    algorithms: List[AlgorithmInfo]
    default: str


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("chromasift", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")
