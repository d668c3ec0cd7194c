"""
chromasift v1 API Routes
Implements /v1/quantize and supporting routes.
"""
from typing import Any, Dict
from fastapi import APIRouter, HTTPException

from chromasift.config import config
from chromasift.schemas import (
    AlgorithmInfo, AlgorithmsResponse, BackgroundRequest, BackgroundResponse,
    CompareRequest, CompareResponse, ErrorResponse, PaletteResponse, QuantizeRequest
)
from chromasift.services.colors.errors import QuantizationError
from chromasift.services.colors.extract_api import (
    handle_background, handle_compare, handle_quantize
)
from chromasift.services.colors.quantize import ALGORITHMS
from chromasift.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palette Extraction"])

ERROR_RESPONSES = {400: {"model": ErrorResponse}}


@router.get("/algorithms", response_model=AlgorithmsResponse)
def list_algorithms():
    """List the available quantization algorithms."""
    return AlgorithmsResponse(
        algorithms=[
            AlgorithmInfo(id=spec.id.value, label=spec.label, stochastic=spec.stochastic)
            for spec in ALGORITHMS.values()
        ],
        default=config.DEFAULT_ALGORITHM
    )


@router.post("/quantize",
             response_model=PaletteResponse,
             responses=ERROR_RESPONSES,
             summary="Extract Palette",
             description="Reduce a raw pixel buffer to a palette with the selected algorithm")
async def quantize_palette(request: QuantizeRequest) -> PaletteResponse:
    """
    Extract a palette from a pixel buffer.

    **Algorithms:**
    - **medianCut**: recursive widest-channel splits; power-of-two sizes
    - **minimumDifference**: shuffled seeds, 10 refinement passes
    - **kMeans**: random seeds, complexity-scaled iteration budget
    - **octree**: adaptive-depth color tree, most populated first
    - **popularity**: most frequent exact colors

    Pass `seed` to make the stochastic algorithms reproducible.
    """
    try:
        return await handle_quantize(request)
    except QuantizationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/background", response_model=BackgroundResponse, responses=ERROR_RESPONSES)
async def background_color(request: BackgroundRequest) -> BackgroundResponse:
    """Choose the palette color that best matches the buffer's border."""
    try:
        return await handle_background(request)
    except QuantizationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/compare", response_model=CompareResponse, responses=ERROR_RESPONSES)
async def compare_algorithms(request: CompareRequest) -> CompareResponse:
    """Run several algorithms over the same buffer."""
    try:
        return await handle_compare(request)
    except QuantizationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/metrics")
def metrics_summary() -> Dict[str, Any]:
    """In-process metrics summary."""
    return get_metrics().get_summary()
