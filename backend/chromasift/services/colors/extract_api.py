"""
Palette Extraction API Orchestrator

Coordinates a palette request from payload decoding through quantization to
background selection, with timing, structured logs and metrics per request.
"""

import asyncio
import time
import numpy as np
from typing import Dict, List, Optional

from chromasift.config import config
from chromasift.schemas import (
    BackgroundRequest, BackgroundResponse, ColorEntry, CompareRequest,
    CompareResponse, PaletteResponse, PixelBufferPayload, QuantizeRequest
)
from chromasift.services.colors.background import select_background_for_buffer
from chromasift.services.colors.errors import InvalidPixelBufferError
from chromasift.services.colors.palette import Color
from chromasift.services.colors.pixels import PixelBuffer
from chromasift.services.colors.quantize import (
    AlgorithmId, is_stochastic, quantize, resolve_algorithm
)
from chromasift.utils.ids import generate_request_id
from chromasift.utils.logging import get_logger
from chromasift.utils.metrics import get_metrics

logger = get_logger()


def decode_pixel_payload(payload: PixelBufferPayload) -> PixelBuffer:
    """
    Decode a base64 pixel payload into a PixelBuffer.

    Raises:
        InvalidPixelBufferError: Bad base64, size mismatch or too many pixels
    """
    if not config.validate_pixel_count(payload.width * payload.height):
        raise InvalidPixelBufferError(
            f"Pixel buffer {payload.width}x{payload.height} exceeds "
            f"the {config.MAX_PIXELS} pixel limit"
        )
    return PixelBuffer.from_base64(
        width=payload.width,
        height=payload.height,
        data_b64=payload.data_b64,
        channels=payload.channels
    )


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random generator for one request; falls back to the configured seed."""
    if seed is None:
        seed = config.RANDOM_SEED
    return np.random.default_rng(seed)


def spawn_rngs(count: int, seed: Optional[int] = None) -> List[np.random.Generator]:
    """Independent generators for concurrently running algorithms."""
    if seed is None:
        seed = config.RANDOM_SEED
    children = np.random.SeedSequence(seed).spawn(count)
    return [np.random.default_rng(child) for child in children]


def to_entries(palette: List[Color]) -> List[ColorEntry]:
    return [ColorEntry(**color.to_dict()) for color in palette]


def from_entries(entries: List[ColorEntry]) -> List[Color]:
    return [Color(hex=e.hex, rgb=tuple(e.rgb), percentage=e.percentage) for e in entries]


async def handle_quantize(request: QuantizeRequest) -> PaletteResponse:
    """
    Main orchestrator for palette extraction.

    Args:
        request: Validated quantize request

    Returns:
        PaletteResponse with palette and optional background color

    Raises:
        QuantizationError: For unsupported algorithms or invalid input
    """
    request_id = generate_request_id("pal")
    start_time = time.time()
    metrics = get_metrics()
    metrics.increment_request_count("quantize")

    logger.info("Starting palette extraction", extra={
        "request_id": request_id,
        "algorithm": request.algorithm,
        "color_count": request.color_count
    })

    try:
        algorithm = resolve_algorithm(request.algorithm)

        decode_start = time.time()
        buffer = decode_pixel_payload(request.pixels)
        pixels = buffer.to_rgb()
        decode_time = time.time() - decode_start

        quantize_start = time.time()
        rng = make_rng(request.seed) if is_stochastic(algorithm) else None
        palette = await asyncio.to_thread(quantize, algorithm, pixels, request.color_count, rng)
        quantize_time = time.time() - quantize_start

        background_hex = None
        if request.include_background and palette:
            background_hex = select_background_for_buffer(palette, buffer)

        total_time = time.time() - start_time

        response = PaletteResponse(
            algorithm=algorithm.value,
            color_count=request.color_count,
            pixel_count=int(pixels.shape[0]),
            palette=to_entries(palette),
            background_hex=background_hex,
            debug={
                "request_id": request_id,
                "width": buffer.width,
                "height": buffer.height,
                "seeded": request.seed is not None or config.RANDOM_SEED is not None,
                "ms_decode": decode_time * 1000,
                "ms_quantize": quantize_time * 1000,
                "ms_total": total_time * 1000
            }
        )

        logger.info("Palette extraction completed successfully", extra={
            "request_id": request_id,
            "algorithm": algorithm.value,
            "dims": f"{buffer.width}x{buffer.height}",
            "palette_size": len(palette),
            "background_hex": background_hex,
            "ms_total": total_time * 1000,
            "result": "ok"
        })

        metrics.increment_algorithm_count(algorithm.value)
        metrics.record_timing("quantize", total_time * 1000)
        metrics.record_timing(f"algorithm_{algorithm.value}", quantize_time * 1000)
        metrics.record_palette_size(len(palette))

        return response

    except Exception as e:
        error_time = time.time() - start_time
        logger.error(f"Palette extraction failed: {str(e)}", extra={
            "request_id": request_id,
            "ms_total": error_time * 1000,
            "result": "error",
            "error_type": type(e).__name__
        })
        metrics.increment_failure_count("quantize", type(e).__name__.lower())
        raise


async def handle_background(request: BackgroundRequest) -> BackgroundResponse:
    """
    Pick a background color for an existing palette.

    Raises:
        QuantizationError: For invalid pixel payloads
    """
    request_id = generate_request_id("bg")
    start_time = time.time()
    metrics = get_metrics()
    metrics.increment_request_count("background")

    try:
        buffer = decode_pixel_payload(request.pixels)
        hex_color = select_background_for_buffer(from_entries(request.palette), buffer)
        total_time = time.time() - start_time

        logger.info("Background selection completed", extra={
            "request_id": request_id,
            "palette_size": len(request.palette),
            "hex": hex_color,
            "ms_total": total_time * 1000
        })
        metrics.record_timing("background", total_time * 1000)
        return BackgroundResponse(hex=hex_color)

    except Exception as e:
        logger.error(f"Background selection failed: {str(e)}", extra={
            "request_id": request_id,
            "error_type": type(e).__name__
        })
        metrics.increment_failure_count("background", type(e).__name__.lower())
        raise


async def handle_compare(request: CompareRequest) -> CompareResponse:
    """
    Run several algorithms over one buffer concurrently.

    Each algorithm runs in a worker thread; stochastic ones get their own
    generator spawned from the request seed, so nothing random is shared.

    Raises:
        QuantizationError: For unsupported algorithms or invalid input
    """
    request_id = generate_request_id("cmp")
    start_time = time.time()
    metrics = get_metrics()
    metrics.increment_request_count("compare")

    try:
        selected = request.algorithms
        if selected is None:
            selected = [a.value for a in AlgorithmId]
        algorithms: List[AlgorithmId] = []
        for name in selected:
            algorithm = resolve_algorithm(name)
            if algorithm not in algorithms:
                algorithms.append(algorithm)

        buffer = decode_pixel_payload(request.pixels)
        pixels = buffer.to_rgb()
        rngs = spawn_rngs(len(algorithms), request.seed)

        palettes = await asyncio.gather(*[
            asyncio.to_thread(quantize, algorithm, pixels, request.color_count, rng)
            for algorithm, rng in zip(algorithms, rngs)
        ])

        results: Dict[str, List[ColorEntry]] = {
            algorithm.value: to_entries(palette)
            for algorithm, palette in zip(algorithms, palettes)
        }

        total_time = time.time() - start_time
        logger.info("Algorithm comparison completed", extra={
            "request_id": request_id,
            "algorithms": [a.value for a in algorithms],
            "ms_total": total_time * 1000
        })
        metrics.record_timing("compare", total_time * 1000)
        for algorithm in algorithms:
            metrics.increment_algorithm_count(algorithm.value)

        return CompareResponse(
            color_count=request.color_count,
            pixel_count=int(pixels.shape[0]),
            results=results
        )

    except Exception as e:
        logger.error(f"Algorithm comparison failed: {str(e)}", extra={
            "request_id": request_id,
            "error_type": type(e).__name__
        })
        metrics.increment_failure_count("compare", type(e).__name__.lower())
        raise
