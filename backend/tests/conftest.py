"""
Test configuration and fixtures for chromasift tests.
"""
import base64

import numpy as np
import pytest
from fastapi.testclient import TestClient

from main import app


class FixedRng:
    """Stand-in generator returning preset seed positions."""

    def __init__(self, indices):
        self.indices = list(indices)

    def integers(self, low, high, size=None):
        return np.array(self.indices[:size], dtype=np.intp)

    def permutation(self, n):
        rest = [i for i in range(n) if i not in self.indices]
        return np.array(self.indices + rest, dtype=np.intp)


def encode_pixels(pixels, width, height, channels=4):
    """Pack RGB triples into a base64 payload dict for the API."""
    arr = np.asarray(pixels, dtype=np.uint8).reshape(-1, 3)
    if channels == 4:
        alpha = np.full((arr.shape[0], 1), 255, dtype=np.uint8)
        arr = np.hstack([arr, alpha])
    return {
        "width": width,
        "height": height,
        "channels": channels,
        "data_b64": base64.b64encode(arr.tobytes()).decode("ascii"),
    }


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from chromasift.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def random_pixels():
    """500 uniformly random RGB pixels."""
    return np.random.default_rng(0).integers(0, 256, size=(500, 3)).astype(np.uint8)


@pytest.fixture
def two_tone_pixels():
    """50 dark pixels followed by 50 light pixels."""
    dark = [(10, 10, 10)] * 25 + [(20, 20, 20)] * 25
    light = [(240, 240, 240)] * 25 + [(250, 250, 250)] * 25
    return np.array(dark + light, dtype=np.uint8)


@pytest.fixture
def fixed_rng():
    """Factory for generators that seed from given pixel positions."""
    return FixedRng


@pytest.fixture
def pixel_payload():
    """Factory for base64 pixel payloads."""
    return encode_pixels
