"""Shared fixtures for the transform tests."""

from __future__ import annotations

import os
import sys
from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phototransform.models.image import Image
from phototransform.models.render_context import RenderContext
from phototransform.services.transform_engine import TransformEngine


def make_gradient(height: int, width: int) -> np.ndarray:
    """Every pixel differs from its neighbours, so any misplacement shows up."""
    rows, cols = np.mgrid[0:height, 0:width]
    return np.stack(
        [rows % 256, (cols * 2) % 256, (rows + cols) % 256], axis=-1
    ).astype(np.uint8)


@pytest.fixture
def gradient_pixels() -> np.ndarray:
    return make_gradient(200, 100)


@pytest.fixture
def portrait(gradient_pixels: np.ndarray) -> Image:
    """100 wide, 200 tall: extent (0, 0, 100, 200)."""
    return Image(gradient_pixels)


@pytest.fixture
def context() -> RenderContext:
    return RenderContext(interpolation="linear", border_value=0)


@pytest.fixture
def engine(context: RenderContext) -> TransformEngine:
    return TransformEngine(context=context, warn_normalized_crops=True)


@pytest.fixture
def encode():
    """Factory: encode pixels to bytes, optionally with an EXIF orientation tag."""

    def _encode(pixels: np.ndarray, fmt: str = "PNG", exif_orientation: int | None = None) -> bytes:
        pil_obj = PILImage.fromarray(pixels)
        buf = BytesIO()
        if exif_orientation is None:
            pil_obj.save(buf, format=fmt)
        else:
            exif = PILImage.Exif()
            exif[274] = exif_orientation
            pil_obj.save(buf, format=fmt, exif=exif.tobytes())
        return buf.getvalue()

    return _encode
