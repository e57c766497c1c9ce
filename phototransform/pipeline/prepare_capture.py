"""
Capture preparation pipeline.
Decodes a photo straight off the device, rotates it upright according to its
orientation tag and applies the configured colour correction.
"""

import logging
from typing import Iterable, List

from ..config import env_float
from ..models.color_controls import ColorControls
from ..models.image import Image
from ..services.image_service import ImageService
from ..services.transform_engine import TransformEngine

CAPTURE_SATURATION = env_float("CAPTURE_SATURATION", 1.0)
CAPTURE_CONTRAST = env_float("CAPTURE_CONTRAST", 1.0)
CAPTURE_BRIGHTNESS = env_float("CAPTURE_BRIGHTNESS", 0.0)

logger = logging.getLogger(__name__)


def prepare_capture(
    data: bytes,
    *,
    image_service: ImageService = ImageService(),
    engine: TransformEngine = TransformEngine(),
    saturation: float = CAPTURE_SATURATION,
    contrast: float = CAPTURE_CONTRAST,
    brightness: float = CAPTURE_BRIGHTNESS,
) -> Image:
    """
    Decode → fix orientation → colour-correct.

    Args:
        data: encoded image bytes (JPEG, PNG, ...)
        image_service: service used for decoding
        engine: transform engine for the geometric and colour steps
        saturation, contrast, brightness: colour controls; the neutral
            triple (1, 1, 0) skips the colour pass entirely

    Returns:
        Image: upright image anchored at (0, 0)

    Raises:
        DecodeError, InvalidOrientationError, FilterConstructionError,
        TransformFailedError: straight from the failing step.
    """
    img, orientation = image_service.decode(data)
    upright = engine.fix_orientation(img, orientation)

    if ColorControls(saturation, contrast, brightness).is_identity():
        return upright

    logger.debug(f"Colour correcting capture: saturation={saturation}, "
                 f"contrast={contrast}, brightness={brightness}")
    return engine.apply_color_adjustment(upright, saturation, contrast, brightness)


def prepare_captures(captures: Iterable[bytes], **kwargs) -> List[Image]:
    """Prepare several captures; the first failure propagates."""
    prepared = [prepare_capture(data, **kwargs) for data in captures]
    logger.info(f"Prepared {len(prepared)} captures")
    return prepared
