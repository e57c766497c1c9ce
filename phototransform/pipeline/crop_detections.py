from __future__ import annotations
from typing import Iterable, List
import logging

from ..config import env_float
from ..exceptions import TransformFailedError
from ..models.image import Image
from ..models.rectangle import Rectangle, RectKind
from ..services.transform_engine import TransformEngine

DETECTION_PADDING = env_float("DETECTION_PADDING", 0.0)

logger = logging.getLogger(__name__)


def pad_normalized(box: Rectangle, padding: float) -> Rectangle:
    """
    Grow a normalized box by `padding` × its own size on every side,
    clamped to the unit square.
    """
    if padding == 0:
        return box
    pad_x = padding * box.width
    pad_y = padding * box.height
    x0 = max(0.0, box.x - pad_x)
    y0 = max(0.0, box.y - pad_y)
    x1 = min(1.0, box.x + box.width + pad_x)
    y1 = min(1.0, box.y + box.height + pad_y)
    return Rectangle.normalized(x0, y0, x1 - x0, y1 - y0)


def crop_detections(
    image: Image,
    detections: Iterable[Rectangle],
    engine: TransformEngine = TransformEngine(),
    padding: float = DETECTION_PADDING,
    reanchor: bool = True,
) -> List[Image]:
    """
    Turn detector boxes into cropped images.

    Args:
        image: the (already upright) image the detector ran on
        detections: normalized boxes, e.g. text or face regions
        engine: transform engine to crop with
        padding: fraction of each box's size added on every side
        reanchor: move each crop's extent origin to (0, 0)

    Returns:
        One Image per detection that overlaps the image, in input order.
    """
    if padding < 0:
        raise ValueError(f"Padding must be non-negative, got {padding}")

    crops = []
    for i, box in enumerate(detections):
        if box.kind is not RectKind.NORMALIZED:
            raise ValueError(f"Detection {i} is not a normalized rectangle")

        absolute = engine.normalized_to_absolute(image, pad_normalized(box, padding))
        try:
            cropped = engine.crop(image, absolute)
        except TransformFailedError as err:
            # Skipping is the caller-level policy for detections that miss the image.
            logger.warning(f"Skipping detection {i} {box.as_tuple()}: {err}")
            continue

        crops.append(engine.reanchor(cropped) if reanchor else cropped)

    logger.debug(f"Cropped {len(crops)} detections")
    return crops
