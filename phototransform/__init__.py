"""
Photo transform core.

Stateless helpers for preparing mobile-device captures:
- Affine transforms (rotate, translate, arbitrary matrices)
- Saturation / contrast / brightness correction
- Cropping, including detector boxes given in normalized coordinates
- Orientation correction from capture metadata

Images are immutable recipes; pixels are only resampled when rendered.
"""

from .exceptions import (
    ImageProcessingError,
    ConfigurationError,
    TransformFailedError,
    FilterConstructionError,
    InvalidOrientationError,
    DecodeError,
)
from .models.affine_transform import AffineTransform2D
from .models.color_controls import ColorControls
from .models.image import Image
from .models.orientation import Orientation
from .models.rectangle import Rectangle, RectKind
from .models.render_context import RenderContext
from .services.image_service import ImageService
from .services.transform_engine import TransformEngine

__version__ = "1.0.0"
__all__ = [
    "ImageProcessingError",
    "ConfigurationError",
    "TransformFailedError",
    "FilterConstructionError",
    "InvalidOrientationError",
    "DecodeError",
    "AffineTransform2D",
    "ColorControls",
    "Image",
    "Orientation",
    "Rectangle",
    "RectKind",
    "RenderContext",
    "ImageService",
    "TransformEngine",
]
