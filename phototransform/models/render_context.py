from __future__ import annotations
import logging
import os
import threading
import cv2
import numpy as np
from dotenv import load_dotenv

from ..exceptions import ConfigurationError, TransformFailedError
from .affine_transform import AffineTransform2D
from .image import Image
from .polygon import fill_mask

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_INTERPOLATIONS = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "lanczos": cv2.INTER_LANCZOS4,
}


class RenderContext:
    """
    OpenCV-backed rasteriser for Image recipes.

    Holds only immutable settings, so one instance may be reused freely on a
    thread. `for_current_thread()` hands out one cached instance per thread;
    contexts are never shared across threads implicitly.
    """

    _local = threading.local()

    def __init__(self, interpolation: str = None, border_value: int = None):
        """
        Args:
            interpolation: nearest | linear | cubic | lanczos. Defaults to env var.
            border_value: fill value (0-255) for pixels outside the image. Defaults to env var.
        """
        if interpolation is None:
            interpolation = os.getenv("RENDER_INTERPOLATION", "linear")
        if border_value is None:
            border_value = os.getenv("RENDER_BORDER_VALUE", "0")

        key = str(interpolation).strip().lower()
        if key not in _INTERPOLATIONS:
            raise ConfigurationError(
                f"Unknown interpolation '{interpolation}', expected one of {sorted(_INTERPOLATIONS)}")
        try:
            border = int(border_value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Border value must be an integer, got {border_value!r}") from None
        if not 0 <= border <= 255:
            raise ConfigurationError(f"Border value must be between 0 and 255, got {border}")

        self.interpolation = key
        self.border_value = border
        self._cv_flag = _INTERPOLATIONS[key]

    @classmethod
    def for_current_thread(cls) -> RenderContext:
        ctx = getattr(cls._local, "context", None)
        if ctx is None:
            ctx = cls()
            cls._local.context = ctx
            logger.debug(f"Created render context for thread {threading.current_thread().name} "
                         f"(interpolation={ctx.interpolation})")
        return ctx

    # ─── Rendering ─────────────────────────────────────────────────────
    def render(self, image: Image) -> np.ndarray:
        """
        Rasterise `image` over its integral extent.

        Returns:
            A new writeable (h, w[, C]) uint8 array; row 0 is the top of the extent.

        Raises:
            TransformFailedError: empty extent or backend failure.
        """
        extent = image.extent
        if extent.is_empty:
            raise TransformFailedError("render", "image extent is empty")

        if image.region is None and image.transform.is_identity():
            return np.array(image.pixels, copy=True)

        target = extent.integral()
        rx, ry = int(target.x), int(target.y)
        rw, rh = int(target.width), int(target.height)
        _, src_h = image.grid_size

        # source array index -> grid point at the pixel centre
        array_to_grid = AffineTransform2D(a=1.0, b=0.0, c=0.0, d=-1.0, tx=0.5, ty=src_h - 0.5)
        # world point -> destination array index
        world_to_array = AffineTransform2D(a=1.0, b=0.0, c=0.0, d=-1.0,
                                           tx=-rx - 0.5, ty=ry + rh - 0.5)
        mapping = array_to_grid.then(image.transform).then(world_to_array)

        src = image.pixels
        if not src.flags['C_CONTIGUOUS']:
            src = np.ascontiguousarray(src)

        fill = (self.border_value,) * 4
        try:
            out = cv2.warpAffine(src, mapping.as_matrix()[:2], (rw, rh),
                                 flags=self._cv_flag,
                                 borderMode=cv2.BORDER_CONSTANT,
                                 borderValue=fill)
        except cv2.error as err:
            raise TransformFailedError("render", err) from err
        if src.ndim == 3 and out.ndim == 2:
            out = out[:, :, np.newaxis]

        if image.region is not None:
            out[~self._region_mask(image, world_to_array, rw, rh)] = self.border_value
        return out

    @staticmethod
    def _region_mask(image: Image, world_to_array: AffineTransform2D, rw: int, rh: int) -> np.ndarray:
        """True where a destination pixel falls inside the crop region."""
        polygon = world_to_array.apply_to_points(image.world_polygon())
        return fill_mask(polygon, rw, rh)
