from __future__ import annotations
from pathlib import Path
from typing import Tuple, Union
import logging
import os
import numpy as np
import torch
import torchvision.transforms as T
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..exceptions import TransformFailedError
from ..models.affine_transform import AffineTransform2D
from ..models.color_controls import ColorControls
from ..models.image import Image
from ..models.orientation import Orientation
from ..models.render_context import RenderContext
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """Decode, render and pixel-level helpers. No geometry decisions here."""
    def __init__(self):
        self.device = os.getenv("COLOR_DEVICE", "cpu")
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def decode(self, data: bytes) -> Tuple[Image, Orientation]:
        """
        Decode capture bytes and read their orientation tag.

        Raises:
            DecodeError: unreadable data.
            InvalidOrientationError: mirrored or unknown EXIF orientation.
        """
        img, tag = self.image_repository.decode(data)
        orientation = Orientation.from_exif(tag)
        logger.debug(f"Decoded {img.grid_size[0]}x{img.grid_size[1]} image, EXIF orientation={tag}")
        return img, orientation

    def get_image_dimensions(self, img: Image):
        return self.image_repository.retrieve_image_dimensions(img)

    def render(self, img: Image, context: RenderContext = None) -> np.ndarray:
        """Rasterise the image recipe into an (h, w[, C]) uint8 array."""
        context = context or RenderContext.for_current_thread()
        return context.render(img)

    # ─── ML-friendly utilities ────────────────────────────────────────
    _TO_TENSOR = T.ToTensor()

    def to_tensor(self, img: Image, context: RenderContext = None, device: str = None) -> torch.Tensor:
        """
        Render the image and convert it to a (1, C, h, w) float tensor in [0, 1].
        """
        np_img = self.render(img, context)
        if not np_img.flags['C_CONTIGUOUS']:
            np_img = np.ascontiguousarray(np_img)
        return self._TO_TENSOR(np_img).unsqueeze(0).to(device or self.device)

    def apply_color_controls(
            self,
            img: Image,
            controls: ColorControls,
            context: RenderContext = None,
    ) -> Image:
        """
        Apply a saturation/contrast/brightness adjustment and return a *new* Image.
        The result keeps the input's extent and crop region.
        """
        target = img.extent.integral()
        tensor = self.to_tensor(img, context)
        edited = controls.apply_to_tensor(tensor).clamp(0, 1)

        np_img = (
            edited.squeeze(0).mul(255).round().to(torch.uint8).cpu().numpy()
            .transpose(1, 2, 0)  # CHW → HWC
        )
        if img.pixels.ndim == 2:
            np_img = np_img[:, :, 0]
        if np_img.shape[:2] != (int(target.height), int(target.width)):
            raise TransformFailedError(
                "color controls", f"rendered {np_img.shape[:2]} for extent {target.as_tuple()}")

        # New grid sits at the integral extent origin; keep the exact visible region.
        placement = AffineTransform2D.translation(target.x, target.y)
        region = img.world_polygon() - np.array([target.x, target.y])
        if img.region is None and img.transform == placement:
            region = None
        return self.image_repository.with_pixels(img, np.ascontiguousarray(np_img), placement, region)

    def to_pil_image(self, img: Image, context: RenderContext = None) -> PILImage.Image:
        """
        Render the image into a PIL Image object.
        """
        np_img = self.render(img, context)
        if np_img.ndim == 3 and np_img.shape[2] == 1:
            np_img = np_img[:, :, 0]
        return PILImage.fromarray(np.ascontiguousarray(np_img))
