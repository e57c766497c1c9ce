from __future__ import annotations
import dataclasses
from io import BytesIO
from pathlib import Path
from typing import Tuple, Union
import numpy as np
from PIL import Image as PILImage

from ..exceptions import DecodeError
from ..models.affine_transform import AffineTransform2D
from ..models.image import Image

EXIF_ORIENTATION_TAG = 274


class ImageRepository:
    """
    Builds Image entities from raw pixels or encoded bytes and derives new
    entities with replaced geometry. Images themselves are never mutated.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    @staticmethod
    def decode(data: bytes) -> Tuple[Image, int | None]:
        """
        Decode an encoded image into RGB pixels.

        Returns:
            (image, raw EXIF orientation tag or None when absent)

        Raises:
            DecodeError: if the bytes are not a readable image.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise DecodeError(f"expected bytes, got {type(data).__name__}")
        if len(data) == 0:
            raise DecodeError("no image data")
        try:
            with PILImage.open(BytesIO(data)) as pil_obj:
                pil_obj.load()
                tag = pil_obj.getexif().get(EXIF_ORIENTATION_TAG)
                arr = np.asarray(pil_obj.convert("RGB"))
        except (OSError, ValueError, SyntaxError) as err:
            raise DecodeError(err) from err
        return Image(pixels=arr), tag

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        """(height, width) of the image's whole-pixel extent."""
        target = img.extent.integral()
        return int(target.height), int(target.width)

    @staticmethod
    def with_geometry(img: Image, transform: AffineTransform2D, region: np.ndarray | None) -> Image:
        return dataclasses.replace(img, transform=transform, region=region)

    @staticmethod
    def with_pixels(img: Image, pixels: np.ndarray, transform: AffineTransform2D,
                    region: np.ndarray | None) -> Image:
        new_path = img.path.with_stem(img.path.stem + "_edited") if img.path else None
        return Image(pixels=pixels, transform=transform, region=region, path=new_path)
