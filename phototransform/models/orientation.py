from __future__ import annotations
from enum import IntEnum
import math
import numbers

from ..exceptions import InvalidOrientationError


class Orientation(IntEnum):
    """
    How a capture's stored pixels sit relative to upright.
    Only the four unmirrored cases are recognised; anything else fails closed.
    """
    UPRIGHT = 0
    UPSIDE_DOWN = 1
    ROTATED_RIGHT = 2
    ROTATED_LEFT = 3

    @classmethod
    def from_raw(cls, value) -> Orientation:
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidOrientationError(value)
        try:
            return cls(int(value))
        except ValueError:
            raise InvalidOrientationError(value) from None

    @classmethod
    def from_exif(cls, tag: int | None) -> Orientation:
        """Map an EXIF Orientation (tag 274) value; a missing tag means upright."""
        if tag is None:
            return cls.UPRIGHT
        if tag not in _EXIF_TO_ORIENTATION:
            raise InvalidOrientationError(tag)
        return _EXIF_TO_ORIENTATION[tag]

    @property
    def correction_angle(self) -> float:
        """Counter-clockwise angle (radians) that brings the pixels upright."""
        return _CORRECTION_ANGLES[self]


_CORRECTION_ANGLES = {
    Orientation.UPRIGHT: 0.0,
    Orientation.UPSIDE_DOWN: math.pi,
    Orientation.ROTATED_RIGHT: math.pi / 2,
    Orientation.ROTATED_LEFT: -math.pi / 2,
}

# Mirrored EXIF variants (2, 4, 5, 7) have no entry.
_EXIF_TO_ORIENTATION = {
    1: Orientation.UPRIGHT,
    3: Orientation.UPSIDE_DOWN,
    6: Orientation.ROTATED_LEFT,
    8: Orientation.ROTATED_RIGHT,
}
