"""Tests for orientation tags."""

from __future__ import annotations

import math

import numpy as np
import pytest

from phototransform.exceptions import InvalidOrientationError
from phototransform.models.orientation import Orientation


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0, Orientation.UPRIGHT),
        (1, Orientation.UPSIDE_DOWN),
        (2, Orientation.ROTATED_RIGHT),
        (3, Orientation.ROTATED_LEFT),
        (np.int64(2), Orientation.ROTATED_RIGHT),
        (Orientation.ROTATED_LEFT, Orientation.ROTATED_LEFT),
    ],
)
def test_from_raw_accepts_the_four_known_values(raw, expected) -> None:
    assert Orientation.from_raw(raw) is expected


@pytest.mark.parametrize("raw", [99, -1, 4, 7, True, "1", 2.0, None])
def test_from_raw_fails_closed(raw) -> None:
    with pytest.raises(InvalidOrientationError):
        Orientation.from_raw(raw)


def test_correction_angles() -> None:
    assert Orientation.UPRIGHT.correction_angle == 0.0
    assert Orientation.UPSIDE_DOWN.correction_angle == math.pi
    assert Orientation.ROTATED_RIGHT.correction_angle == math.pi / 2
    assert Orientation.ROTATED_LEFT.correction_angle == -math.pi / 2


@pytest.mark.parametrize(
    "tag, expected",
    [
        (None, Orientation.UPRIGHT),
        (1, Orientation.UPRIGHT),
        (3, Orientation.UPSIDE_DOWN),
        (6, Orientation.ROTATED_LEFT),
        (8, Orientation.ROTATED_RIGHT),
    ],
)
def test_from_exif(tag, expected) -> None:
    assert Orientation.from_exif(tag) is expected


@pytest.mark.parametrize("tag", [0, 2, 4, 5, 7, 9])
def test_from_exif_rejects_mirrored_and_unknown_tags(tag) -> None:
    with pytest.raises(InvalidOrientationError) as exc_info:
        Orientation.from_exif(tag)

    assert exc_info.value.value == tag
