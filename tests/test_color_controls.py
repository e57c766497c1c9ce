"""Tests for the colour controls filter."""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from phototransform.exceptions import FilterConstructionError
from phototransform.models.color_controls import ColorControls
from phototransform.models.image import Image


@pytest.fixture
def rgb_tensor() -> torch.Tensor:
    torch.manual_seed(0)
    return torch.rand(1, 3, 4, 5, dtype=torch.float64)


def test_neutral_controls_leave_pixels_unchanged(rgb_tensor: torch.Tensor) -> None:
    out = ColorControls().apply_to_tensor(rgb_tensor)

    assert torch.allclose(out, rgb_tensor)


def test_zero_saturation_yields_grey(rgb_tensor: torch.Tensor) -> None:
    out = ColorControls(saturation=0.0).apply_to_tensor(rgb_tensor)

    assert torch.allclose(out[:, 0], out[:, 1])
    assert torch.allclose(out[:, 1], out[:, 2])


def test_brightness_is_additive(rgb_tensor: torch.Tensor) -> None:
    out = ColorControls(brightness=0.1).apply_to_tensor(rgb_tensor)

    assert torch.allclose(out, rgb_tensor + 0.1)


def test_contrast_scales_around_mid_grey(rgb_tensor: torch.Tensor) -> None:
    out = ColorControls(contrast=2.0).apply_to_tensor(rgb_tensor)

    assert torch.allclose(out, (rgb_tensor - 0.5) * 2.0 + 0.5)


def test_values_are_not_clamped_by_the_filter(rgb_tensor: torch.Tensor) -> None:
    out = ColorControls(brightness=5.0).apply_to_tensor(rgb_tensor)

    assert out.min().item() > 1.0


def test_alpha_channel_passes_through() -> None:
    x = torch.full((1, 4, 2, 2), 0.5, dtype=torch.float64)

    out = ColorControls(brightness=0.25).apply_to_tensor(x)

    assert torch.allclose(out[:, :3], torch.full((1, 3, 2, 2), 0.75, dtype=torch.float64))
    assert torch.allclose(out[:, 3], x[:, 3])


def test_single_channel_skips_saturation() -> None:
    x = torch.full((1, 1, 2, 2), 0.4, dtype=torch.float64)

    out = ColorControls(saturation=0.0, brightness=0.1).apply_to_tensor(x)

    assert torch.allclose(out, x + 0.1)


@pytest.mark.parametrize("bad", ["1.0", None, True, math.nan, math.inf, [1.0]])
def test_invalid_parameters_fail_construction(bad) -> None:
    with pytest.raises(FilterConstructionError):
        ColorControls(saturation=bad)


def test_numpy_scalars_are_accepted() -> None:
    controls = ColorControls(saturation=np.float32(0.5), contrast=np.int64(2), brightness=0)

    assert controls.saturation == 0.5
    assert isinstance(controls.contrast, float)


# ── Through the engine ───────────────────────────────────────────────
def test_engine_neutral_adjustment_preserves_pixels(engine, portrait: Image) -> None:
    out = engine.apply_color_adjustment(portrait, saturation=1.0, contrast=1.0, brightness=0.0)

    assert out is not portrait
    assert out.extent == portrait.extent
    np.testing.assert_array_equal(engine.render(out), portrait.pixels)


def test_engine_greyscale_adjustment(engine, portrait: Image) -> None:
    out = engine.render(engine.apply_color_adjustment(portrait, 0.0, 1.0, 0.0))

    np.testing.assert_array_equal(out[:, :, 0], out[:, :, 1])
    np.testing.assert_array_equal(out[:, :, 1], out[:, :, 2])


def test_engine_output_is_clamped_on_quantisation(engine, portrait: Image) -> None:
    out = engine.render(engine.apply_color_adjustment(portrait, 1.0, 1.0, 2.0))

    assert (out == 255).all()


def test_engine_adjustment_keeps_extent_of_transformed_image(engine, portrait: Image) -> None:
    rotated = engine.rotate(engine.translate(portrait, 3.25, -1.5), 0.3)

    out = engine.apply_color_adjustment(rotated, 1.2, 0.9, 0.05)

    assert out.extent.as_tuple() == pytest.approx(rotated.extent.as_tuple(), abs=1e-9)
    assert engine.render(out).shape == engine.render(rotated).shape


def test_engine_rejects_bad_parameters(engine, portrait: Image) -> None:
    with pytest.raises(FilterConstructionError):
        engine.apply_color_adjustment(portrait, math.nan, 1.0, 0.0)


def test_edited_image_gets_new_path(engine, gradient_pixels, tmp_path) -> None:
    img = Image(gradient_pixels, path=tmp_path / "capture.jpg")

    out = engine.apply_color_adjustment(img, 0.5, 1.0, 0.0)

    assert out.path == tmp_path / "capture_edited.jpg"
