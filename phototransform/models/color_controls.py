from __future__ import annotations
from dataclasses import dataclass
import math
import numbers
import torch

from ..exceptions import FilterConstructionError

# Rec.709 luma weights.
_LUMA = (0.2126, 0.7152, 0.0722)


@dataclass(frozen=True)
class ColorControls:
    """
    Value-object holding saturation/contrast/brightness in the usual
    colour-controls units:
        saturation  1.0 = unchanged, 0.0 = greyscale
        contrast    1.0 = unchanged, scales around mid-grey
        brightness  0.0 = unchanged, added to every channel
    Any finite value is accepted; nothing is clamped until quantisation.
    """
    saturation: float = 1.0
    contrast: float = 1.0
    brightness: float = 0.0

    def __post_init__(self):
        for name in ("saturation", "contrast", "brightness"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise FilterConstructionError("color controls", f"{name} must be a real number, got {value!r}")
            if not math.isfinite(value):
                raise FilterConstructionError("color controls", f"{name} must be finite, got {value!r}")
            object.__setattr__(self, name, float(value))

    def is_identity(self) -> bool:
        return (self.saturation, self.contrast, self.brightness) == (1.0, 1.0, 0.0)

    # ── Core math ────────────────────────────────────────────────────
    def apply_to_tensor(self, x: torch.Tensor) -> torch.Tensor:
        """
        Apply to a (N, C, H, W) tensor with values in [0, 1].
        With three or more channels the first three are treated as RGB and any
        extra (alpha) channels pass through untouched; fewer channels are luma.
        """
        if x.shape[1] >= 3:
            rgb, rest = x[:, :3], x[:, 3:]
            weights = torch.tensor(_LUMA, dtype=x.dtype, device=x.device).view(1, 3, 1, 1)
            luma = (rgb * weights).sum(dim=1, keepdim=True)
            rgb = luma + self.saturation * (rgb - luma)
        else:
            rgb, rest = x, x[:, :0]

        rgb = rgb + self.brightness
        rgb = (rgb - 0.5) * self.contrast + 0.5
        return torch.cat([rgb, rest], dim=1)
