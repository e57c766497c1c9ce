from __future__ import annotations
from dataclasses import dataclass
import math
import numpy as np

# Trig terms smaller than this are treated as exact zeros so quarter turns stay lossless.
_TRIG_EPS = 1e-12


@dataclass(frozen=True)
class AffineTransform2D:
    """
    2×3 affine matrix stored as six scalars:
        x' = a·x + c·y + tx
        y' = b·x + d·y + ty
    World space is y-up, so a positive rotation angle is counter-clockwise.
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    # ── Constructors ─────────────────────────────────────────────────
    @classmethod
    def identity(cls) -> AffineTransform2D:
        return cls()

    @classmethod
    def rotation(cls, angle: float) -> AffineTransform2D:
        cos, sin = math.cos(angle), math.sin(angle)
        cos = 0.0 if abs(cos) < _TRIG_EPS else cos
        sin = 0.0 if abs(sin) < _TRIG_EPS else sin
        return cls(a=cos, b=sin, c=-sin, d=cos)

    @classmethod
    def translation(cls, dx: float, dy: float) -> AffineTransform2D:
        return cls(tx=float(dx), ty=float(dy))

    @classmethod
    def scale(cls, sx: float, sy: float) -> AffineTransform2D:
        return cls(a=float(sx), d=float(sy))

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> AffineTransform2D:
        """Build from a 2×3 or 3×3 matrix in [[a, c, tx], [b, d, ty]] layout."""
        m = np.asarray(matrix, dtype=np.float64)
        return cls(a=m[0, 0], b=m[1, 0], c=m[0, 1], d=m[1, 1], tx=m[0, 2], ty=m[1, 2])

    # ── Algebra ──────────────────────────────────────────────────────
    def as_matrix(self) -> np.ndarray:
        return np.array([[self.a, self.c, self.tx],
                         [self.b, self.d, self.ty],
                         [0.0, 0.0, 1.0]], dtype=np.float64)

    def then(self, other: AffineTransform2D) -> AffineTransform2D:
        """Return the transform that applies `self` first and `other` second."""
        return AffineTransform2D.from_matrix(other.as_matrix() @ self.as_matrix())

    @property
    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.a, self.b, self.c, self.d, self.tx, self.ty))

    def is_identity(self) -> bool:
        return self == AffineTransform2D()

    def inverted(self) -> AffineTransform2D:
        det = self.determinant
        if det == 0 or not math.isfinite(det):
            raise ValueError(f"Affine transform is not invertible (determinant={det})")
        return AffineTransform2D.from_matrix(np.linalg.inv(self.as_matrix()))

    def apply_to_points(self, points: np.ndarray) -> np.ndarray:
        """Map an (N, 2) array of points; returns a new (N, 2) float array."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        m = self.as_matrix()
        return pts @ m[:2, :2].T + m[:2, 2]
