"""
Convex polygon helpers used to track crop regions in pixel-grid space.
Polygons are (N, 2) float64 arrays; OpenCV does the geometry in float32.
"""
from __future__ import annotations
import cv2
import numpy as np

_EPS = 1e-9
# float32 round-off tolerance when mapping OpenCV vertices back onto inputs
_SNAP_TOL = 1e-4


def _as_cv(polygon: np.ndarray) -> np.ndarray:
    return np.asarray(polygon, dtype=np.float32).reshape(-1, 1, 2)


def signed_area(polygon: np.ndarray) -> float:
    """Shoelace area; positive for counter-clockwise vertex order."""
    pts = np.asarray(polygon, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return 0.0
    return float(cv2.contourArea(_as_cv(pts), oriented=True))


def _ccw(polygon: np.ndarray) -> np.ndarray:
    pts = np.asarray(polygon, dtype=np.float64).reshape(-1, 2)
    return pts[::-1].copy() if signed_area(pts) < 0 else pts


def intersect_convex(subject: np.ndarray, clip: np.ndarray) -> np.ndarray:
    """
    Intersection of two convex polygons via cv2.intersectConvexConvex.

    Returns the intersection polygon, or an empty (0, 2) array when the two do
    not overlap with positive area. Vertices that coincide with an input
    vertex are returned at full float64 precision.
    """
    subject, clip = _ccw(subject), _ccw(clip)
    area, result = cv2.intersectConvexConvex(_as_cv(subject), _as_cv(clip), handleNested=True)
    if result is None or len(result) < 3 or abs(area) <= _EPS:
        return np.empty((0, 2), dtype=np.float64)

    result = result.reshape(-1, 2).astype(np.float64)
    originals = np.concatenate([subject, clip])
    dist = np.abs(result[:, np.newaxis, :] - originals[np.newaxis, :, :]).max(axis=2)
    nearest = dist.argmin(axis=1)
    snap = dist[np.arange(len(result)), nearest] <= _SNAP_TOL
    result[snap] = originals[nearest[snap]]
    return result


def fill_mask(polygon: np.ndarray, width: int, height: int, shift: int = 8) -> np.ndarray:
    """
    Boolean (height, width) mask of the pixels covered by a convex polygon
    given in array coordinates (pixel centres at integers).
    """
    mask = np.zeros((height, width), dtype=np.uint8)
    pts = np.round(np.asarray(polygon, dtype=np.float64).reshape(-1, 2) * (1 << shift))
    cv2.fillConvexPoly(mask, pts.astype(np.int32), 1, lineType=cv2.LINE_8, shift=shift)
    return mask.astype(bool)
