"""4x4 camera matrices in the usual right-handed OpenGL conventions.

Matrices are returned in mathematical row-major layout, so a point ``p`` is
transformed as ``matrix @ p``; transpose them before handing them to GL as
column-major data.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

__all__ = ["perspective", "look_at", "rotation_only"]


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Perspective projection mapping depth ``[-near, -far]`` to NDC ``[-1, 1]``.

    ``fovy`` is the vertical field of view in radians.
    """
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    if tan_half == 0:
        raise ValueError("field of view must be non-zero")
    m = np.zeros((4, 4), dtype=np.float32)
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


def look_at(
    eye: Sequence[float], center: Sequence[float], up: Sequence[float]
) -> np.ndarray:
    """View matrix placing the camera at ``eye`` looking towards ``center``."""
    eye_v = np.asarray(eye, dtype=np.float64)
    forward = np.asarray(center, dtype=np.float64) - eye_v
    length = np.linalg.norm(forward)
    if length == 0:
        raise ValueError("eye and center must differ")
    forward /= length
    side = np.cross(forward, np.asarray(up, dtype=np.float64))
    side_length = np.linalg.norm(side)
    if side_length == 0:
        raise ValueError("up vector must not be parallel to the viewing direction")
    side /= side_length
    true_up = np.cross(side, forward)

    m = np.identity(4, dtype=np.float64)
    m[0, :3] = side
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[0, 3] = -np.dot(side, eye_v)
    m[1, 3] = -np.dot(true_up, eye_v)
    m[2, 3] = np.dot(forward, eye_v)
    return m.astype(np.float32)


def rotation_only(matrix: np.ndarray) -> np.ndarray:
    """Keep the upper-left 3x3 block of a 4x4 matrix and drop translation."""
    source = np.asarray(matrix, dtype=np.float32)
    if source.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {source.shape}")
    result = np.identity(4, dtype=np.float32)
    result[:3, :3] = source[:3, :3]
    return result