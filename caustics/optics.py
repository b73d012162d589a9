"""Refraction and a small recursive ray tracer over a water height field."""

from __future__ import annotations

import math
import sys
from typing import Sequence, TextIO

import numpy as np

from caustics.simulation import WaveGrid

__all__ = [
    "WATER_IOR",
    "AIR_IOR",
    "MAX_DEPTH",
    "Ray",
    "refract",
    "trace_ray",
    "render_scene",
]

WATER_IOR = 1.33
AIR_IOR = 1.0
MAX_DEPTH = 5

_CAMERA = np.array([0.0, 0.0, -10.0], dtype=np.float32)
_FOV_DEGREES = 60.0
_MIN_REFRACTION = 0.001


def _black() -> np.ndarray:
    return np.zeros(3, dtype=np.float32)


class Ray:
    """A half-line with an origin and a unit direction."""

    __slots__ = ("origin", "direction")

    def __init__(self, origin: Sequence[float], direction: Sequence[float]) -> None:
        self.origin = np.asarray(origin, dtype=np.float32).reshape(3).copy()
        d = np.asarray(direction, dtype=np.float32).reshape(3)
        length = float(np.linalg.norm(d))
        if length == 0.0:
            raise ValueError("ray direction must be non-zero")
        self.direction = (d / np.float32(length)).astype(np.float32)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"


def refract(
    incident: Sequence[float], normal: Sequence[float], ior: float
) -> np.ndarray:
    """Refract ``incident`` through a surface with ``normal`` between air and ``ior``.

    The side is chosen from the sign of the incidence cosine. On total internal
    reflection the zero vector is returned.
    """
    i = np.asarray(incident, dtype=np.float32).reshape(3)
    n = np.asarray(normal, dtype=np.float32).reshape(3)
    cosi = -float(np.dot(i, n))
    eta_i, eta_t = 1.0, float(ior)
    if cosi < 0:
        cosi = -cosi
        eta_i, eta_t = eta_t, eta_i
        n = -n
    eta = eta_i / eta_t
    k = 1.0 - eta * eta * (1.0 - cosi * cosi)
    if k < 0:
        return _black()
    return (i * np.float32(eta) + n * np.float32(eta * cosi - math.sqrt(k))).astype(
        np.float32
    )


def trace_ray(grid: WaveGrid, ray: Ray, depth: int = 0) -> np.ndarray:
    """Colour seen along ``ray`` after hitting the water plane ``z = 0``."""
    if depth > MAX_DEPTH:
        return _black()
    dz = float(ray.direction[2])
    if dz == 0.0:
        return _black()
    t = -float(ray.origin[2]) / dz
    if t < 0:
        return _black()
    hit = ray.origin + ray.direction * np.float32(t)
    x, y = int(hit[0]), int(hit[1])
    if not (1 <= x < grid.width - 1 and 1 <= y < grid.height - 1):
        return _black()
    normal = grid.surface_normal(x, y)
    refracted = refract(ray.direction, normal, WATER_IOR)
    if float(np.linalg.norm(refracted)) < _MIN_REFRACTION:
        return _black()
    refracted_colour = trace_ray(grid, Ray(hit, refracted), depth + 1)
    intensity = np.float32(
        (1.0 - abs(float(np.dot(normal, ray.direction)))) ** 4
    )
    return (refracted_colour * (np.float32(1.0) - intensity) + intensity).astype(
        np.float32
    )


def render_scene(grid: WaveGrid, out: TextIO | None = None) -> np.ndarray:
    """Trace one ray per grid cell and write the colours as text.

    Each image row becomes one line of ``r g b`` triples. The image is also
    returned as a ``(height, width, 3)`` array.
    """
    stream = sys.stdout if out is None else out
    image_width, image_height = grid.width, grid.height
    aspect = image_width / image_height
    half_span = math.tan(math.radians(_FOV_DEGREES * 0.5))
    image = np.zeros((image_height, image_width, 3), dtype=np.float32)
    for y in range(image_height):
        py = (1.0 - 2.0 * ((y + 0.5) / image_height)) * half_span
        cells = []
        for x in range(image_width):
            px = (2.0 * ((x + 0.5) / image_width) - 1.0) * aspect * half_span
            colour = trace_ray(grid, Ray(_CAMERA, (px, py, 1.0)))
            image[y, x] = colour
            cells.append(" ".join(f"{float(v):g}" for v in colour) + " ")
        stream.write("".join(cells) + "\n")
    return image