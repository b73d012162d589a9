"""Height-field water surface driven by a damped discrete wave equation."""

from __future__ import annotations

import numpy as np

__all__ = ["WaveGrid"]

_UP = np.array([0.0, 0.0, 1.0], dtype=np.float32)


class WaveGrid:
    """A rectangular grid of water heights advanced with a finite-difference scheme.

    Heights are indexed ``[x, y]``, with ``x`` in ``range(width)`` and ``y`` in
    ``range(height)``. The outermost ring of cells is never updated by
    :meth:`step` and is pinned to zero after the first step.
    """

    def __init__(
        self,
        width: int = 200,
        height: int = 200,
        dx: float = 1.0,
        dt: float = 0.7,
        c: float = 1.0,
        damping: float = 0.01,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        if dx == 0:
            raise ValueError("grid spacing dx must be non-zero")
        self.width = int(width)
        self.height = int(height)
        self.dx = float(dx)
        self.dt = float(dt)
        self.c = float(c)
        self.damping = float(damping)
        shape = (self.width, self.height)
        self.current = np.zeros(shape, dtype=np.float32)
        self.previous = np.zeros(shape, dtype=np.float32)
        self._next = np.zeros(shape, dtype=np.float32)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.width, self.height)

    def reset(self) -> None:
        """Flatten the current surface; the previous state is left as it is."""
        self.current.fill(0.0)

    def _check_cell(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"cell ({x}, {y}) outside grid of size {self.width}x{self.height}"
            )

    def add_disturbance(self, x: int, y: int, value: float) -> None:
        """Set the height of one cell of the current surface."""
        self._check_cell(x, y)
        self.current[x, y] = value

    def step(self) -> None:
        """Advance the surface by one time step."""
        h = self.current
        if self.width >= 3 and self.height >= 3:
            laplacian = (
                h[2:, 1:-1]
                + h[:-2, 1:-1]
                + h[1:-1, 2:]
                + h[1:-1, :-2]
                - np.float32(4.0) * h[1:-1, 1:-1]
            )
            coefficient = np.float32(
                self.c * self.c * self.dt * self.dt / (self.dx * self.dx)
            )
            keep = np.float32(1.0 - self.damping)
            self._next[1:-1, 1:-1] = (
                keep * (np.float32(2.0) * h[1:-1, 1:-1] - self.previous[1:-1, 1:-1])
                + coefficient * laplacian
            )
        self.previous = self.current.copy()
        self.current = self._next.copy()

    def surface_normal(self, x: int, y: int) -> np.ndarray:
        """Unit normal at an interior cell, from central differences."""
        if not (1 <= x < self.width - 1 and 1 <= y < self.height - 1):
            raise IndexError(
                f"cell ({x}, {y}) is not an interior cell of a "
                f"{self.width}x{self.height} grid"
            )
        h = self.current
        span = np.float32(2.0 * self.dx)
        ddx = (h[x + 1, y] - h[x - 1, y]) / span
        ddy = (h[x, y + 1] - h[x, y - 1]) / span
        n = np.array([-ddx, -ddy, 1.0], dtype=np.float32)
        return n / np.linalg.norm(n)

    def normals(self) -> np.ndarray:
        """Normals for every cell as a ``(width, height, 3)`` array.

        Edge cells get the straight-up normal ``(0, 0, 1)``.
        """
        result = np.empty((self.width, self.height, 3), dtype=np.float32)
        result[...] = _UP
        if self.width >= 3 and self.height >= 3:
            h = self.current
            span = np.float32(2.0 * self.dx)
            ddx = (h[2:, 1:-1] - h[:-2, 1:-1]) / span
            ddy = (h[1:-1, 2:] - h[1:-1, :-2]) / span
            interior = np.stack([-ddx, -ddy, np.ones_like(ddx)], axis=-1)
            interior /= np.linalg.norm(interior, axis=-1, keepdims=True)
            result[1:-1, 1:-1] = interior
        return result