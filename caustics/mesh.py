"""Vertex and index data for the water surface, pool bottom and sky box."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from caustics.simulation import WaveGrid

__all__ = [
    "WATER_SCALE",
    "BOTTOM_Z",
    "Mesh",
    "water_mesh",
    "water_indices",
    "bottom_mesh",
    "skybox_vertices",
]

WATER_SCALE = 2.0
BOTTOM_Z = -30.0

_QUAD_INDICES = (0, 1, 2, 2, 3, 0)

_SKYBOX = (
    (-1.0, 1.0, -1.0), (-1.0, -1.0, -1.0), (1.0, -1.0, -1.0),
    (1.0, -1.0, -1.0), (1.0, 1.0, -1.0), (-1.0, 1.0, -1.0),

    (-1.0, -1.0, 1.0), (-1.0, -1.0, -1.0), (-1.0, 1.0, -1.0),
    (-1.0, 1.0, -1.0), (-1.0, 1.0, 1.0), (-1.0, -1.0, 1.0),

    (1.0, -1.0, -1.0), (1.0, -1.0, 1.0), (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0), (1.0, 1.0, -1.0), (1.0, -1.0, -1.0),

    (-1.0, -1.0, 1.0), (-1.0, 1.0, 1.0), (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0), (1.0, -1.0, 1.0), (-1.0, -1.0, 1.0),

    (-1.0, 1.0, -1.0), (1.0, 1.0, -1.0), (1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0), (-1.0, 1.0, 1.0), (-1.0, 1.0, -1.0),

    (-1.0, -1.0, -1.0), (-1.0, -1.0, 1.0), (1.0, -1.0, -1.0),
    (1.0, -1.0, -1.0), (1.0, -1.0, 1.0), (-1.0, -1.0, 1.0),
)


@dataclass(frozen=True)
class Mesh:
    """Interleaved ``(x, y, z, nx, ny, nz)`` vertices and triangle indices."""

    vertices: np.ndarray
    indices: np.ndarray

    def __post_init__(self) -> None:
        vertices = np.asarray(self.vertices, dtype=np.float32)
        indices = np.asarray(self.indices, dtype=np.uint32).reshape(-1)
        if vertices.ndim != 2 or vertices.shape[1] != 6:
            raise ValueError(f"vertices must have shape (n, 6), got {vertices.shape}")
        if indices.size % 3:
            raise ValueError("index count must be a multiple of three")
        if indices.size and int(indices.max()) >= len(vertices):
            raise ValueError("index refers past the last vertex")
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "indices", indices)

    @property
    def positions(self) -> np.ndarray:
        return self.vertices[:, :3]

    @property
    def normals(self) -> np.ndarray:
        return self.vertices[:, 3:]

    @property
    def triangle_count(self) -> int:
        return self.indices.size // 3


def water_indices(width: int, height: int) -> np.ndarray:
    """Two triangles per grid quad, vertices numbered ``i * height + j``."""
    if width < 1 or height < 1:
        raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
    i, j = np.meshgrid(
        np.arange(width - 1, dtype=np.uint32),
        np.arange(height - 1, dtype=np.uint32),
        indexing="ij",
    )
    top_left = i * np.uint32(height) + j
    top_right = top_left + np.uint32(1)
    bottom_left = (i + np.uint32(1)) * np.uint32(height) + j
    bottom_right = bottom_left + np.uint32(1)
    quads = np.stack(
        [top_left, bottom_left, top_right, top_right, bottom_left, bottom_right],
        axis=-1,
    )
    return quads.reshape(-1).astype(np.uint32)


def water_mesh(grid: WaveGrid, scale: float = WATER_SCALE) -> Mesh:
    """Mesh of the current water surface centred on the origin."""
    i, j = np.meshgrid(
        np.arange(grid.width, dtype=np.float32),
        np.arange(grid.height, dtype=np.float32),
        indexing="ij",
    )
    vertices = np.empty((grid.width, grid.height, 6), dtype=np.float32)
    vertices[..., 0] = (i - np.float32(grid.width / 2.0)) * np.float32(scale)
    vertices[..., 1] = (j - np.float32(grid.height / 2.0)) * np.float32(scale)
    vertices[..., 2] = grid.current
    vertices[..., 3:] = grid.normals()
    return Mesh(vertices.reshape(-1, 6), water_indices(grid.width, grid.height))


def bottom_mesh(
    width: int, height: int, scale: float = WATER_SCALE, bottom_z: float = BOTTOM_Z
) -> Mesh:
    """A flat upward-facing quad under the water surface."""
    half_w = (width / 2.0) * scale
    half_h = (height / 2.0) * scale
    vertices = np.array(
        [
            (-half_w, -half_h, bottom_z, 0.0, 0.0, 1.0),
            (half_w, -half_h, bottom_z, 0.0, 0.0, 1.0),
            (half_w, half_h, bottom_z, 0.0, 0.0, 1.0),
            (-half_w, half_h, bottom_z, 0.0, 0.0, 1.0),
        ],
        dtype=np.float32,
    )
    return Mesh(vertices, np.array(_QUAD_INDICES, dtype=np.uint32))


def skybox_vertices() -> np.ndarray:
    """The 36 positions of a unit cube drawn as twelve triangles."""
    return np.array(_SKYBOX, dtype=np.float32)