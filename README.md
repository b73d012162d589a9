# caustics

An interactive demo of light caustics on the floor of a pool. A
two-dimensional damped wave equation drives a water surface on a 200 × 200
grid. Every frame the surface is stepped forward, turned into a mesh with
per-vertex normals, and drawn into an off-screen caustics texture; that
texture lights a tiled, blue pool bottom seen through the semi-transparent
water, with a gradient sky behind it.

## Installing

```
pip install .
```

This pulls in `numpy` and `pyglet`. Opening the window needs an OpenGL 3.3
core profile context.

## Running

```
caustics
```

The command takes no options apart from `--help`. A window titled
"Water Caustics" (800 × 600) opens with three ripples already spreading
across the surface.

- Left-click to set the water height at that spot to 5.0.
- Press Escape, or close the window, to quit.

If a shader fails to compile or link, the command prints the error to
standard error and exits with status 1.

## Using the pieces

The simulation, geometry and ray tracer work without a window:

```python
from caustics.simulation import WaveGrid
from caustics.mesh import water_mesh, bottom_mesh, skybox_vertices
from caustics.optics import Ray, refract, trace_ray

grid = WaveGrid(200, 200, dx=1.0, dt=0.7, c=1.0, damping=0.01)
grid.add_disturbance(50, 50, 2.0)
for _ in range(10):
    grid.step()

normal = grid.surface_normal(50, 51)   # unit normal at an interior cell
all_normals = grid.normals()           # shape (200, 200, 3)
surface = water_mesh(grid, 2.0)        # Mesh with interleaved positions and normals
floor = bottom_mesh(200, 200, 2.0, -30.0)
cube = skybox_vertices()               # 36 positions, twelve triangles
```

- `caustics.simulation.WaveGrid` holds the heights, indexed `[x, y]`.
  `step()` updates the interior cells; the outer ring stays at zero.
  `add_disturbance` raises `IndexError` for a cell outside the grid,
  `surface_normal` for a cell that is not interior. `reset()` flattens the
  current surface.
- `caustics.mesh.Mesh` keeps `vertices` of shape `(n, 6)` and `uint32`
  `indices`, with `positions`, `normals` and `triangle_count`;
  `water_indices(width, height)` gives the two triangles per grid quad.
- `caustics.transforms` provides `perspective`, `look_at` and
  `rotation_only`, returning 4 × 4 `float32` matrices in row-major layout
  (transpose them before giving them to OpenGL).
- `caustics.optics` has `refract` (returns the zero vector on total internal
  reflection), `Ray`, `trace_ray(grid, ray, depth=0)` and
  `render_scene(grid, out=None)`. `render_scene` traces one ray per grid cell
  from a camera at `(0, 0, -10)`, writes each image row as a line of `r g b`
  triples to `out` (standard output by default) and returns the image as a
  `(height, width, 3)` array.
- `caustics.app` holds the window (`CausticsWindow`), `screen_to_grid`,
  `seed_grid`, `compile_program` and the `main` entry point.

## What it does not do

There is no way to change the grid size, camera or simulation parameters
from the command line, and the window cannot save images or recordings.
The caustics texture is a stylised effect computed from how far each surface
normal tilts, not from tracing light through the water.

## Tests

```
pip install .[test]
pytest
```