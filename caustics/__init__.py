"""Water wave simulation, meshes, ray tracing and a real-time caustics window."""

__version__ = "1.0.0"
__all__ = ["simulation", "transforms", "optics", "mesh", "app"]