[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "caustics"
version = "1.0.0"
description = "Interactive water surface simulation with real-time caustics rendered through OpenGL"
requires-python = ">=3.10"
keywords = ["caustics", "water", "wave equation", "opengl", "simulation", "rendering", "ray tracing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Environment :: MacOS X",
    "Environment :: Win32 (MS Windows)",
    "Intended Audience :: Science/Research",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "numpy",
    "pyglet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
caustics = "caustics.app:main"

[tool.hatch.build.targets.wheel]
packages = ["caustics"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
