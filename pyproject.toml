[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vcxengine"
version = "0.1.0"
description = "Textures, meshes, cameras and scenes for small 3D rendering projects, with OBJ and YAML scene loading"
requires-python = ">=3.10"
keywords = ["3d", "rendering", "mesh", "obj", "scene", "texture", "camera", "yaml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pyyaml",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vcxengine"]

[tool.pytest.ini_options]
addopts = "-ra"
