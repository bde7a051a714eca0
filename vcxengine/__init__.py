"""Textures, meshes, cameras, scenes and OBJ/YAML loading for 3D rendering."""

__version__ = "0.1.0"