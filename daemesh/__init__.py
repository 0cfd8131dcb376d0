"""COLLADA (.dae) geometry decoding into renderer-ready indexed meshes."""

__version__ = "0.1.0"
