"""Duo-Vision Recomposer: crop, blend and re-mux side-by-side dual-stream video."""

__version__ = "1.0.0"
