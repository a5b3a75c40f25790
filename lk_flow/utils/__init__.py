"""Spatial derivative and image conversion utilities."""
