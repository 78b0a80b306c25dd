"""Convert Dash/Kapeli and Apple docsets into markdown trees."""

__version__ = "1.0.0"
