"""Skoolbot code generation for math blocks."""

__version__ = "0.1.0"
