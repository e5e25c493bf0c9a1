"""Scoped query and pagination engine."""

__version__ = "0.1.0"
