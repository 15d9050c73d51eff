"""Thin HTTP gateway over a hosted ``profiles`` table."""

__version__ = "0.1.0"
