"""Bluebikes station traffic map."""

__version__ = "1.0.0"
