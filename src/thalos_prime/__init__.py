"""Thalos Prime: task intake and execution core."""

__version__ = "1.0.0"
