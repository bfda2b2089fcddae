"""Typed transformation of loosely-typed JSON values into destination columns."""

__version__ = "0.1.0"
