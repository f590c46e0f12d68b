"""Chicken Road admin console core."""

__version__ = "0.1.0"
