"""Fuzzy search over the free-programming-books catalog."""

__version__ = "1.0.0"
