"""Hiring pipeline tracker with a stage workflow engine and optimistic board."""

__version__ = "0.1.0"
