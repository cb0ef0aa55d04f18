"""Persistence and keep-alive layer for a collaborative text editor."""

__version__ = "0.1.0"
