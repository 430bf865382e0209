"""Flavor list synchronization with a remote store."""

__version__ = "1.0.0"
