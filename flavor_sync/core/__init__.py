"""Core utilities and shared application primitives.

Modules in this package should be framework-agnostic where possible and
focused on configuration, validation, the flavor model and small reusable
helpers. ``middleware`` is the one FastAPI-aware module.
"""
