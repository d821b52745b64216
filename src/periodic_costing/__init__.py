"""Periodic inventory consumption and costing engine."""

__version__ = "0.1.0"
