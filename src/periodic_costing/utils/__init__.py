"""Utility helpers: configuration, constants and datetime handling."""
