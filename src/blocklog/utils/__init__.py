"""Utility helpers for blocklog."""
