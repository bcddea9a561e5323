"""Utility helpers shared across sqlcompose."""
