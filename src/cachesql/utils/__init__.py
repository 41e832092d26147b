"""Utility helpers for cachesql."""
