"""Utility helpers for usefulreadme."""
