"""Utility helpers for KWSK Controller API."""
