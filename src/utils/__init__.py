"""Formatting and console rendering helpers."""
