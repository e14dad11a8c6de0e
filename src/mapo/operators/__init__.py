"""Variation and selection operators."""
