"""Optimization engine: strategies, shared components and config loading."""
