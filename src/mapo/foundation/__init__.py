"""Core foundations: errors, logging, registry, problem and evaluation contracts."""
