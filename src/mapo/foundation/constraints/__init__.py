from .utils import total_violation

__all__ = ["total_violation"]
