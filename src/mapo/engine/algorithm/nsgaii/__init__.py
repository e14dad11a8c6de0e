from .nsgaii import NSGAII

__all__ = ["NSGAII"]
