from .types import Problem, ProblemProtocol, resolve_bounds, validate_problem

__all__ = ["Problem", "ProblemProtocol", "resolve_bounds", "validate_problem"]
