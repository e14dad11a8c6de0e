"""
NSGA-II helper functions: mating and per-generation records.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from mapo.engine.algorithm.components.individual import Individual
from mapo.engine.algorithm.components.population import Population, best_single_objective
from mapo.operators.real import binary_tournament, polynomial_mutation, sbx_crossover


def make_offspring(
    parents: Population,
    n_offspring: int,
    lower: np.ndarray,
    upper: np.ndarray,
    rng: np.random.Generator,
    *,
    crossover_rate: float,
    mutation_rate: float,
    crossover_eta: float,
    mutation_eta: float,
) -> Population:
    """
    Generate ``n_offspring`` unevaluated children.

    Two binary tournaments pick the parents. With probability
    ``crossover_rate`` SBX is applied and one of its two children is kept at
    random; otherwise the first parent is copied. Polynomial mutation follows.
    """
    pool = parents.individuals
    children = Population(name="offspring")
    for _ in range(n_offspring):
        p1 = binary_tournament(pool, rng)
        p2 = binary_tournament(pool, rng)
        if rng.random() < crossover_rate:
            c1, c2 = sbx_crossover(p1.variables, p2.variables, lower, upper, rng, eta=crossover_eta)
            child = c1 if rng.random() < 0.5 else c2
        else:
            child = p1.variables.copy()
        child = polynomial_mutation(child, lower, upper, rng, mutation_rate=mutation_rate, eta=mutation_eta)
        children.add(Individual(child))
    return children


def generation_record(population: Population, n_obj: int, evaluations: int) -> dict[str, Any]:
    """
    History entry for one generation.

    Single-objective runs record the best solution; multi-objective runs record
    the size of the first front.
    """
    front_size = sum(1 for ind in population if ind.rank == 1)
    feasible = sum(1 for ind in population if ind.is_feasible())
    record: dict[str, Any] = {
        "evaluations": evaluations,
        "population_size": len(population),
        "front_size": front_size,
        "feasible_ratio": feasible / len(population) if len(population) else 0.0,
    }
    if n_obj == 1:
        best = best_single_objective(population.individuals)
        record["best_objective"] = best.objective(0)
        record["best_solution"] = best.variables.copy()
        record["best_feasible"] = best.is_feasible()
    return record


__all__ = ["make_offspring", "generation_record"]
