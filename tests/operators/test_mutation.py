from __future__ import annotations

import numpy as np
import pytest

from mapo.operators.real import gaussian_mutation, polynomial_mutation, uniform_mutation


def test_polynomial_mutation_respects_bounds(rng):
    lower = np.array([-1.0, 0.0, 10.0])
    upper = np.array([1.0, 5.0, 11.0])
    for _ in range(500):
        x = lower + rng.random(3) * (upper - lower)
        y = polynomial_mutation(x, lower, upper, rng, mutation_rate=3.0, eta=5.0)
        assert np.all((y >= lower) & (y <= upper))


def test_polynomial_mutation_handles_values_on_the_bounds(rng):
    for _ in range(100):
        y = polynomial_mutation([0.0, 1.0], 0.0, 1.0, rng, mutation_rate=2.0)
        assert np.all((y >= 0.0) & (y <= 1.0))


def test_polynomial_mutation_expected_one_change_per_vector(rng):
    n_var = 10
    x = np.full(n_var, 0.5)
    changed = [np.count_nonzero(polynomial_mutation(x, 0.0, 1.0, rng) != x) for _ in range(2000)]
    assert 0.8 < np.mean(changed) < 1.2


def test_polynomial_mutation_zero_rate_is_identity(rng):
    x = np.array([0.1, 0.2, 0.3])
    np.testing.assert_array_equal(polynomial_mutation(x, 0.0, 1.0, rng, mutation_rate=0.0), x)


def test_polynomial_mutation_skips_fixed_variables(rng):
    for _ in range(50):
        y = polynomial_mutation([2.0, 0.5], [2.0, 0.0], [2.0, 1.0], rng, mutation_rate=2.0)
        assert y[0] == 2.0


def test_polynomial_mutation_does_not_modify_input(rng):
    x = np.array([0.5, 0.5])
    polynomial_mutation(x, 0.0, 1.0, rng, mutation_rate=2.0)
    np.testing.assert_array_equal(x, [0.5, 0.5])


def test_polynomial_mutation_rejects_bad_inputs(rng):
    with pytest.raises(ValueError):
        polynomial_mutation([0.5], 0.0, 1.0, rng, eta=0.0)
    with pytest.raises(ValueError):
        polynomial_mutation([0.5, 0.5], [0.0, 0.0, 0.0], 1.0, rng)
    with pytest.raises(ValueError):
        polynomial_mutation([np.nan], 0.0, 1.0, rng)


def test_uniform_mutation_full_rate_redraws_within_bounds(rng):
    x = np.full(30, 5.0)
    y = uniform_mutation(x, 0.0, 1.0, rng, mutation_rate=1.0)
    assert np.all((y >= 0.0) & (y <= 1.0))
    np.testing.assert_array_equal(uniform_mutation(x, 0.0, 10.0, rng, mutation_rate=0.0), x)


def test_gaussian_mutation_is_clipped(rng):
    for _ in range(100):
        y = gaussian_mutation([0.99, 0.01], 0.0, 1.0, rng, mutation_rate=1.0, sigma=1.0)
        assert np.all((y >= 0.0) & (y <= 1.0))
