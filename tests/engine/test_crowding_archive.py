import numpy as np
import pytest

from mapo.engine.algorithm.components.archive import CrowdingDistanceArchive


def _mutually_non_dominated(members):
    return not any(a.dominates(b) for a in members for b in members if a is not b)


def test_archive_keeps_only_non_dominated(make_individual):
    archive = CrowdingDistanceArchive(capacity=10)
    archive.update([make_individual([1.0, 3.0]), make_individual([2.0, 2.0]), make_individual([3.0, 3.0])])

    assert len(archive) == 2
    assert _mutually_non_dominated(list(archive))

    archive.update([make_individual([0.5, 0.5])])
    assert len(archive) == 1
    assert list(archive)[0].objectives.tolist() == [0.5, 0.5]


def test_archive_truncates_lowest_crowding_first(make_individual):
    archive = CrowdingDistanceArchive(capacity=3)
    points = [(0.0, 1.0), (0.45, 0.55), (0.5, 0.5), (0.55, 0.45), (1.0, 0.0)]
    archive.update([make_individual(p) for p in points])

    kept = sorted(tuple(ind.objectives) for ind in archive)
    assert len(kept) == 3
    assert (0.0, 1.0) in kept and (1.0, 0.0) in kept


def test_archive_ignores_unevaluated_and_stores_copies(make_individual):
    from mapo.engine.algorithm.components.individual import Individual

    source = make_individual([1.0, 1.0])
    archive = CrowdingDistanceArchive(capacity=4)
    archive.update([source, Individual([0.0, 0.0])])

    assert len(archive) == 1
    source.user_data["touched"] = True
    assert "touched" not in list(archive)[0].user_data


def test_archive_sampling(rng, make_individual):
    archive = CrowdingDistanceArchive(capacity=5)
    with pytest.raises(ValueError):
        archive.sample(rng)
    archive.update([make_individual([float(i), float(4 - i)]) for i in range(5)])
    picks = {tuple(archive.sample(rng).objectives) for _ in range(200)}
    assert len(picks) == 5
    archive.clear()
    assert len(archive) == 0


def test_archive_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        CrowdingDistanceArchive(0)


def test_archive_bounded_under_random_updates(rng, make_individual):
    archive = CrowdingDistanceArchive(capacity=8)
    for _ in range(20):
        batch = []
        for _ in range(10):
            f1 = rng.random()
            batch.append(make_individual([f1, 1.0 - f1 + 0.01 * rng.random()]))
        archive.update(batch)
        assert len(archive) <= 8
        assert _mutually_non_dominated(list(archive))
    assert np.isfinite([ind.objective(0) for ind in archive]).all()
