"""Tests for the annealing optimizer."""

import random

import pytest

from carrier_engine import (
    AnnealingConfig,
    AnnealingOptimizer,
    Gender,
    OptimizerState,
    Pedigree,
)


def build_family() -> Pedigree:
    """cf founders from the general population with two unaffected children."""
    pedigree = Pedigree(condition='cf')
    for gender in (Gender.MALE, Gender.FEMALE, Gender.MALE, Gender.FEMALE):
        pedigree.add_individual(gender)
    for child in (3, 4):
        pedigree.add_parent_child(1, child)
        pedigree.add_parent_child(2, child)
    pedigree.set_population(1, 'general')
    pedigree.set_population(2, 'general')
    pedigree.update_all_probabilities()
    return pedigree


def build_hypothetical_founder() -> Pedigree:
    """A lone hypothetical founder: every proposal leaves the likelihood at zero."""
    pedigree = Pedigree()
    founder = pedigree.add_individual(Gender.FEMALE)
    founder.hypothetical = True
    return pedigree


class TestRun:
    """Tests for running the optimizer to completion."""

    def test_best_never_worse_than_start(self) -> None:
        pedigree = build_family()
        initial = pedigree.calculate_negative_log_likelihood()
        optimizer = AnnealingOptimizer(pedigree, rng=random.Random(1))
        best = optimizer.run(max_iterations=300)
        assert best <= initial
        assert optimizer.iterations == 300
        assert optimizer.state == OptimizerState.STOPPED

    def test_seeded_runs_are_reproducible(self) -> None:
        first = build_family()
        second = build_family()
        AnnealingOptimizer(first, rng=random.Random(7)).run(max_iterations=200)
        AnnealingOptimizer(second, rng=random.Random(7)).run(max_iterations=200)
        for iid in first.members:
            assert first.get_member(iid).probabilities == pytest.approx(
                second.get_member(iid).probabilities
            )

    def test_vectors_stay_normalized(self) -> None:
        pedigree = build_family()
        AnnealingOptimizer(pedigree, rng=random.Random(3)).run(max_iterations=200)
        for ind in pedigree.individuals:
            assert sum(ind.probabilities) == pytest.approx(1.0)
            assert min(ind.probabilities) >= 0.0

    def test_affected_members_untouched(self, trio: Pedigree) -> None:
        trio.set_affected(3)
        trio.update_all_probabilities()
        AnnealingOptimizer(trio, rng=random.Random(5)).run(max_iterations=100)
        assert trio.get_member(3).probabilities == [0.0, 0.0, 0.0, 1.0]
        assert trio.get_member(1).probabilities == pytest.approx([0.0, 0.5, 0.5, 0.0])

    def test_converges_on_plateau(self) -> None:
        config = AnnealingConfig(convergence_plateau=5)
        optimizer = AnnealingOptimizer(build_hypothetical_founder(),
                                       rng=random.Random(0), config=config)
        optimizer.run(max_iterations=100)
        assert optimizer.state == OptimizerState.CONVERGED
        assert optimizer.iterations == 6

    def test_no_candidates_stops(self) -> None:
        pedigree = Pedigree()
        founder = pedigree.add_individual(Gender.MALE)
        pedigree.set_affected(founder.id)
        optimizer = AnnealingOptimizer(pedigree, rng=random.Random(0))
        optimizer.start()
        assert optimizer.step() is False
        assert optimizer.state == OptimizerState.STOPPED
        assert optimizer.iterations == 0


class TestHostControl:
    """Tests for start/step/stop/reset and the steps() generator."""

    def test_step_requires_start(self) -> None:
        optimizer = AnnealingOptimizer(build_family(), rng=random.Random(0))
        assert optimizer.state == OptimizerState.IDLE
        assert optimizer.step() is False
        assert optimizer.iterations == 0

    def test_steps_yields_iteration_numbers(self) -> None:
        optimizer = AnnealingOptimizer(build_family(), rng=random.Random(0))
        assert list(optimizer.steps(10)) == list(range(1, 11))

    def test_stop_at_yield_point(self) -> None:
        optimizer = AnnealingOptimizer(build_family(), rng=random.Random(0))
        for iteration in optimizer.steps(100):
            if iteration == 5:
                optimizer.stop()
        assert optimizer.iterations == 5
        assert optimizer.state == OptimizerState.STOPPED

    def test_reset_restores_original_probabilities(self) -> None:
        pedigree = build_family()
        before = {iid: list(ind.probabilities) for iid, ind in pedigree.members.items()}
        optimizer = AnnealingOptimizer(pedigree, rng=random.Random(2))
        optimizer.run(max_iterations=200)
        optimizer.reset()
        assert optimizer.state == OptimizerState.IDLE
        assert optimizer.iterations == 0
        for iid, probs in before.items():
            assert pedigree.get_member(iid).probabilities == pytest.approx(probs)

    def test_temperature_cools(self) -> None:
        optimizer = AnnealingOptimizer(build_family(), rng=random.Random(0))
        optimizer.start()
        optimizer.step()
        assert optimizer.temperature == pytest.approx(0.995)

    @pytest.mark.parametrize(
        "plateau,rate",
        [
            (0, 0.995),
            (99, 0.9995),
            (150, 0.9995),
            (499, 0.9999),
            (600, 0.9999),
        ],
    )
    def test_cooling_rate_follows_plateau(self, plateau: int, rate: float) -> None:
        # 한 스텝 동안 정체 카운트가 1 증가한 뒤 냉각된다
        optimizer = AnnealingOptimizer(build_hypothetical_founder(), rng=random.Random(0))
        optimizer.start()
        optimizer.no_improvement_count = plateau
        optimizer.step()
        assert optimizer.no_improvement_count == plateau + 1
        assert optimizer.temperature == pytest.approx(rate)

    def test_temperature_never_rises(self) -> None:
        optimizer = AnnealingOptimizer(build_family(), rng=random.Random(7))
        optimizer.start()
        previous = optimizer.temperature
        for _ in range(300):
            optimizer.step()
            assert 0 < optimizer.temperature < previous
            previous = optimizer.temperature
