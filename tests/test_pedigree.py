"""Tests for pedigree structure, propagation and likelihood."""

import math

import pytest

from carrier_engine import Gender, Pedigree, PedigreeStructureError

CARRIER = [0.0, 0.5, 0.5, 0.0]


class TestStructure:
    """Tests for construction and relation queries."""

    def test_ids_are_monotonic(self) -> None:
        pedigree = Pedigree()
        assert pedigree.add_individual(Gender.MALE).id == 1
        assert pedigree.add_individual(Gender.FEMALE, individual_id=10).id == 10
        assert pedigree.add_individual(Gender.FEMALE).id == 11

    def test_duplicate_id_rejected(self) -> None:
        pedigree = Pedigree()
        pedigree.add_individual(Gender.MALE, individual_id=1)
        with pytest.raises(PedigreeStructureError):
            pedigree.add_individual(Gender.MALE, individual_id=1)

    def test_second_parent_creates_partnership(self, trio: Pedigree) -> None:
        assert trio.get_member(1).partner_id == 2
        assert trio.get_member(2).partner_id == 1
        assert trio.get_member(3).parents == (1, 2)
        assert [c.id for c in trio.get_children(1)] == [3]

    def test_self_parent_rejected(self, trio: Pedigree) -> None:
        with pytest.raises(PedigreeStructureError):
            trio.add_parent_child(3, 3)

    def test_third_parent_rejected(self, trio: Pedigree) -> None:
        extra = trio.add_individual(Gender.MALE)
        with pytest.raises(PedigreeStructureError):
            trio.add_parent_child(extra.id, 3)

    def test_unknown_member(self, trio: Pedigree) -> None:
        with pytest.raises(PedigreeStructureError):
            trio.get_member(99)

    def test_partnership_is_monogamous(self, trio: Pedigree) -> None:
        """A new partnership clears both previous partners' back-links."""
        other = trio.add_individual(Gender.FEMALE)
        trio.add_partnership(1, other.id)
        assert trio.get_member(1).partner_id == other.id
        assert trio.get_member(other.id).partner_id == 1
        assert trio.get_member(2).partner_id is None

    def test_siblings(self, trio: Pedigree) -> None:
        sister = trio.add_individual(Gender.FEMALE)
        trio.add_parent_child(1, sister.id)
        trio.add_parent_child(2, sister.id)
        assert [s.id for s in trio.get_siblings(3)] == [sister.id]
        assert trio.get_siblings(1) == []

    def test_cycle_detected(self, trio: Pedigree) -> None:
        trio.add_parent_child(3, 1)
        with pytest.raises(PedigreeStructureError):
            trio.update_all_probabilities()

    def test_topological_order(self, pku_pedigree: Pedigree) -> None:
        order = [ind.id for ind in pku_pedigree.topological_order()]
        position = {iid: i for i, iid in enumerate(order)}
        for ind in pku_pedigree.individuals:
            for pid in ind.parents:
                assert position[pid] < position[ind.id]


class TestPropagation:
    """Tests for update_all_probabilities()."""

    def test_uniform_founders_give_uniform_child(self, trio: Pedigree) -> None:
        trio.update_all_probabilities()
        assert trio.get_member(3).probabilities == pytest.approx([0.25] * 4)

    def test_vectors_stay_normalized(self, pku_pedigree: Pedigree) -> None:
        for ind in pku_pedigree.individuals:
            assert sum(ind.probabilities) == pytest.approx(1.0)
            assert all(p >= 0 for p in ind.probabilities)

    def test_affected_child_makes_parents_obligate_carriers(self, trio: Pedigree) -> None:
        trio.set_affected(3)
        trio.update_all_probabilities()
        assert trio.get_member(1).probabilities == pytest.approx(CARRIER)
        assert trio.get_member(2).probabilities == pytest.approx(CARRIER)
        assert trio.get_member(3).probabilities == [0.0, 0.0, 0.0, 1.0]

    def test_affected_parent_not_overwritten(self, trio: Pedigree) -> None:
        trio.set_affected(1)
        trio.set_affected(3)
        trio.update_all_probabilities()
        assert trio.get_member(1).probabilities == [0.0, 0.0, 0.0, 1.0]
        assert trio.get_member(2).probabilities == pytest.approx(CARRIER)

    def test_real_sibling_conditioned_on_unaffected(self, trio: Pedigree) -> None:
        sister = trio.add_individual(Gender.FEMALE)
        trio.add_parent_child(1, sister.id)
        trio.add_parent_child(2, sister.id)
        trio.set_affected(3)
        trio.update_all_probabilities()
        assert sister.probabilities == pytest.approx([1 / 3, 1 / 3, 1 / 3, 0.0])
        assert sister.original_probabilities == pytest.approx(sister.probabilities)

    def test_hypothetical_sibling_left_unconditioned(self, trio: Pedigree) -> None:
        sister = trio.add_individual(Gender.FEMALE)
        trio.add_parent_child(1, sister.id)
        trio.add_parent_child(2, sister.id)
        sister.hypothetical = True
        trio.set_affected(3)
        trio.update_all_probabilities()
        assert sister.probabilities == pytest.approx([0.25] * 4)

    def test_hypothetical_affected_child_is_not_evidence(self, general_family: Pedigree) -> None:
        before = general_family.calculate_negative_log_likelihood()
        founder_vectors = [list(general_family.get_member(iid).probabilities) for iid in (1, 2)]

        child = general_family.add_individual(Gender.FEMALE)
        general_family.add_parent_child(1, child.id)
        general_family.add_parent_child(2, child.id)
        child.hypothetical = True
        general_family.set_affected(child.id)
        general_family.update_all_probabilities()

        assert general_family.calculate_negative_log_likelihood() == pytest.approx(before)
        for iid, vector in zip((1, 2), founder_vectors):
            assert general_family.get_member(iid).probabilities == pytest.approx(vector)

    def test_population_founders(self, general_family: Pedigree) -> None:
        q = 0.025
        hw = [(1 - q) ** 2, (1 - q) * q, q * (1 - q), q * q]
        for iid in (1, 2, 3, 4):
            assert general_family.get_member(iid).probabilities == pytest.approx(hw)

    def test_set_condition_reseeds_founders(self, general_family: Pedigree) -> None:
        general_family.set_condition('hemo')
        q = 0.08
        assert general_family.get_member(1).probabilities == pytest.approx(
            [(1 - q) ** 2, (1 - q) * q, q * (1 - q), q * q]
        )


class TestThreeGenerationPku:
    """The bundled three-generation PKU pedigree."""

    def test_grandparents_of_affected_are_carriers(self, pku_pedigree: Pedigree) -> None:
        for iid in (5, 6):
            assert pku_pedigree.get_member(iid).probabilities == pytest.approx(CARRIER)

    def test_parents_of_affected_are_carriers(self, pku_pedigree: Pedigree) -> None:
        for iid in (3, 4):
            assert pku_pedigree.get_member(iid).probabilities == pytest.approx(CARRIER)

    def test_unaffected_sibling(self, pku_pedigree: Pedigree) -> None:
        assert pku_pedigree.get_member(9).probabilities == pytest.approx(
            [1 / 3, 1 / 3, 1 / 3, 0.0]
        )

    def test_hypothetical_child(self, pku_pedigree: Pedigree) -> None:
        assert pku_pedigree.get_member(10).affected_probability == pytest.approx(0.25)

    def test_likelihood(self, pku_pedigree: Pedigree) -> None:
        """Two affected children of carrier couples plus two HW founders."""
        q = 0.02
        expected = 2 * math.log(4) - 2 * math.log(1 - q * q)
        assert pku_pedigree.calculate_negative_log_likelihood() == pytest.approx(expected)


class TestAfflictedCousin:
    """Hypothetical child whose cousin is affected."""

    def test_cousin_parents_are_carriers(self, cousin_pedigree: Pedigree) -> None:
        assert cousin_pedigree.get_member(3).probabilities == pytest.approx(CARRIER)
        assert cousin_pedigree.get_member(5).probabilities == pytest.approx(CARRIER)

    def test_aunt_keeps_population_prior(self, cousin_pedigree: Pedigree) -> None:
        q = 0.025
        assert cousin_pedigree.get_member(4).affected_probability == pytest.approx(q * q)

    def test_hypothetical_child_risk(self, cousin_pedigree: Pedigree) -> None:
        assert cousin_pedigree.get_member(8).affected_probability == pytest.approx(0.025 ** 2)


class TestLikelihood:
    """Tests for calculate_negative_log_likelihood()."""

    def test_uninformed_trio(self, trio: Pedigree) -> None:
        trio.update_all_probabilities()
        expected = -3 * math.log(0.75)
        assert trio.calculate_negative_log_likelihood() == pytest.approx(expected)

    def test_affected_child_of_unknown_parents(self, trio: Pedigree) -> None:
        trio.set_affected(3)
        trio.update_all_probabilities()
        nll = trio.calculate_negative_log_likelihood()
        assert nll > 0
        assert nll == pytest.approx(math.log(4))

    def test_hypothetical_members_excluded(self, trio: Pedigree) -> None:
        trio.set_affected(3)
        trio.update_all_probabilities()
        before = trio.calculate_negative_log_likelihood()

        child = trio.add_individual(Gender.FEMALE)
        trio.add_parent_child(1, child.id)
        trio.add_parent_child(2, child.id)
        child.hypothetical = True
        trio.update_all_probabilities()

        assert child.probabilities == pytest.approx([0.25] * 4)
        assert trio.calculate_negative_log_likelihood() == pytest.approx(before)

    def test_affected_founder_uses_own_vector(self) -> None:
        pedigree = Pedigree()
        founder = pedigree.add_individual(Gender.MALE)
        pedigree.set_affected(founder.id)
        assert pedigree.calculate_negative_log_likelihood() == pytest.approx(0.0)

    def test_zero_probability_is_floored(self) -> None:
        pedigree = Pedigree()
        founder = pedigree.add_individual(Gender.MALE)
        founder.probabilities = [0.0, 0.0, 0.0, 1.0]
        assert pedigree.calculate_negative_log_likelihood() == pytest.approx(-math.log(1e-10))


class TestStateManagement:
    """Tests for freezing, snapshots and reset."""

    def test_freeze_uninformative_founders(self, trio: Pedigree) -> None:
        in_law = trio.add_individual(Gender.MALE)
        partner = trio.add_individual(Gender.FEMALE)
        child = trio.add_individual(Gender.FEMALE)
        trio.add_parent_child(in_law.id, child.id)
        trio.add_parent_child(partner.id, child.id)
        child.hypothetical = True

        frozen = trio.freeze_uninformative_founders()

        assert frozen == [in_law.id, partner.id]
        assert [f.id for f in trio.eligible_founders()] == [1, 2]

    def test_snapshot_restore(self, general_family: Pedigree) -> None:
        snapshot = general_family.snapshot()
        before = general_family.get_member(3).probabilities
        general_family.get_member(1).set_probabilities([1.0, 0.0, 0.0, 0.0])
        general_family.update_all_probabilities()
        general_family.restore(snapshot)
        assert general_family.get_member(3).probabilities == pytest.approx(before)

    def test_reset_probabilities(self, general_family: Pedigree) -> None:
        original = list(general_family.get_member(1).original_probabilities)
        general_family.get_member(1).set_probabilities([0.5, 0.2, 0.2, 0.1])
        general_family.reset_probabilities()
        assert general_family.get_member(1).probabilities == pytest.approx(original)
