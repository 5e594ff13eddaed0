"""Pytest fixtures for carrier_engine tests."""

import random
from pathlib import Path

import pytest

from carrier_engine import Gender, Pedigree, read_pedigree


@pytest.fixture
def scenarios_dir() -> Path:
    """Return path to the bundled scenario files."""
    return Path(__file__).parent.parent / "scenarios"


@pytest.fixture
def pku_path(scenarios_dir: Path) -> Path:
    return scenarios_dir / "pku_three_generations.json"


@pytest.fixture
def pku_pedigree(pku_path: Path) -> Pedigree:
    """Three-generation PKU pedigree, propagated."""
    pedigree = read_pedigree(str(pku_path)).pedigree
    pedigree.update_all_probabilities()
    return pedigree


@pytest.fixture
def cousin_pedigree(scenarios_dir: Path) -> Pedigree:
    """Hypothetical child with an affected cousin (cf, general population), propagated."""
    pedigree = read_pedigree(str(scenarios_dir / "afflicted_cousin.json")).pedigree
    pedigree.update_all_probabilities()
    return pedigree


@pytest.fixture
def trio() -> Pedigree:
    """Two founders without ancestry and one child (ids 1, 2, 3)."""
    pedigree = Pedigree(condition='cf')
    father = pedigree.add_individual(Gender.MALE)
    mother = pedigree.add_individual(Gender.FEMALE)
    child = pedigree.add_individual(Gender.MALE)
    pedigree.add_parent_child(father.id, child.id)
    pedigree.add_parent_child(mother.id, child.id)
    return pedigree


@pytest.fixture
def general_family() -> Pedigree:
    """
    cf founders from the general population with an unaffected son (3)
    and an unaffected daughter (4).
    """
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


@pytest.fixture
def rng() -> random.Random:
    return random.Random(12345)
