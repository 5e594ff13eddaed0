"""Tests for the probability table and the pedigree renderer."""

import base64

from carrier_engine import Gender, Pedigree, PedigreeVisualizer, ProbabilityTableGenerator


def affected_trio_with_hypothetical() -> Pedigree:
    pedigree = Pedigree()
    for gender in (Gender.MALE, Gender.FEMALE, Gender.MALE, Gender.FEMALE):
        pedigree.add_individual(gender)
    for child in (3, 4):
        pedigree.add_parent_child(1, child)
        pedigree.add_parent_child(2, child)
    pedigree.set_affected(3)
    pedigree.get_member(4).hypothetical = True
    pedigree.update_all_probabilities()
    return pedigree


class TestProbabilityTable:
    """Tests for ProbabilityTableGenerator."""

    def test_markdown(self) -> None:
        table = ProbabilityTableGenerator().generate_table(affected_trio_with_hypothetical())
        lines = table.to_markdown().splitlines()
        assert lines[0] == "| 구성원 | AA | Aa | aA | aa | carrier | affected |"
        assert lines[1] == "|---|---|---|---|---|---|---|"
        assert lines[2] == "| 1M | 0.0000 | 0.5000 | 0.5000 | 0.0000 | 1.0000 | 0.0000 |"
        assert lines[4].startswith("| 3M (발병) |")
        assert lines[-1].startswith("NLL = ")

    def test_fraction_display(self) -> None:
        table = ProbabilityTableGenerator(as_fraction=True).generate_table(
            affected_trio_with_hypothetical()
        )
        row = table.rows[3]
        assert row.label == "4F (가상)"
        assert row.get_display_dict()["affected"] == "1/4"

    def test_exclude_hypothetical(self) -> None:
        table = ProbabilityTableGenerator(include_hypothetical=False).generate_table(
            affected_trio_with_hypothetical()
        )
        assert [row.person_id for row in table.rows] == [1, 2, 3]
        assert table.to_dict()[0]["carrier"] == 1.0


class TestVisualizer:
    """Tests for PedigreeVisualizer."""

    def test_returns_png(self) -> None:
        image = PedigreeVisualizer().draw(affected_trio_with_hypothetical(), title="cf")
        assert base64.b64decode(image).startswith(b"\x89PNG")

    def test_save_to_file(self, tmp_path, pku_pedigree: Pedigree) -> None:
        path = tmp_path / "pedigree.png"
        PedigreeVisualizer().save_to_file(pku_pedigree, str(path), as_fraction=True)
        assert path.read_bytes().startswith(b"\x89PNG")
