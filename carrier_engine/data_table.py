"""
data_table.py - 유전자형 확률 표 생성기
구성원별 4-상태 확률과 보인자/발병 확률을 표로 정리
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .fraction import format_probability
from .pedigree import Pedigree

STATE_COLUMNS = ["AA", "Aa", "aA", "aa"]
SUMMARY_COLUMNS = ["carrier", "affected"]


@dataclass
class ProbabilityCell:
    """확률 표의 개별 셀"""
    value: float
    display: str = ""


@dataclass
class ProbabilityRow:
    """확률 표의 한 행 (한 사람)"""
    person_id: int
    label: str
    cells: Dict[str, ProbabilityCell] = field(default_factory=dict)

    def add_cell(self, column: str, value: float, as_fraction: bool = False):
        self.cells[column] = ProbabilityCell(
            value=value, display=format_probability(value, as_fraction)
        )

    def get_display_dict(self) -> Dict[str, str]:
        return {column: cell.display for column, cell in self.cells.items()}

    def get_value_dict(self) -> Dict[str, float]:
        return {column: cell.value for column, cell in self.cells.items()}


@dataclass
class ProbabilityTable:
    """확률 표 전체"""
    rows: List[ProbabilityRow] = field(default_factory=list)
    columns: List[str] = field(default_factory=lambda: STATE_COLUMNS + SUMMARY_COLUMNS)
    negative_log_likelihood: Optional[float] = None

    def add_row(self, row: ProbabilityRow):
        self.rows.append(row)

    def to_dict(self) -> List[Dict[str, Any]]:
        result = []
        for row in self.rows:
            entry: Dict[str, Any] = {'person_id': row.person_id, 'person': row.label}
            entry.update(row.get_value_dict())
            result.append(entry)
        return result

    def to_markdown(self) -> str:
        """마크다운 표 형식으로 변환"""
        if not self.rows:
            return ""

        headers = ["구성원"] + self.columns
        header_line = "| " + " | ".join(headers) + " |"
        separator = "|" + "|".join(["---"] * len(headers)) + "|"

        data_lines = []
        for row in self.rows:
            values = row.get_display_dict()
            cells = [row.label] + [values.get(column, "") for column in self.columns]
            data_lines.append("| " + " | ".join(cells) + " |")

        lines = [header_line, separator] + data_lines
        if self.negative_log_likelihood is not None:
            lines.append("")
            lines.append(f"NLL = {self.negative_log_likelihood:.6f}")
        return "\n".join(lines)


class ProbabilityTableGenerator:
    """가계도 → 확률 표"""

    def __init__(self, as_fraction: bool = False, include_hypothetical: bool = True):
        self.as_fraction = as_fraction
        self.include_hypothetical = include_hypothetical

    def generate_table(self, pedigree: Pedigree) -> ProbabilityTable:
        table = ProbabilityTable(
            negative_log_likelihood=pedigree.calculate_negative_log_likelihood()
        )
        for ind in sorted(pedigree.individuals, key=lambda i: i.id):
            if ind.hypothetical and not self.include_hypothetical:
                continue
            row = ProbabilityRow(person_id=ind.id, label=self._label(ind))
            for column, value in zip(STATE_COLUMNS, ind.probabilities):
                row.add_cell(column, value, self.as_fraction)
            row.add_cell("carrier", ind.carrier_probability, self.as_fraction)
            row.add_cell("affected", ind.affected_probability, self.as_fraction)
            table.add_row(row)
        return table

    @staticmethod
    def _label(ind) -> str:
        tags = []
        if ind.affected:
            tags.append("발병")
        if ind.hypothetical:
            tags.append("가상")
        suffix = f" ({', '.join(tags)})" if tags else ""
        return f"{ind.id}{ind.gender.value}{suffix}"
