"""
population.py - 집단별 보인자 빈도 표
질환(condition) × 집단(population) → 보인자 대립유전자 빈도 q
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional


# 기본 보인자 빈도 (상염색체 열성 질환 5종)
DEFAULT_FREQUENCIES: Dict[str, Dict[str, float]] = {
    'cf': {      # 낭포성 섬유증 (CFTR)
        'european_ancestry': 0.029,
        'african_american': 0.0067,
        'general': 0.025,
        'custom1': 0.0,
        'custom2': 0.0,
    },
    'sma': {     # 척수성 근위축증 (SMN1)
        'european_ancestry': 0.017,
        'african_american': 0.019,
        'general': 0.018,
        'custom1': 0.0,
        'custom2': 0.0,
    },
    'tay': {     # 테이-삭스병 (HEXA)
        'european_ancestry': 0.0034,
        'african_american': 0.0013,
        'general': 0.002,
        'custom1': 0.0,
        'custom2': 0.0,
    },
    'pku': {     # 페닐케톤뇨증 (PAH)
        'european_ancestry': 0.02,
        'african_american': 0.005,
        'general': 0.015,
        'custom1': 0.0,
        'custom2': 0.0,
    },
    'hemo': {    # 혈색소증 (HFE)
        'european_ancestry': 0.11,
        'african_american': 0.014,
        'general': 0.08,
        'custom1': 0.0,
        'custom2': 0.0,
    },
}

CONDITION_NAMES = {
    'cf': 'Cystic Fibrosis',
    'sma': 'Spinal Muscular Atrophy',
    'tay': 'Tay-Sachs Disease',
    'pku': 'Phenylketonuria',
    'hemo': 'Hemochromatosis',
}


class PopulationFrequencyTable:
    """
    불변 보인자 빈도 표

    Pedigree와 최적화기에 명시적으로 전달된다. 값을 바꾸려면
    with_frequency()로 새 표를 만든다.
    """

    def __init__(self, frequencies: Optional[Mapping[str, Mapping[str, float]]] = None):
        source = DEFAULT_FREQUENCIES if frequencies is None else frequencies
        table = {}
        for condition, row in source.items():
            for population, q in row.items():
                if not 0.0 <= q <= 1.0:
                    raise ValueError(
                        f"Carrier frequency for {condition}/{population} "
                        f"must be within [0, 1], got {q}"
                    )
            table[condition] = MappingProxyType(dict(row))
        self._table = MappingProxyType(table)

    def frequency(self, condition: str, population: str) -> Optional[float]:
        """보인자 빈도 조회 (없으면 None)"""
        row = self._table.get(condition)
        if row is None:
            return None
        return row.get(population)

    def conditions(self) -> List[str]:
        return list(self._table.keys())

    def populations(self, condition: str) -> List[str]:
        row = self._table.get(condition)
        return list(row.keys()) if row is not None else []

    def with_frequency(self, condition: str, population: str, q: float) -> 'PopulationFrequencyTable':
        """하나의 값을 바꾼 새 표 반환 (원본은 그대로)"""
        updated = {c: dict(row) for c, row in self._table.items()}
        updated.setdefault(condition, {})[population] = q
        return PopulationFrequencyTable(updated)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {c: dict(row) for c, row in self._table.items()}

    def __repr__(self):
        return f"PopulationFrequencyTable(conditions={self.conditions()})"


DEFAULT_FREQUENCY_TABLE = PopulationFrequencyTable()
