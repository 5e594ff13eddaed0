"""
individual.py - 가계도 구성원
확률 벡터와 (id 기반) 가족 관계를 가진 개인
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .genetics import GeneticsEngine
from .models import (
    AFFECTED_VECTOR,
    HOMOZYGOUS_NORMAL_VECTOR,
    UNIFORM,
    Gender,
    GenotypeState,
)
from .population import PopulationFrequencyTable


@dataclass
class Individual:
    """
    개인 클래스 - 가계도의 한 구성원

    가족 관계는 객체 참조가 아닌 id로만 보관한다 (Pedigree가 해석).
    좌표 등 표시 정보는 갖지 않는다.
    """
    id: int
    gender: Gender
    affected: bool = False
    hypothetical: bool = False
    frozen: bool = False
    population: Optional[str] = None
    probabilities: List[float] = field(default_factory=lambda: list(UNIFORM))
    original_probabilities: List[float] = field(default_factory=lambda: list(UNIFORM))

    # 가족 관계
    parents: Tuple[int, ...] = ()
    children_ids: List[int] = field(default_factory=list)
    partner_id: Optional[int] = None

    @property
    def is_founder(self) -> bool:
        return len(self.parents) == 0

    @property
    def carrier_probability(self) -> float:
        """보인자 확률 (두 보인자 슬롯의 합)"""
        return (self.probabilities[GenotypeState.CARRIER_FROM_SIDE_A]
                + self.probabilities[GenotypeState.CARRIER_FROM_SIDE_B])

    @property
    def affected_probability(self) -> float:
        return self.probabilities[GenotypeState.HOMOZYGOUS_AFFECTED]

    def set_probabilities(self, probs: Sequence[float]):
        """확률 벡터 설정 (항상 정규화)"""
        self.probabilities = GeneticsEngine.normalize(probs)

    def snapshot_original(self):
        self.original_probabilities = list(self.probabilities)

    def set_affected(self, is_affected: bool):
        """
        발병 여부 설정

        발병자는 [0,0,0,1]로 고정되고 최적화 대상에서 제외된다.
        """
        self.affected = is_affected
        if is_affected:
            self.set_probabilities(AFFECTED_VECTOR)
            self.frozen = True
        else:
            self.set_probabilities(HOMOZYGOUS_NORMAL_VECTOR)
            self.frozen = False
        self.snapshot_original()

    def set_population(self, population: Optional[str], condition: str,
                       table: PopulationFrequencyTable):
        """
        집단 설정 및 하디-바인베르크 사전분포 적용

        부모가 없고 고정되지 않은 개인(창시자)만 확률이 바뀐다.
        """
        self.population = population
        if self.is_founder and not self.frozen:
            self.update_from_population_frequency(condition, table)

    def update_from_population_frequency(self, condition: str,
                                         table: PopulationFrequencyTable) -> bool:
        if not self.population or self.frozen:
            return False
        q = table.frequency(condition, self.population)
        if q is None:
            return False
        self.set_probabilities(GeneticsEngine.hardy_weinberg(q))
        self.snapshot_original()
        return True

    def calculate_from_parents(self, parent1: 'Individual', parent2: 'Individual') -> bool:
        """
        부모 확률로부터 멘델 유전에 따라 확률 재계산

        부모가 정확히 2명이고 고정되지 않은 경우에만 동작
        """
        if len(self.parents) != 2 or self.frozen:
            return False
        self.set_probabilities(
            GeneticsEngine.convolve(parent1.probabilities, parent2.probabilities)
        )
        return True

    def condition_on_unaffected(self):
        """관찰된 비발병자로 조건화 (발병 슬롯 제거 후 재정규화)"""
        probs = list(self.probabilities)
        probs[GenotypeState.HOMOZYGOUS_AFFECTED] = 0.0
        self.set_probabilities(probs)

    def __repr__(self):
        probs = ", ".join(f"{p:.4f}" for p in self.probabilities)
        flags = "".join([
            "A" if self.affected else "",
            "H" if self.hypothetical else "",
            "F" if self.frozen else "",
        ])
        return f"Individual({self.id}, {self.gender.value}, [{probs}]{' ' + flags if flags else ''})"
