"""
pedigree.py - 가계도 관리 및 확률 전파
구성원 관리, 관계 설정, 4단계 확률 전파, 음의 로그 가능도
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .genetics import GeneticsEngine
from .individual import Individual
from .models import (
    OBLIGATE_CARRIER_VECTOR,
    PROBABILITY_FLOOR,
    Gender,
    GenotypeState,
)
from .population import DEFAULT_FREQUENCY_TABLE, PopulationFrequencyTable

logger = logging.getLogger(__name__)


class PedigreeStructureError(ValueError):
    """가계도 구조 오류 (부모 3명 이상, 자기 자신이 부모 등)"""


@dataclass
class Relation:
    """관계 간선 ('parent' 또는 'partner')"""
    kind: str
    source_id: int
    target_id: int


@dataclass
class PedigreeSnapshot:
    """전체 구성원의 확률 상태 사본"""
    probabilities: Dict[int, List[float]] = field(default_factory=dict)
    original_probabilities: Dict[int, List[float]] = field(default_factory=dict)


class Pedigree:
    """
    가계도 클래스

    구성원은 id로 접근하는 저장소(arena)에 보관하고,
    부모/자녀/배우자 관계는 id 목록으로만 연결한다.
    """

    def __init__(self, condition: str = 'cf',
                 frequency_table: Optional[PopulationFrequencyTable] = None):
        self.condition = condition
        self.frequency_table = frequency_table or DEFAULT_FREQUENCY_TABLE
        self.members: Dict[int, Individual] = {}
        self.relations: List[Relation] = []
        self._next_id = 1

    # ------------------------------------------------------------
    # 구성원 / 관계
    # ------------------------------------------------------------
    def add_individual(self, gender: Gender, individual_id: Optional[int] = None) -> Individual:
        """구성원 추가 (id는 단조 증가)"""
        if individual_id is None:
            individual_id = self._next_id
        elif individual_id in self.members:
            raise PedigreeStructureError(f"Duplicate individual id {individual_id}")
        individual = Individual(id=individual_id, gender=Gender(gender))
        self.members[individual_id] = individual
        self._next_id = max(self._next_id, individual_id + 1)
        return individual

    def get_member(self, individual_id: int) -> Individual:
        try:
            return self.members[individual_id]
        except KeyError:
            raise PedigreeStructureError(f"Unknown individual id {individual_id}") from None

    def add_parent_child(self, parent_id: int, child_id: int):
        """부모-자녀 관계 설정 (부모가 2명이 되면 부부로 연결)"""
        parent = self.get_member(parent_id)
        child = self.get_member(child_id)

        if parent_id == child_id:
            raise PedigreeStructureError("Individual cannot be their own parent")
        if len(child.parents) >= 2 and parent_id not in child.parents:
            raise PedigreeStructureError(f"Child {child_id} already has two parents")

        if parent_id not in child.parents:
            child.parents = child.parents + (parent_id,)
        if child_id not in parent.children_ids:
            parent.children_ids.append(child_id)
        self.relations.append(Relation('parent', parent_id, child_id))

        if len(child.parents) == 2:
            self.add_partnership(*child.parents)

    def add_partnership(self, id1: int, id2: int):
        """부부 관계 설정 (기존 배우자의 역방향 연결은 해제)"""
        ind1 = self.get_member(id1)
        ind2 = self.get_member(id2)
        if ind1.partner_id == id2:
            return
        for ind in (ind1, ind2):
            if ind.partner_id is not None:
                self.members[ind.partner_id].partner_id = None
        ind1.partner_id = id2
        ind2.partner_id = id1
        self.relations.append(Relation('partner', id1, id2))

    def set_affected(self, individual_id: int, is_affected: bool = True):
        self.get_member(individual_id).set_affected(is_affected)

    def set_population(self, individual_id: int, population: Optional[str]):
        self.get_member(individual_id).set_population(
            population, self.condition, self.frequency_table
        )

    def set_condition(self, condition: str):
        """질환 변경 → 창시자 사전분포 재설정"""
        self.condition = condition
        self._reseed_founders()

    def set_frequency_table(self, table: PopulationFrequencyTable):
        self.frequency_table = table
        self._reseed_founders()

    def _reseed_founders(self):
        for ind in self.founders():
            ind.update_from_population_frequency(self.condition, self.frequency_table)

    # ------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------
    @property
    def individuals(self) -> List[Individual]:
        return list(self.members.values())

    def get_parents(self, individual_id: int) -> Tuple[Individual, ...]:
        return tuple(self.members[pid] for pid in self.get_member(individual_id).parents)

    def get_children(self, individual_id: int) -> List[Individual]:
        return [self.members[cid] for cid in self.get_member(individual_id).children_ids]

    def get_siblings(self, individual_id: int) -> List[Individual]:
        """친형제자매 (부모 둘 다 공유, 본인 제외)"""
        person = self.get_member(individual_id)
        if len(person.parents) != 2:
            return []
        parent1, parent2 = self.get_parents(individual_id)
        shared = set(parent2.children_ids)
        return [
            self.members[cid] for cid in parent1.children_ids
            if cid in shared and cid != individual_id
        ]

    def founders(self) -> List[Individual]:
        return [ind for ind in self.members.values() if ind.is_founder]

    def eligible_founders(self) -> List[Individual]:
        """최적화 가능한 창시자 (발병자/고정 제외)"""
        return [ind for ind in self.founders() if not ind.affected and not ind.frozen]

    def topological_order(self) -> List[Individual]:
        """부모가 자녀보다 먼저 오는 순서 (동순위는 id 순)"""
        pending = {
            ind.id: sum(1 for pid in ind.parents if pid in self.members)
            for ind in self.members.values()
        }
        queue = deque(sorted(iid for iid, n in pending.items() if n == 0))
        order = []
        while queue:
            current = self.members[queue.popleft()]
            order.append(current)
            for cid in sorted(current.children_ids):
                pending[cid] -= 1
                if pending[cid] == 0:
                    queue.append(cid)
        if len(order) != len(self.members):
            raise PedigreeStructureError("Pedigree contains a cycle of parent-child links")
        return order

    def freeze_uninformative_founders(self) -> List[int]:
        """
        비가상 구성원의 조상이 아닌 창시자를 고정

        Returns:
            새로 고정된 창시자 id 목록
        """
        informative: Set[int] = set()
        stack = [ind for ind in self.members.values() if not ind.hypothetical]
        while stack:
            ind = stack.pop()
            for pid in ind.parents:
                if pid not in informative:
                    informative.add(pid)
                    stack.append(self.members[pid])
        if not informative:
            return []

        frozen = []
        for ind in self.founders():
            if ind.id not in informative and not ind.frozen:
                ind.frozen = True
                frozen.append(ind.id)
        if frozen:
            logger.debug("Froze uninformative founders: %s", frozen)
        return frozen

    # ------------------------------------------------------------
    # 확률 전파
    # ------------------------------------------------------------
    def _forward_pass(self, order: Iterable[Individual], skip: Set[int] = frozenset()):
        for ind in order:
            if len(ind.parents) == 2 and ind.id not in skip:
                ind.calculate_from_parents(*self.get_parents(ind.id))

    def _affected_observed_children(self) -> Iterable[Individual]:
        """부모가 둘인 관찰된(비가상) 발병자"""
        for child in self.members.values():
            if child.affected and not child.hypothetical and len(child.parents) == 2:
                yield child

    def _apply_obligate_carriers(self) -> Set[int]:
        """발병자의 비발병·비고정 부모는 확정 보인자"""
        carriers: Set[int] = set()
        for child in self._affected_observed_children():
            for parent in self.get_parents(child.id):
                if parent.affected or parent.frozen:
                    continue
                parent.set_probabilities(OBLIGATE_CARRIER_VECTOR)
                parent.snapshot_original()
                carriers.add(parent.id)
        return carriers

    def _rederive_siblings(self, carriers: Set[int]):
        """발병자의 비발병 형제자매를 보정된 부모로부터 재계산"""
        for child in self._affected_observed_children():
            parents = self.get_parents(child.id)
            for sib in self.get_siblings(child.id):
                if sib.affected or sib.id in carriers:
                    continue
                if not sib.calculate_from_parents(*parents):
                    continue
                # 가상 형제는 관찰된 비발병자가 아니므로 조건화하지 않음
                if not sib.hypothetical:
                    sib.condition_on_unaffected()
                sib.snapshot_original()

    def update_all_probabilities(self):
        """
        전체 확률 갱신 (구조/증거가 바뀔 때마다 호출)

        1. 순방향 전파
        2. 확정 보인자 보정
        3. 재전파 (확정 보인자 제외)
        4. 발병자 형제자매 재계산
        """
        order = self.topological_order()
        self._forward_pass(order)
        carriers = self._apply_obligate_carriers()
        self._forward_pass(order, skip=carriers)
        self._rederive_siblings(carriers)

    # ------------------------------------------------------------
    # 가능도
    # ------------------------------------------------------------
    def observed_probability(self, ind: Individual) -> float:
        """관찰된 표현형의 확률"""
        if ind.affected:
            # 발병자 자신의 벡터는 [0,0,0,1]로 고정이므로 부모로부터의 예측 확률을 쓴다
            if len(ind.parents) == 2:
                parent1, parent2 = self.get_parents(ind.id)
                return GeneticsEngine.affected_probability(
                    parent1.probabilities, parent2.probabilities
                )
            return ind.probabilities[GenotypeState.HOMOZYGOUS_AFFECTED]
        return sum(ind.probabilities[:GenotypeState.HOMOZYGOUS_AFFECTED])

    def calculate_negative_log_likelihood(self) -> float:
        """가상 구성원을 제외한 음의 로그 가능도"""
        total = 0.0
        for ind in self.members.values():
            if ind.hypothetical:
                continue
            prob = self.observed_probability(ind)
            total -= math.log(max(prob, PROBABILITY_FLOOR))
        return total

    # ------------------------------------------------------------
    # 상태 보관 / 복원
    # ------------------------------------------------------------
    def snapshot(self) -> PedigreeSnapshot:
        return PedigreeSnapshot(
            probabilities={iid: list(ind.probabilities) for iid, ind in self.members.items()},
            original_probabilities={
                iid: list(ind.original_probabilities) for iid, ind in self.members.items()
            },
        )

    def restore(self, snapshot: PedigreeSnapshot):
        for iid, probs in snapshot.probabilities.items():
            self.members[iid].probabilities = list(probs)
        for iid, probs in snapshot.original_probabilities.items():
            self.members[iid].original_probabilities = list(probs)

    def reset_probabilities(self):
        """고정되지 않은 구성원을 저장된 원래 확률로 되돌리고 재전파"""
        for ind in self.members.values():
            if not ind.frozen:
                ind.probabilities = list(ind.original_probabilities)
        self.update_all_probabilities()

    def __len__(self):
        return len(self.members)

    def __repr__(self):
        return (f"Pedigree(condition={self.condition!r}, members={len(self.members)}, "
                f"founders={len(self.founders())})")
