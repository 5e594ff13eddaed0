"""
genetics.py - 멘델 유전 법칙 구현
대립유전자 분해, 자녀 유전자형 분포(합성곱), 정규화, 하디-바인베르크 분포
"""

import math
from itertools import product
from typing import List, Sequence, Tuple

import numpy as np

from .models import Allele, GenotypeState, NUM_STATES, UNIFORM


# 유전자형 → (첫째 부모 쪽 대립유전자, 둘째 부모 쪽 대립유전자)
GENOTYPE_ALLELES = {
    GenotypeState.HOMOZYGOUS_NORMAL: (Allele.NORMAL, Allele.NORMAL),
    GenotypeState.CARRIER_FROM_SIDE_A: (Allele.NORMAL, Allele.DISEASE),
    GenotypeState.CARRIER_FROM_SIDE_B: (Allele.DISEASE, Allele.NORMAL),
    GenotypeState.HOMOZYGOUS_AFFECTED: (Allele.DISEASE, Allele.DISEASE),
}

_STATE_BY_ALLELES = {alleles: state for state, alleles in GENOTYPE_ALLELES.items()}


class GeneticsEngine:
    """멘델 유전학 엔진"""

    @staticmethod
    def alleles_of(state: GenotypeState) -> Tuple[Allele, Allele]:
        """유전자형을 두 대립유전자로 분해"""
        return GENOTYPE_ALLELES[GenotypeState(state)]

    @staticmethod
    def state_from_alleles(first: Allele, second: Allele) -> GenotypeState:
        return _STATE_BY_ALLELES[(first, second)]

    @staticmethod
    def offspring_distribution(parent1_state: GenotypeState,
                               parent2_state: GenotypeState) -> np.ndarray:
        """
        부모 유전자형이 확정일 때 자녀 유전자형 분포

        각 부모가 대립유전자 하나씩 무작위로 전달 (4가지 조합, 각 0.25)
        """
        probs = np.zeros(NUM_STATES)
        for a1 in GeneticsEngine.alleles_of(parent1_state):
            for a2 in GeneticsEngine.alleles_of(parent2_state):
                probs[GeneticsEngine.state_from_alleles(a1, a2)] += 0.25
        return probs

    @staticmethod
    def convolve(parent1_probs: Sequence[float], parent2_probs: Sequence[float]) -> List[float]:
        """
        부모 확률 벡터로부터 자녀 확률 벡터 계산 (정규화 전)

        결합확률이 0인 조합은 건너뛴다.
        """
        child = np.zeros(NUM_STATES)
        for i, j in product(range(NUM_STATES), repeat=2):
            weight = parent1_probs[i] * parent2_probs[j]
            if weight > 0:
                child += weight * TRANSMISSION[i, j]
        return child.tolist()

    @staticmethod
    def normalize(probs: Sequence[float]) -> List[float]:
        """
        NaN/음수는 0으로, 합이 1이 되도록 정규화
        합이 0이면 균등분포로 대체
        """
        cleaned = [0.0 if (math.isnan(p) or p < 0) else float(p) for p in probs]
        total = sum(cleaned)
        if total > 0:
            return [p / total for p in cleaned]
        return list(UNIFORM)

    @staticmethod
    def hardy_weinberg(q: float) -> List[float]:
        """보인자 빈도 q에서 [p², pq, qp, q²] (무작위 교배 가정)"""
        p = 1 - q
        return [p * p, p * q, q * p, q * q]

    @staticmethod
    def affected_probability(parent1_probs: Sequence[float],
                             parent2_probs: Sequence[float]) -> float:
        """부모로부터 예측되는 자녀의 발병(열성 동형접합) 확률"""
        child = GeneticsEngine.normalize(GeneticsEngine.convolve(parent1_probs, parent2_probs))
        return child[GenotypeState.HOMOZYGOUS_AFFECTED]


# TRANSMISSION[i, j] = 부모 유전자형 (i, j)일 때 자녀 분포
TRANSMISSION = np.array([
    [GeneticsEngine.offspring_distribution(GenotypeState(i), GenotypeState(j))
     for j in range(NUM_STATES)]
    for i in range(NUM_STATES)
])
