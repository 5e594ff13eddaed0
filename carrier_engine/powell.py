"""
powell.py - Powell 방법 기반 창시자 확률 정밀화
창시자별 (pAA, pCarrier) 2변수 재매개변수화, 평가 간 상태 격리, 최적값 독립 추적
"""

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
from scipy.optimize import minimize

from .individual import Individual
from .models import GenotypeState
from .pedigree import Pedigree, PedigreeSnapshot

logger = logging.getLogger(__name__)


@dataclass
class PowellConfig:
    """Powell 정밀화 설정"""
    xtol: float = 1e-4
    ftol: float = 1e-6
    max_iterations: Optional[int] = None
    feasibility_epsilon: float = 1e-9
    improvement_tolerance: float = 1e-12
    regression_tolerance: float = 1e-9


@dataclass
class PowellResult:
    """정밀화 결과"""
    initial_likelihood: float
    final_likelihood: float
    improved: bool
    evaluations: int
    founder_ids: List[int] = field(default_factory=list)
    argument: List[float] = field(default_factory=list)


def to_parameters(probabilities: Sequence[float]) -> List[float]:
    """4-슬롯 확률 → (pAA, pCarrier)"""
    p_carrier = (probabilities[GenotypeState.CARRIER_FROM_SIDE_A]
                 + probabilities[GenotypeState.CARRIER_FROM_SIDE_B]) / 2
    return [probabilities[GenotypeState.HOMOZYGOUS_NORMAL], p_carrier]


def from_parameters(p_aa: float, p_carrier: float) -> List[float]:
    """(pAA, pCarrier) → 4-슬롯 확률, 마지막 슬롯은 나머지"""
    return [p_aa, p_carrier, p_carrier, max(0.0, 1.0 - p_aa - 2 * p_carrier)]


class PowellOptimizer:
    """
    창시자 사전확률을 결정론적으로 정밀화

    다변수 최소화 자체는 scipy.optimize.minimize(method="Powell")에 맡기고,
    여기서는 재매개변수화, 평가 간 격리, 최적 후보 추적, 악화 시 복원을 담당한다.
    """

    def __init__(self, pedigree: Pedigree, config: Optional[PowellConfig] = None):
        self.pedigree = pedigree
        self.config = config or PowellConfig()

    def is_feasible(self, x: Sequence[float]) -> bool:
        eps = self.config.feasibility_epsilon
        for p_aa, p_carrier in zip(x[0::2], x[1::2]):
            if math.isnan(p_aa) or math.isnan(p_carrier):
                return False
            if p_aa < 0 or p_carrier < 0 or p_aa + 2 * p_carrier > 1 + eps:
                return False
        return True

    def _apply(self, founders: Sequence[Individual], x: Sequence[float]):
        for i, founder in enumerate(founders):
            founder.set_probabilities(from_parameters(x[2 * i], x[2 * i + 1]))

    def optimize_founder(self, individual_id: int) -> Optional[PowellResult]:
        """한 창시자만 정밀화 (대상이 아니면 None)"""
        individual = self.pedigree.members.get(individual_id)
        if individual is None or individual.affected or individual.frozen or not individual.is_founder:
            return None
        return self._optimize([individual])

    def optimize_all_founders(self) -> Optional[PowellResult]:
        """모든 대상 창시자를 동시에 정밀화 (2×F 변수)"""
        founders = self.pedigree.eligible_founders()
        if not founders:
            return None
        return self._optimize(founders)

    def _optimize(self, founders: List[Individual]) -> PowellResult:
        pedigree = self.pedigree
        cfg = self.config

        baseline: PedigreeSnapshot = pedigree.snapshot()
        initial = pedigree.calculate_negative_log_likelihood()
        start = [value for founder in founders for value in to_parameters(founder.probabilities)]

        best = {'likelihood': initial, 'argument': None}
        evaluations = 0

        def objective(x: np.ndarray) -> float:
            nonlocal evaluations
            evaluations += 1
            if not self.is_feasible(x):
                return math.inf
            pedigree.restore(baseline)
            self._apply(founders, x)
            pedigree.update_all_probabilities()
            value = pedigree.calculate_negative_log_likelihood()
            if not math.isfinite(value):
                return math.inf
            if value < best['likelihood'] - cfg.improvement_tolerance:
                best['likelihood'] = value
                best['argument'] = list(x)
            return value

        bounds = [(0.0, 1.0), (0.0, 0.5)] * len(founders)
        options = {'xtol': cfg.xtol, 'ftol': cfg.ftol}
        if cfg.max_iterations is not None:
            options['maxiter'] = cfg.max_iterations

        with warnings.catch_warnings(), np.errstate(invalid='ignore', over='ignore'):
            warnings.simplefilter('ignore', RuntimeWarning)
            minimize(objective, np.array(start), method='Powell',
                     bounds=bounds, options=options)

        # 최소화기가 보고한 값 대신 직접 추적한 최적 후보를 적용
        pedigree.restore(baseline)
        argument = best['argument']
        if argument is not None:
            self._apply(founders, argument)
            pedigree.update_all_probabilities()
        final = pedigree.calculate_negative_log_likelihood()

        if not math.isfinite(final) or final > initial + cfg.regression_tolerance:
            logger.debug("Powell result regressed (%.6f > %.6f); restoring baseline",
                         final, initial)
            pedigree.restore(baseline)
            final = pedigree.calculate_negative_log_likelihood()
            argument = None

        improved = argument is not None and final < initial
        logger.info("Powell refinement of founders %s: NLL %.6f -> %.6f (%d evaluations)",
                    [f.id for f in founders], initial, final, evaluations)
        return PowellResult(
            initial_likelihood=initial,
            final_likelihood=final,
            improved=improved,
            evaluations=evaluations,
            founder_ids=[f.id for f in founders],
            argument=list(argument) if argument is not None else list(start),
        )
