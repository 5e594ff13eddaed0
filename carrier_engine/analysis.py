"""
analysis.py - 가계도 분석 파이프라인
전파 → (선택) 담금질 → (선택) Powell 정밀화 → 결과 정리
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .annealing import AnnealingConfig, AnnealingOptimizer
from .data_table import ProbabilityTableGenerator
from .pedigree import Pedigree
from .powell import PowellConfig, PowellOptimizer, PowellResult

logger = logging.getLogger(__name__)

OPTIMIZERS = ('annealing', 'powell', 'both', 'none')


@dataclass
class AnalysisResult:
    """분석 결과 요약"""
    optimizer: str
    initial_likelihood: float
    final_likelihood: float
    annealing_iterations: int = 0
    annealing_state: Optional[str] = None
    powell: Optional[PowellResult] = None
    frozen_founders: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'optimizer': self.optimizer,
            'initial_likelihood': self.initial_likelihood,
            'final_likelihood': self.final_likelihood,
            'annealing_iterations': self.annealing_iterations,
            'annealing_state': self.annealing_state,
            'frozen_founders': self.frozen_founders,
        }
        if self.powell is not None:
            result['powell'] = {
                'initial_likelihood': self.powell.initial_likelihood,
                'final_likelihood': self.powell.final_likelihood,
                'improved': self.powell.improved,
                'evaluations': self.powell.evaluations,
                'founder_ids': self.powell.founder_ids,
            }
        return result


def analyze_pedigree(pedigree: Pedigree,
                     optimizer: str = 'annealing',
                     seed: Optional[int] = None,
                     iterations: int = 10000,
                     freeze_uninformative: bool = False,
                     annealing_config: Optional[AnnealingConfig] = None,
                     powell_config: Optional[PowellConfig] = None) -> AnalysisResult:
    """
    가계도 확률 전파 및 창시자 최적화

    Args:
        optimizer: 'annealing', 'powell', 'both', 'none'
        seed: 담금질 난수 시드 (재현성용)
        iterations: 담금질 최대 반복 횟수
        freeze_uninformative: 관찰 구성원과 무관한 창시자를 고정
    """
    if optimizer not in OPTIMIZERS:
        raise ValueError(f"Unknown optimizer {optimizer!r}; expected one of {OPTIMIZERS}")

    frozen = pedigree.freeze_uninformative_founders() if freeze_uninformative else []
    pedigree.update_all_probabilities()
    initial = pedigree.calculate_negative_log_likelihood()
    result = AnalysisResult(optimizer=optimizer, initial_likelihood=initial,
                            final_likelihood=initial, frozen_founders=frozen)

    if optimizer in ('annealing', 'both'):
        annealer = AnnealingOptimizer(pedigree, random.Random(seed), annealing_config)
        annealer.run(iterations)
        result.annealing_iterations = annealer.iterations
        result.annealing_state = annealer.state.value

    if optimizer in ('powell', 'both'):
        result.powell = PowellOptimizer(pedigree, powell_config).optimize_all_founders()

    result.final_likelihood = pedigree.calculate_negative_log_likelihood()
    logger.info("Analysis (%s): NLL %.6f -> %.6f", optimizer, initial, result.final_likelihood)
    return result


def pedigree_report(pedigree: Pedigree, result: AnalysisResult,
                    as_fraction: bool = False) -> Dict[str, Any]:
    """JSON 응답/저장용 보고서"""
    table = ProbabilityTableGenerator(as_fraction=as_fraction).generate_table(pedigree)
    return {
        'condition': pedigree.condition,
        'analysis': result.to_dict(),
        'individuals': [
            {
                'id': ind.id,
                'gender': ind.gender.value,
                'affected': ind.affected,
                'hypothetical': ind.hypothetical,
                'frozen': ind.frozen,
                'probabilities': list(ind.probabilities),
                'carrier_probability': ind.carrier_probability,
                'affected_probability': ind.affected_probability,
            }
            for ind in sorted(pedigree.individuals, key=lambda i: i.id)
        ],
        'table': table.to_dict(),
        'table_markdown': table.to_markdown(),
    }
