"""
annealing.py - 담금질(simulated annealing) 기반 창시자 확률 탐색
메트로폴리스 수락 규칙 + 적응형 냉각
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from .individual import Individual
from .models import GenotypeState
from .pedigree import Pedigree

logger = logging.getLogger(__name__)

NORMAL = GenotypeState.HOMOZYGOUS_NORMAL
SIDE_A = GenotypeState.CARRIER_FROM_SIDE_A
SIDE_B = GenotypeState.CARRIER_FROM_SIDE_B
AFFECTED = GenotypeState.HOMOZYGOUS_AFFECTED


class OptimizerState(Enum):
    """최적화 진행 상태"""
    IDLE = "Idle"
    RUNNING = "Running"
    CONVERGED = "Converged"
    STOPPED = "Stopped"


@dataclass
class AnnealingConfig:
    """담금질 설정"""
    step_size: float = 0.05               # 제안 변화량 폭 (±step_size/2)
    initial_temperature: float = 1.0
    cooling_rate: float = 0.995           # 개선 중
    slow_cooling_rate: float = 0.9995     # 정체 구간
    stalled_cooling_rate: float = 0.9999  # 장기 정체
    slow_plateau: int = 100
    stalled_plateau: int = 500
    convergence_plateau: int = 5000


class AnnealingOptimizer:
    """
    창시자 확률 벡터를 무작위로 섭동하여 음의 로그 가능도(NLL)를 낮추는 최적화기

    호스트는 start() 후 step()을 반복 호출하거나 steps()/run()을 사용한다.
    중단은 다음 스텝 경계에서만 반영된다.
    """

    def __init__(self, pedigree: Pedigree,
                 rng: Optional[random.Random] = None,
                 config: Optional[AnnealingConfig] = None):
        self.pedigree = pedigree
        self.rng = rng or random.Random()
        self.config = config or AnnealingConfig()
        self.state = OptimizerState.IDLE

        self.iterations = 0
        self.current_likelihood = 0.0
        self.best_likelihood = math.inf
        self.no_improvement_count = 0
        self.temperature = self.config.initial_temperature

    @property
    def running(self) -> bool:
        return self.state == OptimizerState.RUNNING

    @property
    def converged(self) -> bool:
        return self.no_improvement_count > self.config.convergence_plateau

    def initialize(self):
        self.iterations = 0
        self.current_likelihood = self.pedigree.calculate_negative_log_likelihood()
        self.best_likelihood = self.current_likelihood
        self.no_improvement_count = 0
        self.temperature = self.config.initial_temperature

    def candidates(self) -> List[Individual]:
        return self.pedigree.eligible_founders()

    # ------------------------------------------------------------
    # 섭동 제안
    # ------------------------------------------------------------
    def _propose(self, individual: Individual):
        probs = list(individual.probabilities)
        change = (self.rng.random() - 0.5) * self.config.step_size

        if self.rng.random() < 0.5:
            # 정상 동형접합 슬롯 조정, 나머지 비례 재분배
            probs[NORMAL] = min(1.0, max(0.0, probs[NORMAL] + change))
            remaining = 1.0 - probs[NORMAL]
            others = probs[SIDE_A] + probs[SIDE_B] + probs[AFFECTED]
            if others > 0:
                scale = remaining / others
                for slot in (SIDE_A, SIDE_B, AFFECTED):
                    probs[slot] *= scale
        else:
            # 보인자 확률 조정 (두 슬롯은 같은 값 유지)
            carrier = (probs[SIDE_A] + probs[SIDE_B]) / 2
            carrier = min(0.5, max(0.0, carrier + change))
            probs[SIDE_A] = probs[SIDE_B] = carrier
            remaining = 1.0 - 2 * carrier
            others = probs[NORMAL] + probs[AFFECTED]
            if others > 0:
                scale = remaining / others
                probs[NORMAL] *= scale
                probs[AFFECTED] *= scale

        individual.set_probabilities(probs)

    def _cool(self):
        cfg = self.config
        if self.no_improvement_count < cfg.slow_plateau:
            self.temperature *= cfg.cooling_rate
        elif self.no_improvement_count < cfg.stalled_plateau:
            self.temperature *= cfg.slow_cooling_rate
        else:
            self.temperature *= cfg.stalled_cooling_rate

    def perform_single_step(self) -> bool:
        """
        담금질 한 스텝 수행

        Returns:
            후보 창시자가 없어 진행할 수 없으면 False
        """
        pool = self.candidates()
        if not pool:
            logger.debug("No eligible founders to optimize")
            return False

        individual = pool[self.rng.randrange(len(pool))]
        original = list(individual.probabilities)

        self._propose(individual)
        self.pedigree.update_all_probabilities()
        new_likelihood = self.pedigree.calculate_negative_log_likelihood()

        delta = new_likelihood - self.current_likelihood
        if not math.isfinite(new_likelihood):
            accept = False
        else:
            accept_prob = 1.0 if delta < 0 else math.exp(-delta / self.temperature)
            accept = self.rng.random() < accept_prob

        if accept:
            self.current_likelihood = new_likelihood
            if new_likelihood < self.best_likelihood:
                self.best_likelihood = new_likelihood
                self.no_improvement_count = 0
                logger.debug("Iteration %d: new best NLL %.6f",
                             self.iterations + 1, new_likelihood)
            else:
                self.no_improvement_count += 1
        else:
            individual.probabilities = original
            self.pedigree.update_all_probabilities()
            self.no_improvement_count += 1

        self.iterations += 1
        self._cool()
        return True

    # ------------------------------------------------------------
    # 호스트 제어
    # ------------------------------------------------------------
    def start(self):
        self.initialize()
        self.state = OptimizerState.RUNNING
        logger.info("Annealing started: NLL %.6f, %d individuals",
                    self.current_likelihood, len(self.pedigree))

    def step(self) -> bool:
        """실행 중일 때만 한 스텝 진행 (협조적 중단)"""
        if not self.running:
            return False
        if not self.perform_single_step():
            self.state = OptimizerState.STOPPED
            return False
        if self.converged:
            self.state = OptimizerState.CONVERGED
            logger.info("Annealing converged after %d iterations (best NLL %.6f)",
                        self.iterations, self.best_likelihood)
        return True

    def stop(self):
        if self.running:
            self.state = OptimizerState.STOPPED

    def reset(self):
        """중단 후 원래 확률로 복원"""
        self.stop()
        self.pedigree.reset_probabilities()
        self.iterations = 0
        self.current_likelihood = self.pedigree.calculate_negative_log_likelihood()
        self.state = OptimizerState.IDLE

    def steps(self, max_iterations: int = 10000) -> Iterator[int]:
        """스텝마다 반복 횟수를 yield (yield 지점에서 stop() 가능)"""
        self.start()
        for _ in range(max_iterations):
            if not self.step():
                break
            yield self.iterations
            if not self.running:
                break
        else:
            self.stop()

    def run(self, max_iterations: int = 10000) -> float:
        """고정 반복 횟수 또는 수렴까지 실행, 최적 NLL 반환"""
        for _ in self.steps(max_iterations):
            pass
        return self.best_likelihood

    def __repr__(self):
        return (f"AnnealingOptimizer(state={self.state.value}, iterations={self.iterations}, "
                f"best={self.best_likelihood:.6f}, T={self.temperature:.4f})")
