"""
models.py - 핵심 데이터 모델 정의
성별, 대립유전자, 4-상태 유전자형과 고정 확률 벡터
"""

from enum import Enum, IntEnum


class Gender(Enum):
    """성별 정의"""
    MALE = "M"
    FEMALE = "F"


class Allele(Enum):
    """대립유전자"""
    NORMAL = "neg"     # 정상
    DISEASE = "pos"    # 질환


class GenotypeState(IntEnum):
    """
    단일 상염색체 열성 좌위의 4가지 유전자형 슬롯

    두 보인자 슬롯은 생물학적으로 같지만, 전달 계산에서
    대립유전자의 출처를 정확히 추적하기 위해 나눠 둔다.
    """
    HOMOZYGOUS_NORMAL = 0      # 정상 동형접합
    CARRIER_FROM_SIDE_A = 1    # 보인자
    CARRIER_FROM_SIDE_B = 2    # 보인자
    HOMOZYGOUS_AFFECTED = 3    # 열성 동형접합 (발병)


NUM_STATES = len(GenotypeState)

UNIFORM = (0.25, 0.25, 0.25, 0.25)
HOMOZYGOUS_NORMAL_VECTOR = (1.0, 0.0, 0.0, 0.0)
AFFECTED_VECTOR = (0.0, 0.0, 0.0, 1.0)
OBLIGATE_CARRIER_VECTOR = (0.0, 0.5, 0.5, 0.0)

# 로그 가능도 계산 시 0 확률 하한
PROBABILITY_FLOOR = 1e-10
