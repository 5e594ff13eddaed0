"""
fraction.py - 확률을 간단한 분수로 표시
연분수 전개를 짧게 끊어 1/3, 2/3, 1/40 같은 표현을 얻는다
"""

import math
from fractions import Fraction
from typing import List


def probability_to_fraction(prob: float) -> Fraction:
    """
    확률 → 근사 분수

    예: 0.66 → 2/3, 0.025 → 1/40, 0.24999 → 1/4
    """
    if math.isnan(prob) or not 0.0 <= prob <= 1.0:
        raise ValueError("Probability must be between 0 and 1")
    if prob == 0:
        return Fraction(0, 1)
    if prob == 1:
        return Fraction(1, 1)

    terms: List[int] = [0]
    x = 1.0 / prob
    term = math.floor(x)
    terms.append(term)

    # 첫 항이 크면 1/n 형태로 충분
    if term > 20:
        return _convert(terms)

    remainder = x - term
    while remainder > 1e-12:
        x = 1.0 / remainder
        term = math.floor(x)
        if term > 10:
            # 1에 가까운 값은 한 항 더 유지
            if terms[1:] == [1]:
                terms.append(term)
            break
        terms.append(term)
        remainder = x - term

    return _convert(terms)


def _convert(terms: List[int]) -> Fraction:
    numerator, denominator = 1, 0
    for term in reversed(terms):
        numerator, denominator = denominator + term * numerator, numerator
    return Fraction(numerator, denominator)


def format_probability(prob: float, as_fraction: bool = False) -> str:
    """표시용 문자열"""
    if as_fraction:
        frac = probability_to_fraction(min(1.0, max(0.0, prob)))
        return f"{frac.numerator}/{frac.denominator}"
    return f"{prob:.4f}"
