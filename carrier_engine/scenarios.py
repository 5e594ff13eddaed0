"""
scenarios.py - 미리 정의된 예제 가계도
각 항목은 serialization.parse_pedigree_object로 바로 불러올 수 있는 JSON 객체
"""

import copy
from typing import Any, Dict, List

from .serialization import PedigreeDocument, parse_pedigree_object


PREDEFINED_SCENARIOS: Dict[str, Dict[str, Any]] = {
    "Hypothetical Child with Afflicted Cousin": {
        "condition": "cf",
        "individuals": [
            {"id": 1, "gender": "M", "race": "general", "is_sexual_partner_of": [2], "x": 100, "y": 100},
            {"id": 2, "gender": "F", "race": "general", "is_sexual_partner_of": [1], "x": 220, "y": 100},
            {"id": 3, "gender": "M", "parents": [1, 2], "is_sexual_partner_of": [5], "x": 100, "y": 200},
            {"id": 4, "gender": "F", "parents": [1, 2], "is_sexual_partner_of": [7], "x": 340, "y": 200},
            {"id": 5, "gender": "F", "race": "general", "is_sexual_partner_of": [3], "x": 220, "y": 200},
            {"id": 6, "gender": "M", "parents": [3, 5], "affected": True, "x": 100, "y": 300},
            {"id": 7, "gender": "M", "race": "general", "is_sexual_partner_of": [4], "x": 460, "y": 200},
            {"id": 8, "gender": "F", "parents": [4, 7], "hypothetical": True, "x": 220, "y": 300},
        ],
    },
    "Hypothetical Child with Afflicted Sibling": {
        "condition": "cf",
        "individuals": [
            {"id": 1, "gender": "M", "race": "general", "is_sexual_partner_of": [2], "x": 100, "y": 100},
            {"id": 2, "gender": "F", "race": "general", "is_sexual_partner_of": [1], "x": 200, "y": 100},
            {"id": 3, "gender": "M", "parents": [1, 2], "affected": True, "x": 150, "y": 200},
            {"id": 4, "gender": "F", "parents": [1, 2], "hypothetical": True, "x": 250, "y": 200},
        ],
    },
    "Three Generations with PKU": {
        "condition": "pku",
        "individuals": [
            {"id": 1, "gender": "M", "race": "european_ancestry", "is_sexual_partner_of": [2]},
            {"id": 2, "gender": "F", "race": "european_ancestry", "is_sexual_partner_of": [1]},
            {"id": 3, "gender": "M", "parents": [1, 2], "is_sexual_partner_of": [4]},
            {"id": 4, "gender": "F", "parents": [5, 6], "is_sexual_partner_of": [3]},
            {"id": 5, "gender": "M", "race": "european_ancestry", "is_sexual_partner_of": [6]},
            {"id": 6, "gender": "F", "race": "european_ancestry", "is_sexual_partner_of": [5]},
            {"id": 7, "gender": "M", "parents": [5, 6], "affected": True},
            {"id": 8, "gender": "F", "parents": [3, 4], "affected": True},
            {"id": 9, "gender": "M", "parents": [3, 4]},
            {"id": 10, "gender": "F", "parents": [3, 4], "hypothetical": True},
        ],
    },
}


def list_scenarios() -> List[str]:
    return list(PREDEFINED_SCENARIOS)


def get_scenario(name: str) -> Dict[str, Any]:
    """예제 JSON 객체의 사본 (없으면 KeyError)"""
    return copy.deepcopy(PREDEFINED_SCENARIOS[name])


def load_scenario(name: str) -> PedigreeDocument:
    """예제를 불러와 확률까지 전파한 문서"""
    document = parse_pedigree_object(get_scenario(name))
    document.pedigree.update_all_probabilities()
    return document
