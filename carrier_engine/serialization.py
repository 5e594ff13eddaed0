"""
serialization.py - 가계도 JSON 읽기/쓰기
{"condition": ..., "individuals": [...]} 형식 ↔ Pedigree (+ 좌표)
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .models import Gender
from .pedigree import Pedigree, PedigreeStructureError
from .population import PopulationFrequencyTable
from .validator import PedigreeFormatError, sanity_check_pedigree_object

logger = logging.getLogger(__name__)

Position = Tuple[float, float]


@dataclass
class PedigreeDocument:
    """불러온 가계도와 (선택적) 화면 좌표"""
    pedigree: Pedigree
    positions: Dict[int, Position] = field(default_factory=dict)


def parse_pedigree_object(data: Dict[str, Any],
                          frequency_table: Optional[PopulationFrequencyTable] = None) -> PedigreeDocument:
    """
    JSON 객체 → PedigreeDocument

    파일의 id를 그대로 구성원 id로 사용한다.
    """
    sanity_check_pedigree_object(data)

    pedigree = Pedigree(data.get('condition') or 'cf', frequency_table)
    positions: Dict[int, Position] = {}
    individuals = data['individuals']

    try:
        for info in individuals:
            ind = pedigree.add_individual(Gender(info['gender']), individual_id=int(info['id']))
            if isinstance(info.get('x'), (int, float)) and isinstance(info.get('y'), (int, float)):
                positions[ind.id] = (float(info['x']), float(info['y']))

        for info in individuals:
            for parent in info.get('parents') or []:
                if parent is not None:
                    pedigree.add_parent_child(int(parent), int(info['id']))
            for partner in info.get('is_sexual_partner_of') or []:
                pedigree.add_partnership(int(info['id']), int(partner))
        pedigree.topological_order()
    except (PedigreeStructureError, TypeError, ValueError) as e:
        raise PedigreeFormatError(str(e)) from e

    # 관계를 먼저 연결해야 창시자에게만 집단 빈도가 적용된다
    for info in individuals:
        ind = pedigree.get_member(int(info['id']))
        if info.get('affected'):
            ind.set_affected(True)
        if info.get('hypothetical'):
            ind.hypothetical = True
        if info.get('race'):
            pedigree.set_population(ind.id, info['race'])

    logger.debug("Parsed pedigree with %d individuals (condition=%s)",
                 len(pedigree), pedigree.condition)
    return PedigreeDocument(pedigree=pedigree, positions=positions)


def read_pedigree(path: str,
                  frequency_table: Optional[PopulationFrequencyTable] = None) -> PedigreeDocument:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return parse_pedigree_object(data, frequency_table)


def pedigree_to_object(pedigree: Pedigree,
                       positions: Optional[Dict[int, Position]] = None) -> Dict[str, Any]:
    """Pedigree → JSON 객체 (좌표는 주어진 경우에만)"""
    individuals = []
    for ind in sorted(pedigree.individuals, key=lambda i: i.id):
        obj: Dict[str, Any] = {'id': ind.id, 'gender': ind.gender.value}
        if len(ind.parents) == 2:
            obj['parents'] = list(ind.parents)
        if ind.partner_id is not None:
            obj['is_sexual_partner_of'] = [ind.partner_id]
        if ind.population:
            obj['race'] = ind.population
        if ind.affected:
            obj['affected'] = True
        if ind.hypothetical:
            obj['hypothetical'] = True
        if positions and ind.id in positions:
            obj['x'], obj['y'] = positions[ind.id]
        individuals.append(obj)
    return {'condition': pedigree.condition, 'individuals': individuals}


def write_pedigree(pedigree: Pedigree, path: str,
                   positions: Optional[Dict[int, Position]] = None):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(pedigree_to_object(pedigree, positions), f, ensure_ascii=False, indent=2)
