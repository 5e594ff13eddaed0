"""
layout.py - 가계도 자동 배치
창시자를 0세대로 두고 너비 우선 탐색으로 세대를 매긴 뒤, 세대별로 가로 배치
"""

from collections import deque
from typing import Dict, List, Tuple

from .pedigree import Pedigree, PedigreeStructureError


def assign_levels(pedigree: Pedigree) -> Dict[int, int]:
    """구성원 id → 세대 번호 (자녀는 가장 깊은 부모 + 1)"""
    levels: Dict[int, int] = {}
    queue = deque()
    for ind in pedigree.individuals:
        if ind.is_founder:
            levels[ind.id] = 0
            queue.append(ind.id)

    while queue:
        current = queue.popleft()
        child_level = levels[current] + 1
        # 순환이 없으면 세대 수는 구성원 수를 넘지 않는다
        if child_level > len(pedigree):
            raise PedigreeStructureError("Pedigree contains a cycle of parent-child links")
        for cid in pedigree.members[current].children_ids:
            if cid not in levels or child_level > levels[cid]:
                levels[cid] = child_level
                queue.append(cid)
    return levels


def auto_layout(pedigree: Pedigree, x_spacing: float = 120,
                y_spacing: float = 100) -> Dict[int, Tuple[float, float]]:
    """
    구성원 id → (x, y) 좌표

    같은 세대 안에서는 id 순으로 놓되 배우자는 나란히 붙인다.
    """
    groups: Dict[int, List[int]] = {}
    for iid, level in assign_levels(pedigree).items():
        groups.setdefault(level, []).append(iid)

    positions: Dict[int, Tuple[float, float]] = {}
    for level in sorted(groups):
        ids = sorted(groups[level])
        in_level = set(ids)

        ordered: List[int] = []
        used = set()
        for iid in ids:
            if iid in used:
                continue
            partner = pedigree.members[iid].partner_id
            ordered.append(iid)
            used.add(iid)
            if partner is not None and partner in in_level and partner not in used:
                ordered.append(partner)
                used.add(partner)

        y = level * y_spacing + y_spacing / 2
        for i, iid in enumerate(ordered):
            positions[iid] = ((i + 1) * x_spacing, y)
    return positions
