"""
validator.py - 가계도 데이터 검증 모듈
JSON 가계도 객체의 구조적 정합성 검증
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class PedigreeFormatError(ValueError):
    """가계도 데이터 형식 오류"""


class ValidationLevel(Enum):
    """검증 레벨"""
    ERROR = "ERROR"      # 치명적 오류 (불러올 수 없음)
    WARNING = "WARNING"  # 경고 (불러올 수는 있음)
    INFO = "INFO"        # 정보


@dataclass
class ValidationResult:
    """검증 결과"""
    is_valid: bool
    level: ValidationLevel
    message: str
    details: Dict = field(default_factory=dict)

    def __str__(self):
        return f"[{self.level.value}] {self.message}"


@dataclass
class ValidationReport:
    """전체 검증 보고서"""
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """에러가 없으면 유효"""
        return not any(
            r.level == ValidationLevel.ERROR and not r.is_valid
            for r in self.results
        )

    @property
    def error_count(self) -> int:
        return len(self.get_errors())

    @property
    def warning_count(self) -> int:
        return len(self.get_warnings())

    def add_result(self, result: ValidationResult):
        self.results.append(result)

    def error(self, message: str, **details):
        self.add_result(ValidationResult(False, ValidationLevel.ERROR, message, details))

    def warning(self, message: str, **details):
        self.add_result(ValidationResult(False, ValidationLevel.WARNING, message, details))

    def get_errors(self) -> List[ValidationResult]:
        return [r for r in self.results
                if r.level == ValidationLevel.ERROR and not r.is_valid]

    def get_warnings(self) -> List[ValidationResult]:
        return [r for r in self.results
                if r.level == ValidationLevel.WARNING and not r.is_valid]

    def to_dict(self) -> Dict:
        return {
            'is_valid': self.is_valid,
            'error_count': self.error_count,
            'warning_count': self.warning_count,
            'results': [
                {
                    'valid': r.is_valid,
                    'level': r.level.value,
                    'message': r.message,
                    'details': r.details
                }
                for r in self.results
            ]
        }

    def __str__(self):
        lines = [
            "=== 검증 보고서 ===",
            f"전체 결과: {'✓ 유효' if self.is_valid else '✗ 무효'}",
            f"오류: {self.error_count}, 경고: {self.warning_count}",
        ]
        for r in self.results:
            status = "✓" if r.is_valid else "✗"
            lines.append(f"  {status} [{r.level.value}] {r.message}")
        return "\n".join(lines)


class PedigreeValidator:
    """
    가계도 JSON 객체 검증 클래스

    검증 항목:
    1. 구성원 목록 / id 중복 / 성별
    2. 부모 수, 자기 자신을 부모로 지정, 존재하지 않는 부모
    3. 배우자 연결의 상호성
    4. 부모 쌍이 배우자로 표시되어 있는지 (경고)
    5. 부모-자녀 관계의 순환
    """

    def validate(self, data: Any) -> ValidationReport:
        report = ValidationReport()

        if not isinstance(data, dict) or not isinstance(data.get('individuals'), list):
            report.error("Pedigree object must contain an 'individuals' list")
            return report

        individuals = data['individuals']
        by_id: Dict[Any, Dict] = {}
        for info in individuals:
            if not isinstance(info, dict) or 'id' not in info:
                report.error("Every individual needs an 'id'")
                continue
            if not _is_int_id(info['id']):
                report.error(f"Individual id {info['id']!r} must be an integer")
                continue
            if info['id'] in by_id:
                report.error(f"Duplicate individual id {info['id']}", person_id=info['id'])
                continue
            by_id[info['id']] = info
            if info.get('gender') not in ('M', 'F'):
                report.error(f"Individual {info['id']} has invalid gender {info.get('gender')!r}",
                             person_id=info['id'])

        for pid, info in by_id.items():
            self._validate_parents(report, pid, info, by_id)
            self._validate_partners(report, pid, info, by_id)
        self._validate_acyclic(report, by_id)

        if report.is_valid:
            report.add_result(ValidationResult(
                is_valid=True,
                level=ValidationLevel.INFO,
                message=f"가계도 구조 검증 통과 ({len(by_id)}명)"
            ))
        return report

    def _validate_parents(self, report: ValidationReport, pid, info: Dict, by_id: Dict):
        raw = info.get('parents') or []
        if not isinstance(raw, list):
            report.error(f"Parents of individual {pid} must be a list", person_id=pid)
            return
        parents = [p for p in raw if p is not None]
        if len(parents) > 2:
            report.error(f"Individual {pid} has more than two parents", person_id=pid)
            return
        if len(parents) == 1:
            report.error(f"Individual {pid} must have zero or two parents", person_id=pid)
        for parent in parents:
            if not _is_int_id(parent):
                report.error(f"Parent reference {parent!r} of individual {pid} must be an integer",
                             person_id=pid)
            elif parent == pid:
                report.error(f"Individual {pid} cannot be their own parent", person_id=pid)
            elif parent not in by_id:
                report.error(f"Missing parent {parent} for individual {pid}",
                             person_id=pid, parent_id=parent)
        if len(parents) == 2 and all(_is_int_id(p) and p in by_id for p in parents):
            p1, p2 = parents
            listed = by_id[p1].get('is_sexual_partner_of')
            if isinstance(listed, list) and p2 not in listed:
                report.warning(f"Parents {p1} and {p2} of individual {pid} are not listed as partners",
                               person_id=pid)

    def _validate_partners(self, report: ValidationReport, pid, info: Dict, by_id: Dict):
        partners = info.get('is_sexual_partner_of') or []
        if not isinstance(partners, list):
            report.error(f"Partners of individual {pid} must be a list", person_id=pid)
            return
        if len(partners) > 1:
            report.warning(f"Individual {pid} lists more than one partner; only one is kept",
                           person_id=pid)
        for partner in partners:
            if not _is_int_id(partner):
                report.error(f"Partner reference {partner!r} of individual {pid} must be an integer",
                             person_id=pid)
                continue
            other = by_id.get(partner)
            if other is None:
                report.error(f"Partner link {pid} -> {partner} points to a missing individual",
                             person_id=pid, partner_id=partner)
            elif not isinstance(other.get('is_sexual_partner_of'), list) \
                    or pid not in other['is_sexual_partner_of']:
                report.error(f"Partner link {pid} -> {partner} is not reciprocated",
                             person_id=pid, partner_id=partner)

    def _validate_acyclic(self, report: ValidationReport, by_id: Dict):
        """자기 자신의 조상이 되는 구성원이 없어야 한다"""
        parents_of: Dict[Any, List] = {}
        for pid, info in by_id.items():
            raw = info.get('parents') or []
            if isinstance(raw, list):
                parents_of[pid] = [p for p in raw if _is_int_id(p) and p in by_id and p != pid]

        # 0: 미방문, 1: 탐색 중, 2: 완료
        state = {pid: 0 for pid in by_id}
        for start in by_id:
            if state[start]:
                continue
            state[start] = 1
            stack = [(start, iter(parents_of.get(start, [])))]
            while stack:
                node, pending = stack[-1]
                parent = next(pending, None)
                if parent is None:
                    state[node] = 2
                    stack.pop()
                elif state[parent] == 1:
                    report.error(f"Pedigree contains a cycle of parent-child links "
                                 f"involving individual {parent}", person_id=parent)
                    return
                elif state[parent] == 0:
                    state[parent] = 1
                    stack.append((parent, iter(parents_of.get(parent, []))))


def _is_int_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_pedigree_object(data: Any) -> ValidationReport:
    """편의 함수: 가계도 객체 검증"""
    return PedigreeValidator().validate(data)


def sanity_check_pedigree_object(data: Any) -> ValidationReport:
    """검증 실패 시 PedigreeFormatError 발생"""
    report = validate_pedigree_object(data)
    if not report.is_valid:
        raise PedigreeFormatError("; ".join(r.message for r in report.get_errors()))
    return report
