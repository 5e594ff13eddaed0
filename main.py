"""
Carrier Engine - 상염색체 열성 질환 보인자 위험도 계산기
메인 실행 파일

사용법:
    python main.py scenarios/pku_three_generations.json              # 담금질 최적화
    python main.py family.json --optimizer powell                     # Powell 정밀화
    python main.py family.json --seed 7 --iterations 2000 --fractions
    python main.py family.json --layout --image family.png --output result.json
"""

import argparse
import json
import logging
import sys
from typing import Optional

from carrier_engine import (
    CONDITION_NAMES,
    PedigreeFormatError,
    PedigreeVisualizer,
    ProbabilityTableGenerator,
    analyze_pedigree,
    auto_layout,
    pedigree_report,
    pedigree_to_object,
    read_pedigree,
)
from carrier_engine.analysis import OPTIMIZERS


class CarrierEngine:
    """
    Carrier Engine 메인 클래스
    가계도 파일 분석 및 결과 출력
    """

    def __init__(self, seed: Optional[int] = None, iterations: int = 10000,
                 as_fraction: bool = False):
        """
        Args:
            seed: 랜덤 시드 (재현성용)
            iterations: 담금질 최대 반복 횟수
            as_fraction: 확률을 분수로 표시
        """
        self.seed = seed
        self.iterations = iterations
        self.as_fraction = as_fraction
        self.visualizer = PedigreeVisualizer()

    def analyze_file(self, path: str, optimizer: str = 'annealing',
                     freeze_uninformative: bool = False, use_layout: bool = False) -> dict:
        """
        가계도 파일 분석

        Returns:
            결과 딕셔너리 ('success' 키 포함)
        """
        print(f"\n{'='*50}")
        print("🧬 Carrier Engine - 가계도 분석 중...")
        print(f"{'='*50}")

        try:
            document = read_pedigree(path)
        except (OSError, json.JSONDecodeError, PedigreeFormatError) as e:
            print(f"❌ 가계도 파일을 읽을 수 없습니다: {e}")
            return {'success': False, 'error': str(e)}

        pedigree = document.pedigree
        positions = document.positions
        if use_layout or not positions:
            positions = auto_layout(pedigree)

        print(f"질환: {CONDITION_NAMES.get(pedigree.condition, pedigree.condition)}")
        print(f"구성원 수: {len(pedigree)}")
        print(f"최적화: {optimizer}")
        print()

        result = analyze_pedigree(
            pedigree,
            optimizer=optimizer,
            seed=self.seed,
            iterations=self.iterations,
            freeze_uninformative=freeze_uninformative,
        )
        print("✓ 확률 전파 완료")
        if result.frozen_founders:
            print(f"  - 고정된 창시자: {result.frozen_founders}")
        if result.annealing_state is not None:
            print(f"✓ 담금질 완료: {result.annealing_iterations}회 ({result.annealing_state})")
        if result.powell is not None:
            print(f"✓ Powell 정밀화 완료: {result.powell.evaluations}회 평가")
        print(f"  - NLL: {result.initial_likelihood:.6f} → {result.final_likelihood:.6f}")

        report = pedigree_report(pedigree, result, self.as_fraction)
        report['success'] = True
        report['pedigree'] = pedigree_to_object(pedigree, positions)
        report['_positions'] = positions
        report['_pedigree'] = pedigree
        return report

    def display_result(self, result: dict):
        """결과를 콘솔에 표시"""
        if not result.get('success'):
            print(f"❌ 오류: {result.get('error')}")
            return

        print("\n" + "="*60)
        print("📋 구성원별 유전자형 확률")
        print("="*60)
        table = ProbabilityTableGenerator(as_fraction=self.as_fraction).generate_table(
            result['_pedigree']
        )
        print(table.to_markdown())

    def save_result(self, result: dict, output_path: Optional[str] = None,
                    image_path: Optional[str] = None):
        """결과 JSON / 이미지 저장"""
        if not result.get('success'):
            print("❌ 저장할 결과가 없습니다.")
            return

        if output_path:
            json_data = {k: v for k, v in result.items() if not k.startswith('_')}
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(json_data, f, ensure_ascii=False, indent=2)
            print(f"✓ JSON 저장: {output_path}")

        if image_path:
            self.visualizer.save_to_file(
                result['_pedigree'], image_path,
                title=CONDITION_NAMES.get(result['condition'], result['condition']),
                positions=result['_positions'],
                as_fraction=self.as_fraction,
            )
            print(f"✓ 이미지 저장: {image_path}")


def parse_args(argv=None):
    """명령줄 인자 파싱"""
    parser = argparse.ArgumentParser(
        description="Carrier Engine - 상염색체 열성 질환 보인자 위험도 계산기"
    )

    parser.add_argument(
        'file',
        type=str,
        help="가계도 JSON 파일"
    )

    parser.add_argument(
        '--seed', '-s',
        type=int,
        default=None,
        help="랜덤 시드 (재현성용)"
    )

    parser.add_argument(
        '--iterations', '-n',
        type=int,
        default=10000,
        help="담금질 최대 반복 횟수 (기본: 10000)"
    )

    parser.add_argument(
        '--optimizer',
        type=str,
        default='annealing',
        choices=list(OPTIMIZERS),
        help="최적화 방법 (기본: annealing)"
    )

    parser.add_argument(
        '--freeze-uninformative',
        action='store_true',
        help="관찰 구성원과 무관한 창시자를 고정"
    )

    parser.add_argument(
        '--layout',
        action='store_true',
        help="파일 좌표 대신 자동 배치 사용"
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help="결과 JSON 저장 경로"
    )

    parser.add_argument(
        '--image',
        type=str,
        default=None,
        help="가계도 PNG 저장 경로"
    )

    parser.add_argument(
        '--fractions',
        action='store_true',
        help="확률을 분수로 표시"
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="디버그 로그 출력"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """메인 함수"""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = CarrierEngine(seed=args.seed, iterations=args.iterations,
                           as_fraction=args.fractions)

    result = engine.analyze_file(
        args.file,
        optimizer=args.optimizer,
        freeze_uninformative=args.freeze_uninformative,
        use_layout=args.layout,
    )

    engine.display_result(result)
    engine.save_result(result, args.output, args.image)
    return 0 if result.get('success') else 1


if __name__ == "__main__":
    sys.exit(main())
