"""
Carrier Engine - 사용 예시
예제 가계도와 직접 구성한 가계도로 보인자 위험도 계산
"""

import os
import random

from carrier_engine import (
    AnnealingOptimizer,
    Gender,
    Pedigree,
    PedigreeVisualizer,
    PowellOptimizer,
    ProbabilityTableGenerator,
    format_probability,
    load_scenario,
)


def example_1_afflicted_sibling():
    """
    예시 1: 발병 형제가 있는 가상의 자녀
    - 발병자의 부모는 확정 보인자, 가상 자녀의 발병 확률은 1/4
    """
    print("\n" + "="*60)
    print("예시 1: 발병 형제가 있는 가상의 자녀")
    print("="*60)

    document = load_scenario("Hypothetical Child with Afflicted Sibling")
    pedigree = document.pedigree

    child = pedigree.get_member(4)
    print(f"\n  가상 자녀 발병 확률: {format_probability(child.affected_probability, True)}")
    print(f"  가상 자녀 보인자 확률: {format_probability(child.carrier_probability, True)}")

    table = ProbabilityTableGenerator(as_fraction=True).generate_table(pedigree)
    print("\n【유전자형 확률 표】")
    print(table.to_markdown())


def example_2_afflicted_cousin():
    """
    예시 2: 발병 사촌이 있는 가상의 자녀
    - 담금질로 창시자 사전확률을 조정
    """
    print("\n" + "="*60)
    print("예시 2: 발병 사촌이 있는 가상의 자녀")
    print("="*60)

    document = load_scenario("Hypothetical Child with Afflicted Cousin")
    pedigree = document.pedigree

    before = pedigree.get_member(8).affected_probability
    optimizer = AnnealingOptimizer(pedigree, rng=random.Random(42))
    best = optimizer.run(max_iterations=2000)

    print(f"\n  담금질: {optimizer.iterations}회, 상태 {optimizer.state.value}, 최적 NLL {best:.6f}")
    print(f"  가상 자녀 발병 확률: {before:.6f} → "
          f"{pedigree.get_member(8).affected_probability:.6f}")


def example_3_manual_pedigree():
    """
    예시 3: 코드로 직접 구성한 가계도 + Powell 정밀화
    """
    print("\n" + "="*60)
    print("예시 3: 직접 구성한 가계도 (PKU)")
    print("="*60)

    pedigree = Pedigree(condition='pku')
    father = pedigree.add_individual(Gender.MALE)
    mother = pedigree.add_individual(Gender.FEMALE)
    son = pedigree.add_individual(Gender.MALE)
    daughter = pedigree.add_individual(Gender.FEMALE)

    pedigree.add_parent_child(father.id, son.id)
    pedigree.add_parent_child(mother.id, son.id)
    pedigree.add_parent_child(father.id, daughter.id)
    pedigree.add_parent_child(mother.id, daughter.id)
    pedigree.set_population(father.id, 'european_ancestry')
    pedigree.set_population(mother.id, 'general')
    pedigree.set_affected(son.id)
    pedigree.update_all_probabilities()

    result = PowellOptimizer(pedigree).optimize_all_founders()
    if result is None:
        print("\n  정밀화할 창시자가 없습니다 (모두 확정 보인자/고정)")
    else:
        print(f"\n  Powell: NLL {result.initial_likelihood:.6f} → {result.final_likelihood:.6f}")

    print(f"  딸 보인자 확률: {format_probability(daughter.carrier_probability, True)}")


def example_4_visualization():
    """
    예시 4: 가계도 이미지 저장
    """
    print("\n" + "="*60)
    print("예시 4: 가계도 시각화")
    print("="*60)

    document = load_scenario("Three Generations with PKU")
    visualizer = PedigreeVisualizer()
    path = os.path.join("output", "pku_three_generations.png")
    visualizer.save_to_file(document.pedigree, path, title="Phenylketonuria",
                            as_fraction=True)
    print(f"\n✓ 이미지 저장: {path}")


def main():
    """모든 예시 실행"""
    os.makedirs("output", exist_ok=True)

    print("\n" + "#"*60)
    print("# Carrier Engine - 사용 예시")
    print("#"*60)

    example_1_afflicted_sibling()
    example_2_afflicted_cousin()
    example_3_manual_pedigree()
    example_4_visualization()

    print("\n" + "="*60)
    print("모든 예시 실행 완료!")
    print("="*60)


if __name__ == "__main__":
    main()
