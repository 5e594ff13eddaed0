"""
visualizer.py - 가계도 시각화 엔진
사각형(남)/원(여) 기호와 보인자·발병 확률 라벨을 PNG로 렌더링
"""

import io
import base64
from typing import Dict, Optional, Tuple
from dataclasses import dataclass

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle, Circle

from .fraction import format_probability
from .layout import auto_layout
from .models import Gender
from .pedigree import Pedigree


# ============================================================
# 설정값
# ============================================================
@dataclass
class GridConfig:
    # 레이아웃 (화면 좌표, 픽셀 단위)
    x_spacing: float = 120.0
    y_spacing: float = 100.0
    units_per_plot: float = 100.0   # 화면 좌표 → 그림 좌표 축척

    # 도형 크기
    node_size: float = 0.2

    # 스타일
    line_width: float = 1.5
    edge_color: str = 'black'
    color_normal: str = 'white'
    color_affected: str = 'black'
    hypothetical_style: str = '--'

    font_size_label: int = 8
    font_size_title: int = 12
    dpi: int = 150


# ============================================================
# 시각화 엔진 메인
# ============================================================
class PedigreeVisualizer:
    def __init__(self, config: Optional[GridConfig] = None):
        self.config = config or GridConfig()

    def draw(self, pedigree: Pedigree, title: str = "",
             positions: Optional[Dict[int, Tuple[float, float]]] = None,
             as_fraction: bool = False, save_path: Optional[str] = None) -> str:
        """
        가계도를 그려 base64 PNG 문자열로 반환

        positions가 없거나 일부 구성원이 빠져 있으면 자동 배치를 사용한다.
        """
        cfg = self.config
        coords = self._plot_coordinates(pedigree, positions)

        width = max(4.0, (max(x for x, _ in coords.values()) + 1.0) * 1.2) if coords else 4.0
        height = max(3.0, (-min(y for _, y in coords.values()) + 1.0) * 1.2) if coords else 3.0
        fig, ax = plt.subplots(figsize=(width, height))

        self._draw_connections(ax, pedigree, coords)
        self._draw_nodes(ax, pedigree, coords)
        self._draw_labels(ax, pedigree, coords, as_fraction)

        if title:
            ax.set_title(title, fontsize=cfg.font_size_title)
        ax.set_aspect('equal')
        ax.axis('off')
        if coords:
            xs = [x for x, _ in coords.values()]
            ys = [y for _, y in coords.values()]
            ax.set_xlim(min(xs) - 1.0, max(xs) + 1.0)
            ax.set_ylim(min(ys) - 1.0, max(ys) + 0.6)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=cfg.dpi, bbox_inches='tight', facecolor='white')

        buf = io.BytesIO()
        plt.savefig(buf, format='png', dpi=cfg.dpi, bbox_inches='tight', facecolor='white')
        buf.seek(0)
        img_base64 = base64.b64encode(buf.read()).decode('utf-8')
        plt.close(fig)
        return img_base64

    # --------------------------------------------------------
    # [1] 좌표 변환 (화면 좌표는 아래로 증가)
    # --------------------------------------------------------
    def _plot_coordinates(self, pedigree: Pedigree,
                          positions: Optional[Dict[int, Tuple[float, float]]]) -> Dict[int, Tuple[float, float]]:
        cfg = self.config
        if not positions or any(iid not in positions for iid in pedigree.members):
            positions = auto_layout(pedigree, cfg.x_spacing, cfg.y_spacing)
        scale = cfg.units_per_plot
        return {iid: (x / scale, -y / scale) for iid, (x, y) in positions.items()}

    # --------------------------------------------------------
    # [2] 연결선 그리기 (직각 배선)
    # --------------------------------------------------------
    def _draw_connections(self, ax, pedigree: Pedigree, coords):
        cfg = self.config
        drawn = set()

        for ind in pedigree.individuals:
            if ind.partner_id is None:
                continue
            key = tuple(sorted([ind.id, ind.partner_id]))
            if key in drawn:
                continue
            drawn.add(key)

            (x1, y1), (x2, y2) = coords[ind.id], coords[ind.partner_id]
            ax.plot([x1, x2], [y1, y2], color=cfg.edge_color, lw=cfg.line_width, zorder=1)

            kids = [cid for cid in ind.children_ids
                    if set(pedigree.members[cid].parents) == set(key)]
            if not kids:
                continue

            mx, my = (x1 + x2) / 2, (y1 + y2) / 2
            kid_y = max(coords[cid][1] for cid in kids)
            drop_y = (my + kid_y) / 2

            # 수직 내림
            ax.plot([mx, mx], [my, drop_y], color=cfg.edge_color, lw=cfg.line_width, zorder=1)

            # 자녀들 수평선 (부모 중앙 포함)
            k_xs = [coords[cid][0] for cid in kids] + [mx]
            ax.plot([min(k_xs), max(k_xs)], [drop_y, drop_y],
                    color=cfg.edge_color, lw=cfg.line_width, zorder=1)

            # 자녀들 머리 위 수직선
            for cid in kids:
                kx, ky = coords[cid]
                ax.plot([kx, kx], [drop_y, ky + cfg.node_size],
                        color=cfg.edge_color, lw=cfg.line_width, zorder=1)

    # --------------------------------------------------------
    # [3] 노드 그리기
    # --------------------------------------------------------
    def _draw_nodes(self, ax, pedigree: Pedigree, coords):
        cfg = self.config
        for ind in pedigree.individuals:
            x, y = coords[ind.id]
            color = cfg.color_affected if ind.affected else cfg.color_normal
            linestyle = cfg.hypothetical_style if ind.hypothetical else '-'
            self._draw_shape_base(ax, x, y, cfg.node_size, ind.gender, color, linestyle)

    def _draw_shape_base(self, ax, x, y, sz, gender, color, linestyle='-'):
        """기본 도형 그리기 (테두리 + 채우기)"""
        cfg = self.config
        if gender == Gender.MALE:
            patch = Rectangle((x - sz, y - sz), sz * 2, sz * 2,
                              facecolor=color, edgecolor=cfg.edge_color,
                              lw=cfg.line_width, linestyle=linestyle, zorder=10)
        else:
            patch = Circle((x, y), sz,
                           facecolor=color, edgecolor=cfg.edge_color,
                           lw=cfg.line_width, linestyle=linestyle, zorder=10)
        ax.add_patch(patch)

    # --------------------------------------------------------
    # [4] 라벨
    # --------------------------------------------------------
    def _draw_labels(self, ax, pedigree: Pedigree, coords, as_fraction: bool):
        cfg = self.config
        for ind in pedigree.individuals:
            x, y = coords[ind.id]
            ax.text(x, y + cfg.node_size + 0.05, str(ind.id),
                    ha='center', va='bottom', fontsize=cfg.font_size_label, fontweight='bold')
            label = (f"aff {format_probability(ind.affected_probability, as_fraction)}\n"
                     f"car {format_probability(ind.carrier_probability, as_fraction)}")
            ax.text(x, y - cfg.node_size - 0.05, label,
                    ha='center', va='top', fontsize=cfg.font_size_label)

    # --------------------------------------------------------
    # 유틸리티 메서드
    # --------------------------------------------------------
    def save_to_file(self, pedigree: Pedigree, filepath: str, title: str = "", **kwargs):
        """파일로 저장"""
        self.draw(pedigree, title=title, save_path=filepath, **kwargs)

    def get_base64_image(self, pedigree: Pedigree, title: str = "", **kwargs) -> str:
        """Base64 이미지 반환"""
        return self.draw(pedigree, title=title, **kwargs)
