"""장식 패턴 모듈 — 1차원 셀룰러 오토마톤 격자 생성 + 페이드 점 패턴 그리기.

격자는 한 행이 한 세대이며, 세대가 진행될수록 무작위 소멸 확률이 커져
아래로 갈수록 조용해지는 패턴이 된다.
"""

import logging
import random

logger = logging.getLogger(__name__)

Grid = list[list[int]]

# 이웃 코드(4*prev + 2*curr + next) 중 다음 세대에 0이 되는 값
_DEAD_CODES = frozenset((0, 4, 7))

# 점 패턴 상수
DOT_COLOR = (100, 150, 180)
MAX_ALPHA = 0.65
MIN_ALPHA = 0.15
PCT_THRESHOLD = 0.15


def generate_grid(width: int, generations: int, seed: str) -> Grid:
    """seed로 결정되는 (generations + 1) x width 이진 격자를 생성한다.

    난수 소비 순서: 0행 셀마다 bool 1개, 이후 세대마다 셀 순서대로 float 1개.
    """
    if width <= 0:
        raise ValueError(f"width는 양수여야 함: {width}")
    if generations < 0:
        raise ValueError(f"generations는 0 이상이어야 함: {generations}")

    rng = random.Random(seed)
    row = [1 if rng.random() < 0.5 else 0 for _ in range(width)]
    grid = [row]
    for i in range(generations):
        pct = i / generations
        grid.append(_next_row(grid[-1], pct, rng))
    return grid


def _next_row(row: list[int], pct: float, rng: random.Random) -> list[int]:
    """원형 행에서 다음 세대를 계산하고 pct² 확률로 셀을 소멸시킨다."""
    width = len(row)
    next_gen = [0] * width
    for j in range(width):
        prev = row[(j - 1) % width]
        curr = row[j]
        nxt = row[(j + 1) % width]
        val = prev * 4 + curr * 2 + nxt
        next_gen[j] = 0 if val in _DEAD_CODES else 1
        if rng.random() < pct * pct:
            next_gen[j] = 0
    return next_gen


def dot_alpha(product: float) -> float:
    """임계값 근처 0.15 → 0에 가까울수록 0.65로 선형 보간한 알파."""
    return (1 - product / PCT_THRESHOLD) * (MAX_ALPHA - MIN_ALPHA) + MIN_ALPHA


def paint_grid(canvas, grid: Grid, width: float, height: float, fill_height: float) -> int:
    """캔버스 오른쪽 아래 영역에 격자를 페이드 점으로 그린다.

    행은 오른쪽 끝에서 왼쪽으로, 열은 (height - fill_height)에서 아래로 한 칸씩.
    그린 점 개수를 반환한다.
    """
    rows = len(grid)
    length = len(grid[0])
    cell = fill_height / length
    drawn = 0
    for row_idx, row in enumerate(grid):
        ipct = row_idx / rows
        for cell_idx, value in enumerate(row):
            jpct = 1 - cell_idx / length
            product = jpct * ipct
            if product >= PCT_THRESHOLD or not value:
                continue
            alpha = dot_alpha(product)
            x = width - row_idx * cell + cell / 2
            y = height - fill_height + cell_idx * cell + cell / 2
            canvas.fill_circle(x, y, cell / 2, (*DOT_COLOR, round(alpha * 255)))
            drawn += 1
    logger.debug("패턴 점 %d개 그림 (셀 %.1fpx)", drawn, cell)
    return drawn
