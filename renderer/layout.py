"""화면 레이아웃 모듈 — 이미지 크기 맞춤, gravity 배치, 제목 크기 자동 조절."""

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable

from .text import TextMetrics

logger = logging.getLogger(__name__)

LINE_SPACING = 1.3

_VERT = r"n|north|s|south"
_HORZ = r"e|east|w|west"
_GRAVITY = re.compile(
    rf"^(?:(?P<v1>{_VERT})(?:\s+(?P<h1>{_HORZ}))?"
    rf"|(?P<h2>{_HORZ})(?:\s+(?P<v2>{_VERT}))?"
    r"|m|middle|c|center)$"
)


class LayoutError(ValueError):
    """텍스트 블록을 배치할 수 없을 때 (측정 가능한 잉크가 없음 등)."""


@dataclass(frozen=True)
class TextLayout:
    """제목 블록 배치 결과."""
    font_size: int
    x: float
    y: float
    line_height: float
    line_spacing: float
    scale: float
    baselines: tuple[float, ...]


def fit_size(natural_w: float, natural_h: float,
             max_w: float, max_h: float) -> tuple[float, float]:
    """비율을 유지하며 (max_w, max_h) 상자 안에 들어가는 크기를 반환한다."""
    if min(natural_w, natural_h, max_w, max_h) <= 0:
        raise ValueError(
            f"크기는 양수여야 함: {natural_w}x{natural_h} -> {max_w}x{max_h}"
        )
    scale = min(max_w / natural_w, max_h / natural_h)
    return natural_w * scale, natural_h * scale


def apply_gravity(slack_x: float, slack_y: float,
                  gravity: str | None = None) -> tuple[float, float]:
    """gravity 키워드에 따라 남는 공간(slack) 안의 좌상단 오프셋을 계산한다.

    n/north → 위, s/south → 아래, e/east → x=0, w/west → x=slack.
    해석할 수 없으면 경고 후 중앙 배치.
    """
    center = (slack_x / 2, slack_y / 2)
    if gravity is None or not gravity.strip():
        return center

    match = _GRAVITY.match(gravity.strip().lower())
    if not match:
        logger.warning("잘못된 gravity: %r (중앙 배치)", gravity)
        return center

    vert = match.group("v1") or match.group("v2")
    horz = match.group("h1") or match.group("h2")
    if not vert:
        y = slack_y / 2
    else:
        y = 0 if vert.startswith("n") else slack_y
    if not horz:
        x = slack_x / 2
    else:
        x = 0 if horz.startswith("e") else slack_x
    return x, y


def _measure_block(lines: list[str], size: int, measure) -> tuple[float, float, float, float]:
    """(max_right, min(0, min_left), 최대 ascent, 최대 descent)."""
    metrics = [measure(line, size) for line in lines]
    return (
        max(m.right for m in metrics),
        min(0, min(m.left for m in metrics)),
        max(m.ascent for m in metrics),
        max(m.descent for m in metrics),
    )


def _place(lines: list[str], size: int, box_w: float, box_h: float, padding: float,
           measure, line_spacing: float) -> tuple[int, tuple[int, ...], float] | None:
    """size에서 다시 측정한 실제 범위로 펜 위치와 기준선을 정한다. 넘치면 None."""
    right, left, line_height, descent = _measure_block(lines, size, measure)
    if line_height <= 0 or right - left <= 0:
        return None
    # 정수 좌표에 그려야 측정한 잉크 범위와 실제 픽셀이 일치한다
    x = math.ceil(padding - left)
    baselines = tuple(
        math.ceil(padding + (idx + 1) * line_height + idx * line_height * (line_spacing - 1))
        for idx in range(len(lines))
    )
    if x + right > box_w - padding or baselines[-1] + descent > box_h - padding:
        return None
    return x, baselines, line_height


def fit_text(
    lines: list[str],
    box_w: float,
    box_h: float,
    padding: float,
    nominal_size: int,
    measure: Callable[[str, int], TextMetrics],
    line_spacing: float = LINE_SPACING,
) -> TextLayout:
    """여러 줄 텍스트가 여백 안쪽 상자에 들어가도록 폰트 크기와 위치를 계산한다.

    기준 크기(nominal_size)에서 모든 줄을 측정한 뒤 가로/세로 배율 중 작은 쪽으로
    크기를 정한다. 힌팅된 글리프는 크기에 비례하지 않으므로 정한 크기에서 다시
    측정하고, 상자를 넘으면 한 단계씩 줄인다. 왼쪽으로 돌출된 글리프만큼 펜
    위치를 오른쪽으로 옮긴다.

    Args:
        measure: (줄, 폰트 크기) → TextMetrics
    """
    if not lines:
        raise LayoutError("줄이 없음")

    right, left, line_height, descent = _measure_block(lines, nominal_size, measure)
    count = len(lines)
    width = right - left
    height = line_height * (count + (count - 1) * (line_spacing - 1)) + descent
    if width <= 0 or line_height <= 0:
        raise LayoutError(f"측정 가능한 텍스트 없음: {lines!r}")

    hscale = (box_w - padding * 2) / width
    vscale = (box_h - padding * 2) / height
    scale = min(hscale, vscale)
    if scale <= 0:
        raise LayoutError(f"여백({padding})이 상자({box_w}x{box_h})보다 큼")

    size = math.floor(scale * nominal_size)
    while size >= 1:
        placed = _place(lines, size, box_w, box_h, padding, measure, line_spacing)
        if placed is not None:
            x, baselines, lh = placed
            return TextLayout(
                font_size=size,
                x=x,
                y=padding,
                line_height=lh,
                line_spacing=line_spacing,
                scale=scale,
                baselines=baselines,
            )
        size -= 1
    raise LayoutError(f"상자({box_w}x{box_h})에 맞는 폰트 크기 없음: {lines!r}")
