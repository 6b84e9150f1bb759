"""텍스트 렌더링 모듈 — 제목용 세리프 폰트 로드, 측정, 여러 줄 그리기."""

import os
import sys as _sys
from dataclasses import dataclass
from pathlib import Path

from PIL import ImageFont

# 번들 폰트 경로 (없으면 시스템 폰트로 폴백)
_FONT_DIR = Path(__file__).parent.parent / "assets" / "fonts"
_BUNDLED_FONT = _FONT_DIR / "title-serif.ttf"


def _find_fallback() -> str:
    """OS에 맞는 세리프 폴백 폰트 경로를 반환한다."""
    candidates = []
    if _sys.platform == "win32":
        candidates = ["C:/Windows/Fonts/times.ttf", "C:/Windows/Fonts/georgia.ttf"]
    elif _sys.platform == "darwin":
        candidates = ["/System/Library/Fonts/Supplemental/Times New Roman.ttf",
                      "/Library/Fonts/Georgia.ttf"]
    else:
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
            "/usr/share/fonts/dejavu/DejaVuSerif.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        ]
    for path in candidates:
        if os.path.exists(path):
            return path
    return ""


_FALLBACK_FONT = _find_fallback()

# 폰트 캐시
_font_cache: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}


@dataclass
class TextMetrics:
    """한 줄의 잉크 범위 (기준선 위 펜 원점 기준, 픽셀)."""
    right: float    # 원점 오른쪽 끝
    left: float     # 원점 기준 왼쪽 끝 (음수면 원점 왼쪽으로 돌출)
    ascent: float   # 기준선 위 높이
    descent: float  # 기준선 아래 깊이


def get_font(size: int, font_path: str | None = None) -> ImageFont.FreeTypeFont:
    """폰트를 로드한다 (캐싱)."""
    if font_path:
        path = font_path
    elif _BUNDLED_FONT.exists():
        path = str(_BUNDLED_FONT)
    else:
        path = _FALLBACK_FONT

    size = max(1, int(size))
    key = (path, size)
    if key not in _font_cache:
        if path and os.path.exists(path):
            _font_cache[key] = ImageFont.truetype(path, size)
        else:
            _font_cache[key] = ImageFont.load_default(size)
    return _font_cache[key]


def measure_text(text: str, font: ImageFont.FreeTypeFont) -> TextMetrics:
    """텍스트의 잉크 범위를 측정한다."""
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    return TextMetrics(right=right, left=left, ascent=-top, descent=max(0, bottom))


def measure_line(text: str, size: int, font_path: str | None = None) -> TextMetrics:
    """지정 크기 폰트로 한 줄을 측정한다 (TextFitter용)."""
    return measure_text(text, get_font(size, font_path))


def draw_text_block(canvas, lines: list[str], layout, font: ImageFont.FreeTypeFont,
                    color: tuple) -> None:
    """레이아웃의 기준선에 맞춰 여러 줄을 그린다."""
    for line, baseline in zip(lines, layout.baselines):
        canvas.fill_text(line, layout.x, baseline, font, color)
