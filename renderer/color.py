"""색상 유틸리티 — CSS 색상 문자열을 RGBA 튜플로 변환한다."""

import re

from PIL import ImageColor

# Pillow는 rgba()/hsla()의 알파를 0~255 정수로만 받으므로 CSS 표기(0~1, %)는 직접 처리한다
_CSS_ALPHA = re.compile(
    r"^(rgb|hsl)a\(\s*([^,]+),\s*([^,]+),\s*([^,]+),\s*([0-9.]+%?)\s*\)$"
)


def _parse_alpha(token: str) -> int:
    if token.endswith("%"):
        value = float(token[:-1]) / 100
    else:
        value = float(token)
    return round(max(0.0, min(1.0, value)) * 255)


def parse_color(color: str | tuple) -> tuple[int, int, int, int]:
    """CSS 색상 문자열(또는 튜플)을 (r, g, b, a)로 변환한다.

    인식할 수 없는 색상이면 ValueError.
    """
    if isinstance(color, tuple):
        if len(color) == 3:
            return (*color, 255)
        return tuple(color)

    text = color.strip().lower()
    match = _CSS_ALPHA.match(text)
    if match:
        func, a, b, c, alpha = match.groups()
        r, g, bl = ImageColor.getrgb(f"{func}({a},{b},{c})")[:3]
        return (r, g, bl, _parse_alpha(alpha))

    rgb = ImageColor.getrgb(text)
    if len(rgb) == 3:
        return (*rgb, 255)
    return rgb


def with_opacity(color: tuple, factor: float) -> tuple[int, int, int, int]:
    """알파 채널에 factor(0~1)를 곱한 색상을 반환한다."""
    r, g, b, a = parse_color(color)
    return (r, g, b, round(a * max(0.0, min(1.0, factor))))
