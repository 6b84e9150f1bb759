"""Pillow RGBA 캔버스 관리 모듈.

HTML canvas 2D 컨텍스트처럼 그리기 명령을 받아 RGBA 이미지에 합성한다.
클립/필터 상태는 save()/restore()로 범위를 지정한다.
"""

import math
from dataclasses import dataclass, field

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

_TRANSPARENT = (0, 0, 0, 0)


@dataclass
class Filter:
    """그리기 명령에 적용되는 필터 (drop-shadow → blur → opacity 순)."""
    shadows: list[tuple[float, float]] = field(default_factory=list)
    shadow_color: tuple = (0, 0, 0, 255)
    blur: float = 0.0
    opacity: float = 1.0

    def padding(self) -> int:
        """필터 적용으로 도형 바깥에 번지는 최대 픽셀 수."""
        reach = max((max(abs(dx), abs(dy)) for dx, dy in self.shadows), default=0)
        return math.ceil(reach + self.blur * 3)


class Canvas:
    """W x H RGBA 캔버스."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"캔버스 크기는 양수여야 함: {width}x{height}")
        self.width = width
        self.height = height
        self._image = Image.new("RGBA", (width, height), _TRANSPARENT)
        self._clip: Image.Image | None = None
        self._filter: Filter | None = None
        self._stack: list[tuple[Image.Image | None, Filter | None]] = []

    @property
    def image(self) -> Image.Image:
        return self._image

    def clear(self) -> None:
        """캔버스를 투명하게 초기화하고 클립/필터 상태를 비운다."""
        self._image = Image.new("RGBA", (self.width, self.height), _TRANSPARENT)
        self._clip = None
        self._filter = None
        self._stack.clear()

    def save(self) -> None:
        self._stack.append((self._clip, self._filter))

    def restore(self) -> None:
        if self._stack:
            self._clip, self._filter = self._stack.pop()

    def set_filter(self, flt: Filter | None) -> None:
        self._filter = flt

    def clip_circle(self, cx: float, cy: float, radius: float) -> None:
        """원 영역으로 클립한다. 기존 클립과 교집합."""
        mask = Image.new("L", (self.width, self.height), 0)
        ImageDraw.Draw(mask).ellipse(
            [cx - radius, cy - radius, cx + radius, cy + radius], fill=255,
        )
        if self._clip is not None:
            mask = ImageChops.multiply(self._clip, mask)
        self._clip = mask

    def draw_image(self, img: Image.Image, x: float, y: float, w: float, h: float) -> None:
        """이미지를 (x, y, w, h) 사각형에 맞춰 그린다."""
        size = (max(1, round(w)), max(1, round(h)))
        scaled = img.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
        left, top = round(x), round(y)

        def draw(layer, ox, oy):
            layer.paste(scaled, (left - ox, top - oy))

        self._render(draw, (left, top, left + size[0], top + size[1]))

    def fill_circle(self, cx: float, cy: float, radius: float, color: tuple) -> None:
        def draw(layer, ox, oy):
            ImageDraw.Draw(layer).ellipse(
                [cx - radius - ox, cy - radius - oy, cx + radius - ox, cy + radius - oy],
                fill=color,
            )

        self._render(draw, (cx - radius, cy - radius, cx + radius, cy + radius))

    def fill_text(self, text: str, x: float, y: float,
                  font: ImageFont.FreeTypeFont, color: tuple) -> None:
        """텍스트를 그린다. (x, y)는 왼쪽 기준선(baseline) 위치."""
        left, top, right, bottom = font.getbbox(text, anchor="ls")

        def draw(layer, ox, oy):
            ImageDraw.Draw(layer).text(
                (x - ox, y - oy), text, font=font, fill=color, anchor="ls",
            )

        self._render(draw, (x + left, y + top, x + right, y + bottom))

    def _render(self, draw, bounds: tuple) -> None:
        """도형을 임시 레이어에 그린 뒤 필터·클립을 적용하여 합성한다."""
        pad = self._filter.padding() if self._filter else 0
        x0 = max(0, math.floor(bounds[0]) - pad - 1)
        y0 = max(0, math.floor(bounds[1]) - pad - 1)
        x1 = min(self.width, math.ceil(bounds[2]) + pad + 1)
        y1 = min(self.height, math.ceil(bounds[3]) + pad + 1)
        if x1 <= x0 or y1 <= y0:
            return

        layer = Image.new("RGBA", (x1 - x0, y1 - y0), _TRANSPARENT)
        draw(layer, x0, y0)

        if self._filter is not None:
            layer = _apply_filter(layer, self._filter)

        if self._clip is not None:
            clip = self._clip.crop((x0, y0, x1, y1))
            layer.putalpha(ImageChops.multiply(layer.getchannel("A"), clip))

        self._image.alpha_composite(layer, dest=(x0, y0))


def _apply_filter(layer: Image.Image, flt: Filter) -> Image.Image:
    if flt.shadows:
        alpha = layer.getchannel("A")
        shadow_layer = Image.new("RGBA", layer.size, _TRANSPARENT)
        shadow_rgba = Image.new("RGBA", layer.size, flt.shadow_color)
        for sx, sy in flt.shadows:
            shadow_layer.paste(shadow_rgba, (round(sx), round(sy)), alpha)
        layer = Image.alpha_composite(shadow_layer, layer)

    if flt.blur > 0:
        layer = layer.filter(ImageFilter.GaussianBlur(flt.blur))

    if flt.opacity < 1.0:
        opacity = max(0.0, flt.opacity)
        layer.putalpha(layer.getchannel("A").point(lambda v: round(v * opacity)))
    return layer
