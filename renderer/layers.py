"""레이어 합성 모듈 — 배경 + 패턴/아바타 배지 + 제목."""

import logging
import math
from dataclasses import dataclass

from PIL import Image

from content.pattern import generate_grid, paint_grid
from .canvas import Canvas, Filter
from .color import parse_color, with_opacity
from .layout import LayoutError, apply_gravity, fit_size, fit_text
from .text import draw_text_block, get_font, measure_line

logger = logging.getLogger(__name__)

AVATAR_SCALE = 7          # 아바타 = 캔버스의 1/7
AVATAR_MARGIN = 40        # 오른쪽 아래 여백 = 캔버스 폭 / 40
TITLE_PADDING = 30        # 제목 여백 = 캔버스 폭 / 30
SHADOW_STEP = 300         # 그림자 오프셋/블러 = 캔버스 폭 / 300
SHADOW_OPACITY = 0.4
BACKDROP_OPACITY = 0.4


@dataclass
class RenderRequest:
    """카드 한 장의 렌더링 요청. 이미지가 None이면 해당 단계는 건너뛴다."""
    background: Image.Image | None
    avatar: Image.Image | None = None
    title: str | None = None
    foreground_color: str | tuple = "black"
    background_color: str | tuple = "rgba(255, 255, 255, 0.7)"
    gravity: str | None = None
    width: int = 300
    height: int = 300

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"캔버스 크기는 양수여야 함: {self.width}x{self.height}")
        if self.width != self.height:
            raise ValueError(f"캔버스는 정사각형이어야 함: {self.width}x{self.height}")


class CardCompositor:
    """배경, 점 패턴, 아바타 배지, 제목을 정해진 순서로 캔버스에 그린다."""

    def __init__(self, pattern: dict | None = None, text: dict | None = None):
        pattern = pattern or {}
        text = text or {}
        self._seed = pattern.get("seed", "SoftwareAscending")
        self._grid_width = pattern.get("width", 30)
        self._generations = pattern.get("generations", 70)
        self._font_path = text.get("font_path") or None
        self._nominal_size = text.get("nominal_size", 42)
        self._line_spacing = text.get("line_spacing", 1.3)

    def render(self, request: RenderRequest) -> Image.Image:
        """새 캔버스에 카드를 그려 RGBA 이미지로 반환한다."""
        canvas = Canvas(request.width, request.height)
        self.compose(canvas, request)
        return canvas.image

    def compose(self, canvas: Canvas, request: RenderRequest) -> None:
        """요청을 캔버스에 그린다. 배경이 없으면 아무것도 그리지 않는다."""
        canvas.clear()
        if request.background is None:
            logger.warning("배경 이미지 없음 — 렌더링 생략")
            return

        width, height = request.width, request.height
        fg = parse_color(request.foreground_color)
        bg = parse_color(request.background_color)

        # 배경 레이어
        w, h = fit_size(request.background.width, request.background.height, width, height)
        x, y = apply_gravity(width - w, height - h, request.gravity)
        canvas.draw_image(request.background, x, y, w, h)

        # 패턴 + 아바타 배지
        if request.avatar is not None:
            self._draw_avatar(canvas, request.avatar, width, height, fg, bg)

        # 제목
        if request.title and request.title.strip():
            self._draw_title(canvas, request.title, width, height, fg, bg)

    def _draw_avatar(self, canvas: Canvas, avatar: Image.Image,
                     width: int, height: int, fg: tuple, bg: tuple) -> None:
        aw, ah = fit_size(avatar.width, avatar.height,
                          width / AVATAR_SCALE, height / AVATAR_SCALE)
        offset = width / AVATAR_MARGIN
        x = width - aw - offset
        y = height - ah - offset
        cx = math.floor(x + aw / 2)
        cy = math.floor(y + ah / 2)
        radius = math.floor(max(aw, ah)) / 2
        profile_top = y - 3 * offset
        profile_height = height - profile_top

        grid = generate_grid(self._grid_width, self._generations, self._seed)
        paint_grid(canvas, grid, width, height, profile_height)

        canvas.save()
        canvas.fill_circle(cx, cy, 1.2 * radius, with_opacity(bg, BACKDROP_OPACITY))
        canvas.fill_circle(cx, cy, 1.05 * radius, fg)
        canvas.clip_circle(cx, cy, radius)
        canvas.draw_image(avatar, x, y, aw, ah)
        canvas.restore()

    def _draw_title(self, canvas: Canvas, title: str,
                    width: int, height: int, fg: tuple, bg: tuple) -> None:
        lines = title.split("\n")
        padding = width / TITLE_PADDING
        try:
            layout = fit_text(
                lines, width, height, padding, self._nominal_size,
                lambda line, size: measure_line(line, size, self._font_path),
                line_spacing=self._line_spacing,
            )
        except LayoutError as e:
            logger.warning("제목 배치 실패, 생략: %s", e)
            return

        font = get_font(layout.font_size, self._font_path)
        logger.debug("제목 %d줄, 폰트 %dpx", len(lines), layout.font_size)

        step1 = width / SHADOW_STEP
        step2 = 2 * step1
        shadows = [
            (sx * step, sy * step)
            for step in (step1, step2)
            for sx, sy in ((1, 1), (1, -1), (-1, 1), (-1, -1))
        ]

        canvas.save()
        canvas.set_filter(Filter(shadows=shadows, shadow_color=bg,
                                 blur=step1, opacity=SHADOW_OPACITY))
        draw_text_block(canvas, lines, layout, font, bg)
        canvas.restore()
        draw_text_block(canvas, lines, layout, font, fg)
