"""캔버스/색상/텍스트 측정 테스트."""

import pytest
from PIL import Image

from renderer.canvas import Canvas, Filter
from renderer.color import parse_color, with_opacity
from renderer.text import get_font, measure_text


def _solid(color, size=(10, 10)):
    return Image.new("RGB", size, color)


def test_draw_image_fills_target_rect():
    canvas = Canvas(40, 40)
    canvas.draw_image(_solid((255, 0, 0)), 5, 5, 20, 20)
    assert canvas.image.getpixel((10, 10)) == (255, 0, 0, 255)
    assert canvas.image.getpixel((0, 0)) == (0, 0, 0, 0)
    assert canvas.image.getpixel((30, 30)) == (0, 0, 0, 0)


def test_draw_image_partly_outside_canvas():
    canvas = Canvas(20, 20)
    canvas.draw_image(_solid((0, 255, 0)), -10, -10, 20, 20)
    assert canvas.image.getpixel((5, 5)) == (0, 255, 0, 255)
    assert canvas.image.getpixel((15, 15)) == (0, 0, 0, 0)


def test_clip_circle_is_scoped_by_save_restore():
    canvas = Canvas(100, 100)
    canvas.save()
    canvas.clip_circle(50, 50, 10)
    canvas.draw_image(_solid((255, 0, 0)), 0, 0, 100, 100)
    canvas.restore()
    assert canvas.image.getpixel((50, 50)) == (255, 0, 0, 255)
    assert canvas.image.getpixel((5, 5))[3] == 0

    canvas.draw_image(_solid((0, 0, 255)), 0, 0, 100, 100)
    assert canvas.image.getpixel((5, 5)) == (0, 0, 255, 255)


def test_opacity_filter_scales_alpha():
    canvas = Canvas(40, 40)
    canvas.set_filter(Filter(opacity=0.5))
    canvas.fill_circle(20, 20, 10, (0, 0, 255, 255))
    r, g, b, a = canvas.image.getpixel((20, 20))
    assert b == 255
    assert a == pytest.approx(128, abs=1)


def test_shadow_filter_spreads_beyond_shape():
    canvas = Canvas(60, 60)
    canvas.set_filter(Filter(shadows=[(6, 6)], shadow_color=(255, 255, 255, 255)))
    canvas.fill_circle(20, 20, 5, (0, 0, 0, 255))
    assert canvas.image.getpixel((20, 20)) == (0, 0, 0, 255)
    assert canvas.image.getpixel((27, 27)) == (255, 255, 255, 255)


def test_clear_resets_pixels_and_state():
    canvas = Canvas(20, 20)
    canvas.clip_circle(0, 0, 1)
    canvas.set_filter(Filter(opacity=0.1))
    canvas.fill_circle(10, 10, 10, (255, 0, 0, 255))
    canvas.clear()
    assert canvas.image.getbbox() is None
    canvas.draw_image(_solid((255, 0, 0)), 0, 0, 20, 20)
    assert canvas.image.getpixel((15, 15)) == (255, 0, 0, 255)


def test_fill_text_draws_ink_near_baseline():
    canvas = Canvas(200, 80)
    font = get_font(32)
    canvas.fill_text("Hello", 10, 50, font, (0, 0, 0, 255))
    bbox = canvas.image.getbbox()
    assert bbox is not None
    assert bbox[0] >= 8
    assert bbox[1] < 50


def test_measure_text_reports_extents():
    m = measure_text("Typography", get_font(40))
    assert m.right > 0
    assert m.ascent > 0
    assert m.descent >= 0


def test_invalid_canvas_size():
    with pytest.raises(ValueError):
        Canvas(0, 10)


@pytest.mark.parametrize("css,expected", [
    ("black", (0, 0, 0, 255)),
    ("rgba(255, 255, 255, 0.7)", (255, 255, 255, 178)),
    ("rgba(0,0,0,50%)", (0, 0, 0, 128)),
    ("rgb(10, 20, 30)", (10, 20, 30, 255)),
    ("#ff000080", (255, 0, 0, 128)),
    ("  White ", (255, 255, 255, 255)),
    ((1, 2, 3), (1, 2, 3, 255)),
])
def test_parse_color(css, expected):
    assert parse_color(css) == expected


def test_parse_color_rejects_unknown():
    with pytest.raises(ValueError):
        parse_color("not-a-color")


def test_with_opacity():
    assert with_opacity((0, 0, 0, 200), 0.5) == (0, 0, 0, 100)
    assert with_opacity("red", 0.4) == (255, 0, 0, 102)
