"""메인 — 파라미터로 소셜 카드 한 장을 렌더링하여 PNG로 저장한다."""

import argparse
import asyncio
import logging
from pathlib import Path

from PIL import Image

from config import load_config
from content.images import ImageDecodeError, load_image
from content.params import CardParams
from renderer.color import parse_color
from renderer.layers import CardCompositor, RenderRequest

logger = logging.getLogger(__name__)


async def _load_optional(source: str | None, timeout: float, label: str) -> Image.Image | None:
    """이미지 소스가 있으면 로드한다. 실패하면 경고 후 None."""
    if not source:
        return None
    try:
        return await load_image(source, timeout=timeout)
    except ImageDecodeError as e:
        logger.warning("%s 이미지 로드 실패: %s", label, e)
        return None


def _color_or_default(value: str, default: str, label: str) -> str:
    try:
        parse_color(value)
    except ValueError:
        logger.warning("잘못된 %s 색상: %r (기본값 %r 사용)", label, value, default)
        return default
    return value


async def render_card(params: CardParams, config: dict | None = None) -> Image.Image:
    """배경 → 아바타 순으로 이미지를 로드한 뒤 카드를 합성한다."""
    config = config or load_config()
    card = config["card"]
    timeout = config["images"].get("timeout_sec", 10)

    background = await _load_optional(params.photo, timeout, "배경")
    avatar = await _load_optional(params.author_image, timeout, "아바타")

    request = RenderRequest(
        background=background,
        avatar=avatar,
        title=params.title,
        foreground_color=_color_or_default(params.fg_color, card["foreground_color"], "전경"),
        background_color=_color_or_default(params.bg_color, card["background_color"], "배경"),
        gravity=params.gravity,
        width=params.dim,
        height=params.dim,
    )
    compositor = CardCompositor(pattern=config["pattern"], text=config["text"])
    return compositor.render(request)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a social card image.")
    parser.add_argument("--title", help="Title text (\\n separates lines).")
    parser.add_argument("--photo", help="Background image URL or path.")
    parser.add_argument("--author-image", help="Author avatar URL or path.")
    parser.add_argument("--dim", help="Canvas side length in pixels.")
    parser.add_argument("--fg-color", help="Foreground (text/badge) color.")
    parser.add_argument("--bg-color", help="Background (shadow/backdrop) color.")
    parser.add_argument("--gravity", help="Background placement, e.g. 'north', 'south east'.")
    parser.add_argument("--config", type=Path, help="Path to config.json.")
    parser.add_argument("--out", default="card.png", help="Output PNG filename.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=config["logging"].get("level", "INFO"),
        format="%(asctime)s [%(name)s] %(message)s",
    )

    query = {
        "title": args.title,
        "photo": args.photo,
        "authorImage": args.author_image,
        "dim": args.dim,
        "fgColor": args.fg_color,
        "bgColor": args.bg_color,
        "gravity": args.gravity,
    }
    params = CardParams.from_query(
        {k: v for k, v in query.items() if v is not None}, config["card"],
    )
    if not params.photo:
        logger.error("배경 이미지(--photo)가 필요합니다.")
        return 1

    image = asyncio.run(render_card(params, config))
    image.save(args.out, format="PNG")
    logger.info("저장: %s (%dx%d)", args.out, image.width, image.height)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
