"""요청 파라미터 모듈 — 쿼리 문자열 형태의 입력을 카드 파라미터로 변환한다."""

import logging
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass
class CardParams:
    """카드 한 장의 입력 파라미터."""
    title: str | None = None
    photo: str | None = None          # 배경 이미지 소스
    author_image: str | None = None   # 아바타 이미지 소스
    dim: int = 300                    # 정사각 캔버스 한 변
    fg_color: str = "black"
    bg_color: str = "rgba(255, 255, 255, 0.7)"
    gravity: str | None = None

    @classmethod
    def from_query(cls, query: Mapping[str, str], defaults: dict | None = None) -> "CardParams":
        """쿼리 파라미터(title, photo, authorImage, dim, fgColor, bgColor, gravity)를 해석한다.

        빈 문자열은 없는 것으로 본다. 제목의 문자 그대로의 "\\n"은 줄바꿈으로 바꾼다.
        """
        card = defaults or {}
        default_dim = card.get("dimension", cls.dim)

        def get(key: str) -> str | None:
            value = query.get(key)
            if value is None or not str(value).strip():
                return None
            return str(value)

        title = get("title")
        if title is not None:
            title = title.replace("\\n", "\n")

        return cls(
            title=title,
            photo=get("photo"),
            author_image=get("authorImage"),
            dim=_parse_dim(get("dim"), default_dim),
            fg_color=get("fgColor") or card.get("foreground_color", cls.fg_color),
            bg_color=get("bgColor") or card.get("background_color", cls.bg_color),
            gravity=get("gravity") or card.get("gravity"),
        )


def _parse_dim(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        dim = int(value)
    except ValueError:
        logger.warning("잘못된 dim: %r (기본값 %d 사용)", value, default)
        return default
    if dim <= 0:
        logger.warning("dim은 양수여야 함: %d (기본값 %d 사용)", dim, default)
        return default
    return dim
