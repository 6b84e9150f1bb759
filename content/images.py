"""이미지 로드 모듈 — URL / data URI / 로컬 파일을 Pillow 이미지로 디코딩한다."""

import asyncio
import base64
import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class ImageDecodeError(Exception):
    """이미지를 가져오거나 디코딩하지 못함."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{_short(source)}: {reason}")
        self.source = source
        self.reason = reason


def _short(source: str, limit: int = 80) -> str:
    return source if len(source) <= limit else source[:limit] + "..."


async def _fetch_url(url: str, timeout: float) -> bytes:
    import aiohttp

    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.get(url) as resp:
            resp.raise_for_status()
            return await resp.read()


def _decode_data_uri(uri: str) -> bytes:
    """data:[<mime>][;base64],<data> 형식만 지원."""
    header, sep, payload = uri.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("base64 data URI만 지원")
    return base64.b64decode(payload, validate=True)


async def _read_source(source: str, timeout: float) -> bytes:
    if source.startswith(("http://", "https://")):
        return await _fetch_url(source, timeout)
    if source.startswith("data:"):
        return _decode_data_uri(source)
    # 디스크 읽기는 스레드에서 해야 timeout이 끊을 수 있다
    return await asyncio.to_thread(Path(source).expanduser().read_bytes)


def decode_image(data: bytes, source: str = "<bytes>") -> Image.Image:
    """바이트를 디코딩하여 픽셀이 로드된 이미지를 반환한다."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(source, f"디코딩 실패 ({e})") from e
    return img


async def load_image(source: str, timeout: float = 10.0) -> Image.Image:
    """이미지 소스를 가져와 디코딩한다. 실패하면 ImageDecodeError.

    timeout(초)이 지나면 실패로 처리한다.
    """
    import aiohttp

    try:
        data = await asyncio.wait_for(_read_source(source, timeout), timeout)
    except asyncio.TimeoutError as e:
        raise ImageDecodeError(source, f"{timeout}초 초과") from e
    except (aiohttp.ClientError, OSError, ValueError) as e:
        raise ImageDecodeError(source, str(e) or type(e).__name__) from e

    img = decode_image(data, source)
    logger.debug("이미지 로드: %s (%dx%d)", _short(source), img.width, img.height)
    return img
