"""이미지 로드 테스트 — 로컬 파일, data URI, 실패 처리."""

import asyncio
import base64
import time
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from content.images import ImageDecodeError, decode_image, load_image


def _png_bytes(size=(8, 6), color=(10, 200, 30)):
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def test_load_local_file(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(_png_bytes())
    img = asyncio.run(load_image(str(path)))
    assert img.size == (8, 6)


def test_load_data_uri():
    uri = "data:image/png;base64," + base64.b64encode(_png_bytes((3, 4))).decode()
    img = asyncio.run(load_image(uri))
    assert img.size == (3, 4)


def test_missing_file_raises_decode_error(tmp_path):
    missing = str(tmp_path / "nope.png")
    with pytest.raises(ImageDecodeError) as exc:
        asyncio.run(load_image(missing))
    assert exc.value.source == missing


def test_garbage_bytes_raise_decode_error(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(ImageDecodeError):
        asyncio.run(load_image(str(path)))


@pytest.mark.parametrize("uri", [
    "data:image/png,rawdata",
    "data:image/png;base64,!!!not base64!!!",
])
def test_bad_data_uri_raises_decode_error(uri):
    with pytest.raises(ImageDecodeError):
        asyncio.run(load_image(uri))


def test_decode_image_truncated():
    buf = BytesIO()
    Image.effect_noise((64, 64), 80).save(buf, format="PNG")
    data = buf.getvalue()[: len(buf.getvalue()) // 2]
    with pytest.raises(ImageDecodeError):
        decode_image(data)


def test_slow_local_read_times_out(tmp_path, monkeypatch):
    path = tmp_path / "slow.png"
    path.write_bytes(_png_bytes())
    read_bytes = Path.read_bytes

    def slow_read(self):
        time.sleep(0.5)
        return read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", slow_read)

    async def load():
        started = time.monotonic()
        with pytest.raises(ImageDecodeError, match="초과"):
            await load_image(str(path), timeout=0.05)
        return time.monotonic() - started

    # 파일 읽기가 끝나기 전에 timeout으로 실패한다
    assert asyncio.run(load()) < 0.4
