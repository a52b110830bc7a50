"""
pytest 全局配置：将项目根目录加入 sys.path，确保 `from template_filler...` 可被导入；
并提供测试共用的确定性度量函数与小型图片字节。
"""

from __future__ import annotations

import struct
import sys
import zlib
from io import BytesIO
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


CHAR_WIDTH = 6.0


def char_measure(text: str, size: float) -> float:
    """固定字宽度量：每个字符 6 个单位，与字号无关。"""
    return CHAR_WIDTH * len(text)


@pytest.fixture
def measure():
    return char_measure


def _image_bytes(fmt: str) -> bytes:
    from PIL import Image

    buf = BytesIO()
    Image.new("RGB", (8, 4), (200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")


def _replace_png_idat(data: bytes, payload: bytes) -> bytes:
    """把 PNG 的 IDAT 数据换成 payload，并重算 CRC，使块结构仍然合法。"""
    out = bytearray(data[:8])
    pos = 8
    while pos < len(data):
        (length,) = struct.unpack(">I", data[pos:pos + 4])
        ctype = data[pos + 4:pos + 8]
        body = data[pos + 8:pos + 8 + length]
        if ctype == b"IDAT":
            body = payload
        out += struct.pack(">I", len(body)) + ctype + body
        out += struct.pack(">I", zlib.crc32(ctype + body) & 0xFFFFFFFF)
        pos += 12 + length
    return bytes(out)


@pytest.fixture
def corrupt_png_bytes() -> bytes:
    """CRC 正确但 IDAT 为垃圾数据的 PNG：结构校验能通过，像素解码会失败。"""
    return _replace_png_idat(_image_bytes("PNG"), b"\x00garbage-not-zlib\xff" * 4)
