"""
文件路径：template_filler/processors/images.py

说明：图表图片的加载与格式识别。

- detect_image_format：按魔数签名识别 PNG / JPEG；
- decode_image：用 Pillow 校验结构并完整解码像素，返回格式与像素尺寸；
- load_image_bytes：默认图片加载器，http(s) 地址经 httpx 拉取（带超时与重试），其余视为本地路径。
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

import httpx
from PIL import Image, UnidentifiedImageError

from ..components import get_logger, retry_on_exception
from ..variables import (
    CONST_IMAGE_FETCH_RETRY,
    CONST_IMAGE_FETCH_TIMEOUT_S,
    CONST_JPEG_SIGNATURE,
    CONST_PNG_SIGNATURE,
)


logger = get_logger(__name__)

ImageRef = Union[bytes, bytearray, str, Path]


class ImageDecodeError(ValueError):
    """图片字节既不是 PNG 也不是 JPEG，或无法被解码。"""


def detect_image_format(data: Optional[bytes]) -> Optional[str]:
    """按魔数返回 "png" / "jpeg"，无法识别返回 None。"""
    if not data:
        return None
    if data.startswith(CONST_PNG_SIGNATURE):
        return "png"
    if data.startswith(CONST_JPEG_SIGNATURE):
        return "jpeg"
    return None


def decode_image(data: Optional[bytes]) -> Tuple[str, Tuple[int, int]]:
    """校验图片字节，返回 (格式, (宽, 高))。

    异常：
        ImageDecodeError: 魔数不匹配或 Pillow 无法解码。
    """
    fmt = detect_image_format(data)
    if fmt is None:
        raise ImageDecodeError("图片签名既非 PNG 也非 JPEG")
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
            size = img.size
        # verify 只校验块结构与 CRC，像素数据须真正解码一次
        with Image.open(BytesIO(data)) as img:
            img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise ImageDecodeError(f"图片无法解码：{exc}") from exc
    return fmt, size


@retry_on_exception(retries=CONST_IMAGE_FETCH_RETRY, exceptions=(httpx.TransportError,))
def fetch_image_url(url: str, timeout_s: float = CONST_IMAGE_FETCH_TIMEOUT_S) -> bytes:
    """拉取远程图片；非 2xx 响应抛出 httpx.HTTPStatusError（不重试）。"""
    resp = httpx.get(url, timeout=timeout_s, follow_redirects=True)
    resp.raise_for_status()
    return resp.content


def load_image_bytes(ref: ImageRef) -> bytes:
    """默认图片加载器：bytes 原样返回，http(s) 地址远程拉取，其余按本地路径读取。"""
    if isinstance(ref, (bytes, bytearray)):
        return bytes(ref)
    text = str(ref).strip()
    if text.lower().startswith(("http://", "https://")):
        data = fetch_image_url(text)
        logger.info("已拉取图片：%s (%.1f KB)", text, len(data) / 1024.0)
        return data
    return Path(text).read_bytes()


__all__ = [
    "ImageRef",
    "ImageDecodeError",
    "detect_image_format",
    "decode_image",
    "fetch_image_url",
    "load_image_bytes",
]
