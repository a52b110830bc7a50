"""
文件路径：tests/test_processors_images.py

用例目的：验证图片格式识别、Pillow 校验以及 URL/本地路径加载（httpx 以 monkeypatch 替换，不访问网络）。
"""

from __future__ import annotations

import time

import httpx
import pytest

from template_filler.processors import images
from template_filler.processors.images import (
    ImageDecodeError,
    decode_image,
    detect_image_format,
    load_image_bytes,
)


class TestDetectAndDecode:
    def test_signatures(self, png_bytes, jpeg_bytes):
        assert detect_image_format(png_bytes) == "png"
        assert detect_image_format(jpeg_bytes) == "jpeg"
        assert detect_image_format(b"GIF89a") is None
        assert detect_image_format(b"") is None

    def test_decode_reports_size(self, png_bytes):
        assert decode_image(png_bytes) == ("png", (8, 4))

    def test_truncated_png_rejected(self, png_bytes):
        with pytest.raises(ImageDecodeError):
            decode_image(png_bytes[:20])

    def test_corrupt_pixel_data_rejected(self, corrupt_png_bytes):
        # 块结构与 CRC 均合法，只有像素数据损坏
        assert detect_image_format(corrupt_png_bytes) == "png"
        with pytest.raises(ImageDecodeError):
            decode_image(corrupt_png_bytes)

    def test_unknown_signature_rejected(self):
        with pytest.raises(ImageDecodeError):
            decode_image(b"<svg></svg>")


class TestLoadImageBytes:
    def test_bytes_pass_through(self, png_bytes):
        assert load_image_bytes(bytearray(png_bytes)) == png_bytes

    def test_local_path(self, tmp_path, jpeg_bytes):
        path = tmp_path / "chart.jpg"
        path.write_bytes(jpeg_bytes)
        assert load_image_bytes(str(path)) == jpeg_bytes
        assert load_image_bytes(path) == jpeg_bytes

    def test_missing_local_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image_bytes(tmp_path / "nope.png")

    def test_url_fetched_with_httpx(self, monkeypatch, png_bytes):
        calls = []

        def fake_get(url, **kwargs):
            calls.append((url, kwargs))
            return httpx.Response(200, content=png_bytes, request=httpx.Request("GET", url))

        monkeypatch.setattr(images.httpx, "get", fake_get)
        assert load_image_bytes("https://charts.example/spider.png") == png_bytes
        url, kwargs = calls[0]
        assert url == "https://charts.example/spider.png"
        assert kwargs["follow_redirects"] is True
        assert kwargs["timeout"] > 0

    def test_http_error_status_raises(self, monkeypatch):
        def fake_get(url, **kwargs):
            return httpx.Response(404, request=httpx.Request("GET", url))

        monkeypatch.setattr(images.httpx, "get", fake_get)
        with pytest.raises(httpx.HTTPStatusError):
            load_image_bytes("http://charts.example/missing.png")

    def test_transport_error_retried(self, monkeypatch, png_bytes):
        attempts = []

        def flaky_get(url, **kwargs):
            attempts.append(url)
            if len(attempts) == 1:
                raise httpx.ConnectError("boom", request=httpx.Request("GET", url))
            return httpx.Response(200, content=png_bytes, request=httpx.Request("GET", url))

        monkeypatch.setattr(images.httpx, "get", flaky_get)
        monkeypatch.setattr(time, "sleep", lambda s: None)
        assert load_image_bytes("https://charts.example/spider.png") == png_bytes
        assert len(attempts) == 2
