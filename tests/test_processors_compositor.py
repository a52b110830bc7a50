"""
文件路径：tests/test_processors_compositor.py

用例目的：验证页面合成器：缺页/缺盒子只跳过当前字段，图片按盒子矩形拉伸放置，
加载或解码失败只影响图片本身。
"""

from __future__ import annotations

import pytest

from template_filler.processors.compositor import FieldBinding, composite
from template_filler.processors.layout import build_layout_table
from template_filler.processors.surface import PlanSurface


LAYOUT = {
    "p1Header": {"fullName": {"x": 10, "y": 20, "w": 300, "size": 20, "maxLines": 1}},
    "p3Chart": {
        "spider": {"x": 10, "y": 20, "w": 100, "h": 50, "kind": "image"},
        "note": {"x": 10, "y": 200, "w": 300},
    },
}


@pytest.fixture
def pages():
    return {
        "p1Header": PlanSurface(page_index=0, width=612, height=1000),
        "p3Chart": PlanSurface(page_index=2, width=612, height=1000),
    }


@pytest.fixture
def table():
    return build_layout_table(LAYOUT)


class TestCompositeText:
    def test_missing_page_skips_only_that_field(self, pages, table, measure):
        bindings = [
            FieldBinding("p9Missing", "fullName", "ghost"),
            FieldBinding("p1Header", "fullName", "Alex"),
        ]
        report = composite(pages, bindings, table, measure)
        assert report.skipped == [{"page": "p9Missing", "box": "fullName", "reason": "no_page"}]
        assert report.drawn == [("p1Header", "fullName")]
        assert [op.text for op in pages["p1Header"].text_ops] == ["Alex"]

    def test_page_without_surface_is_missing(self, table, measure):
        report = composite({}, [FieldBinding("p1Header", "fullName", "Alex")], table, measure)
        assert report.skipped[0]["reason"] == "no_page"

    def test_missing_box(self, pages, table, measure):
        report = composite(pages, [FieldBinding("p1Header", "nickname", "Al")], table, measure)
        assert report.skipped == [{"page": "p1Header", "box": "nickname", "reason": "no_box"}]
        assert pages["p1Header"].ops == []

    def test_empty_text_reported(self, pages, table, measure):
        report = composite(pages, [FieldBinding("p1Header", "fullName", "  ")], table, measure)
        assert report.skipped[0]["reason"] == "empty_text"

    def test_line_count(self, pages, table, measure):
        report = composite(pages, [FieldBinding("p3Chart", "note", "one\ntwo")], table, measure)
        assert report.lines == 2

    def test_missing_measure_is_fatal(self, pages, table):
        with pytest.raises(ValueError):
            composite(pages, [], table, None)


class TestCompositeImages:
    def test_png_stretched_to_box(self, pages, table, measure, png_bytes):
        report = composite(pages, [FieldBinding("p3Chart", "spider", png_bytes, kind="image")], table, measure)
        op = pages["p3Chart"].image_ops[0]
        assert (op.x, op.y, op.width, op.height) == (10.0, 930.0, 100.0, 50.0)
        assert op.data == png_bytes
        assert report.drawn == [("p3Chart", "spider")]

    def test_box_kind_image_is_enough(self, pages, table, measure, jpeg_bytes):
        composite(pages, [FieldBinding("p3Chart", "spider", jpeg_bytes)], table, measure)
        assert len(pages["p3Chart"].image_ops) == 1

    def test_loader_is_called_with_value(self, pages, table, measure, png_bytes):
        seen = []

        def loader(ref):
            seen.append(ref)
            return png_bytes

        composite(pages, [FieldBinding("p3Chart", "spider", "https://charts.example/x.png", kind="image")], table, measure, image_loader=loader)
        assert seen == ["https://charts.example/x.png"]
        assert len(pages["p3Chart"].image_ops) == 1

    def test_undecodable_bytes_skipped(self, pages, table, measure):
        bindings = [
            FieldBinding("p3Chart", "spider", b"GIF89a-not-supported", kind="image"),
            FieldBinding("p3Chart", "note", "still drawn"),
        ]
        report = composite(pages, bindings, table, measure)
        assert report.skipped[0]["reason"] == "image_undecodable"
        assert pages["p3Chart"].image_ops == []
        assert [op.text for op in pages["p3Chart"].text_ops] == ["still drawn"]

    def test_corrupt_pixel_data_skipped(self, pages, table, measure, corrupt_png_bytes):
        bindings = [
            FieldBinding("p3Chart", "spider", corrupt_png_bytes, kind="image"),
            FieldBinding("p3Chart", "note", "still drawn"),
        ]
        report = composite(pages, bindings, table, measure)
        assert report.skipped == [{"page": "p3Chart", "box": "spider", "reason": "image_undecodable"}]
        assert pages["p3Chart"].image_ops == []
        assert report.drawn == [("p3Chart", "note")]

    def test_loader_failure_skipped(self, pages, table, measure):
        def loader(ref):
            raise OSError("connection reset")

        report = composite(pages, [FieldBinding("p3Chart", "spider", "https://x", kind="image")], table, measure, image_loader=loader)
        assert report.skipped[0]["reason"] == "image_fetch_failed"
        assert pages["p3Chart"].ops == []

    def test_image_box_without_area(self, pages, measure, png_bytes):
        table = build_layout_table({"p3Chart": {"spider": {"x": 0, "y": 0, "w": 100, "h": 0, "kind": "image"}}})
        report = composite(pages, [FieldBinding("p3Chart", "spider", png_bytes)], table, measure)
        assert report.skipped[0]["reason"] == "image_no_area"
