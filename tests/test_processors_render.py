"""
文件路径：tests/test_processors_render.py

用例目的：验证盒子渲染器的行位置、对齐、自动扩高与截断。度量函数为固定字宽（每字符 6 单位）。
"""

from __future__ import annotations

import pytest

from template_filler.processors.layout import BoxSpec
from template_filler.processors.render import effective_height, layout_box_lines, render_box
from template_filler.processors.surface import PlanSurface


def _surface(height: float = 1000.0) -> PlanSurface:
    return PlanSurface(page_index=0, width=612.0, height=height)


class TestRenderBox:
    def test_wrapped_lines_positions(self, measure):
        box = BoxSpec(x=50, y=100, w=40, size=10, line_gap=2)
        surface = _surface()
        lines = render_box(surface, box, "Alpha beta gamma", measure)
        ops = surface.text_ops
        assert [op.text for op in ops] == ["Alpha", "beta", "gamma"]
        assert [op.y for op in ops] == [890.0, 878.0, 866.0]
        assert all(op.x == 50.0 for op in ops)
        assert len(lines) == 3

    def test_font_and_color_are_forwarded(self, measure):
        surface = _surface()
        render_box(surface, BoxSpec(x=0, y=0, w=100), "hi", measure, font_name="Times-Roman", color=(1, 2, 3))
        op = surface.text_ops[0]
        assert (op.font, op.color, op.size) == ("Times-Roman", (1, 2, 3), 12.0)

    @pytest.mark.parametrize("align,expected_x", [("left", 15.0), ("center", 48.0), ("right", 81.0)])
    def test_alignment(self, measure, align, expected_x):
        box = BoxSpec(x=10, y=0, w=100, pad=5, align=align)
        surface = _surface()
        render_box(surface, box, "abcd", measure)
        assert surface.text_ops[0].x == expected_x

    def test_truncated_to_max_lines(self, measure):
        box = BoxSpec(x=50, y=100, w=40, size=10, line_gap=2, max_lines=2)
        surface = _surface()
        lines = render_box(surface, box, "Alpha beta gamma delta", measure)
        assert [line.text for line in lines] == ["Alpha", "beta"]
        assert len(surface.text_ops) == 2

    def test_max_lines_zero_draws_nothing(self, measure):
        surface = _surface()
        assert render_box(surface, BoxSpec(x=0, y=0, w=100, max_lines=0), "text", measure) == []
        assert surface.ops == []

    def test_pad_shifts_baseline(self, measure):
        box = BoxSpec(x=0, y=100, w=100, size=10, line_gap=2, pad=4)
        surface = _surface()
        render_box(surface, box, "a\nb\nc", measure)
        assert surface.text_ops[2].y == 862.0

    def test_blank_line_kept_but_not_drawn(self, measure):
        box = BoxSpec(x=0, y=100, w=100, size=10, line_gap=2)
        surface = _surface()
        lines = render_box(surface, box, "ab\n\ncd", measure)
        assert [line.text for line in lines] == ["ab", "", "cd"]
        assert [(op.text, op.y) for op in surface.text_ops] == [("ab", 890.0), ("cd", 866.0)]

    @pytest.mark.parametrize("text", ["", "   ", "\n\n", None])
    def test_empty_text_draws_nothing(self, measure, text):
        surface = _surface()
        assert render_box(surface, BoxSpec(x=0, y=0, w=100), text, measure) == []
        assert surface.ops == []

    @pytest.mark.parametrize("w,pad", [(0, 0), (10, 5), (10, 8)])
    def test_no_usable_width_draws_nothing(self, measure, w, pad):
        surface = _surface()
        assert render_box(surface, BoxSpec(x=0, y=0, w=w, pad=pad), "text", measure) == []
        assert surface.ops == []

    def test_missing_surface_is_fatal(self, measure):
        with pytest.raises(ValueError):
            render_box(None, BoxSpec(x=0, y=0, w=100), "text", measure)

    def test_missing_measure_is_fatal(self):
        with pytest.raises(ValueError):
            render_box(_surface(), BoxSpec(x=0, y=0, w=100), "text", None)


class TestEffectiveHeight:
    def test_auto_expand_with_line_limit(self):
        assert effective_height(BoxSpec(x=0, y=0, w=10, size=10, line_gap=2, max_lines=5)) == 58.0

    def test_existing_height_kept_when_larger(self):
        assert effective_height(BoxSpec(x=0, y=0, w=10, h=100, size=10, line_gap=2, max_lines=5)) == 100.0

    def test_unbounded_lines_not_expanded(self):
        assert effective_height(BoxSpec(x=0, y=0, w=10, h=7)) == 7.0

    def test_auto_expand_disabled(self):
        assert effective_height(BoxSpec(x=0, y=0, w=10, max_lines=5, auto_expand=False)) == 0.0

    def test_height_does_not_move_baseline(self, measure):
        short = layout_box_lines(BoxSpec(x=0, y=100, w=100, h=0, max_lines=3), "a b", measure, 1000)
        tall = layout_box_lines(BoxSpec(x=0, y=100, w=100, h=300, max_lines=3), "a b", measure, 1000)
        assert [line.y for line in short] == [line.y for line in tall]
