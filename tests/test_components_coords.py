from __future__ import annotations

from template_filler.components import baseline_y, box_rect_to_draw, clamp_extent, to_draw_y


def test_to_draw_y_bottom_edge():
    # H=1000，盒子顶边 y=100，高 50 -> 底边 1000-100-50
    assert to_draw_y(1000, 100, 50) == 850


def test_single_line_baseline_pad_zero():
    # 单行盒子：pad=0，size=12 -> H - y - 12
    assert baseline_y(1000, 100, 0, pad=0, size=12, line_index=0, line_height=14) == 888


def test_multi_line_baseline_pinned():
    # 第 3 行（i=2）：1000 - 100 - pad4 - size10 - 2*12
    assert baseline_y(1000, 100, 80, pad=4, size=10, line_index=2, line_height=12) == 862


def test_baseline_independent_of_box_height():
    a = baseline_y(842, 300, 0, pad=2, size=14, line_index=1, line_height=16)
    b = baseline_y(842, 300, 420, pad=2, size=14, line_index=1, line_height=16)
    assert a == b == 842 - 300 - 2 - 14 - 16


def test_box_rect_to_draw():
    assert box_rect_to_draw(1000, 10, 20, 30, 40) == (10.0, 940.0, 30.0, 40.0)


def test_clamp_extent():
    assert clamp_extent(-5) == 0.0
    assert clamp_extent(12.5) == 12.5
