"""
文件路径：template_filler/components/coords.py

说明：坐标换算相关通用函数。

- 作者坐标系：原点左上，y 向下增长（布局表中的 x/y 均为此坐标系）。
- 绘制坐标系：原点左下，y 向上增长（ReportLab/PDF 原生坐标系）。
所有文本行与图片都经由本模块的同一组公式换算，不为任何盒子类型单独开分支。
"""

from __future__ import annotations

from typing import Tuple


def to_draw_y(surface_height: float, box_top_y: float, box_height: float) -> float:
    """返回盒子底边在绘制坐标系中的 y。

    参数：
        surface_height: 页面高度 H（pt）。
        box_top_y: 盒子顶边 y（作者坐标，自顶向下量）。
        box_height: 盒子高度。

    返回：
        H - box_top_y - box_height
    """
    return float(surface_height) - float(box_top_y) - float(box_height)


def baseline_y(
    surface_height: float,
    box_top_y: float,
    box_height: float,
    pad: float,
    size: float,
    line_index: int,
    line_height: float,
) -> float:
    """返回盒内第 line_index 行（0 基）文本基线在绘制坐标系中的 y。

    公式：(H - y - h) + h - pad - size - i * line_height，
    即 H - y - pad - size - i * line_height；盒子高度在公式中相互抵消。
    """
    bottom = to_draw_y(surface_height, box_top_y, box_height)
    return bottom + float(box_height) - float(pad) - float(size) - int(line_index) * float(line_height)


def box_rect_to_draw(
    surface_height: float,
    x: float,
    y: float,
    w: float,
    h: float,
) -> Tuple[float, float, float, float]:
    """将作者坐标系的盒子矩形换算为绘制坐标系 (x, y_bottom, width, height)。"""
    return float(x), to_draw_y(surface_height, y, h), float(w), float(h)


def clamp_extent(value: float) -> float:
    """宽高等尺寸量钳制为非负。"""
    return max(0.0, float(value))


__all__ = [
    "to_draw_y",
    "baseline_y",
    "box_rect_to_draw",
    "clamp_extent",
]
