"""
文件路径：template_filler/processors/render.py

说明：盒子渲染器。给定已解析的 BoxSpec、单个字符串与度量函数，计算最终行集合，
并对每个保留行向绘制表面发出一次 draw_text。

步骤：
1) 文本去空白后为空：不绘制任何内容，模板原有空白底图保持不变；
2) auto_expand 且行数有限：h = max(h, pad*2 + size + (max_lines-1)*(size+line_gap))；
3) 按 w - pad*2 换行；
4) 最多保留 max_lines 行，其余静默截断；
5) 按对齐方式计算 x，经坐标换算得到基线 y。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..components import ErrorHandler, MeasureFn, baseline_y, get_logger, wrap_text
from ..variables import (
    ERR_MEASURE_MISSING,
    ERR_SURFACE_MISSING,
    STYLE_FONT_NAME,
    STYLE_TEXT_COLOR_RGB,
)
from .layout import BoxSpec
from .surface import RenderSurface


logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderLine:
    """换行结果中的一行及其绘制位置（绘制坐标系）。"""

    text: str
    line_index: int
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0


def effective_height(box: BoxSpec) -> float:
    """计算盒子的有效高度（含自动扩高）。"""
    h = float(box.h)
    if box.auto_expand and box.has_line_limit and int(box.max_lines) >= 1:
        needed = box.pad * 2 + box.size + (int(box.max_lines) - 1) * box.line_height
        h = max(h, needed)
    return h


def _line_x(box: BoxSpec, line_width: float) -> float:
    if box.align == "center":
        return box.x + (box.w - line_width) / 2.0
    if box.align == "right":
        return box.x + box.w - box.pad - line_width
    return box.x + box.pad


def layout_box_lines(
    box: BoxSpec,
    text: Optional[str],
    measure: Optional[MeasureFn],
    surface_height: float,
) -> List[RenderLine]:
    """纯计算：返回应绘制的行（含 x/y），不触碰绘制表面。"""
    if measure is None:
        raise ValueError(ErrorHandler.format_error(ERR_MEASURE_MISSING, "缺少文字宽度度量函数"))
    if text is None or not str(text).strip():
        return []

    max_width = box.w - box.pad * 2
    if max_width <= 0:
        return []

    h = effective_height(box)
    wrapped = wrap_text(str(text), measure, box.size, max_width)
    kept = wrapped[: max(0, int(box.max_lines))]
    if len(kept) < len(wrapped):
        logger.debug("文本超出行数上限已截断：保留 %s / %s 行", len(kept), len(wrapped))

    lines: List[RenderLine] = []
    for i, line in enumerate(kept):
        width = measure(line, box.size)
        lines.append(
            RenderLine(
                text=line,
                line_index=i,
                x=_line_x(box, width),
                y=baseline_y(surface_height, box.y, h, box.pad, box.size, i, box.line_height),
                width=width,
            )
        )
    return lines


def render_box(
    surface: Optional[RenderSurface],
    box: BoxSpec,
    text: Optional[str],
    measure: Optional[MeasureFn],
    *,
    font_name: str = STYLE_FONT_NAME,
    color: Tuple[int, int, int] = STYLE_TEXT_COLOR_RGB,
) -> List[RenderLine]:
    """渲染一个文本盒子，返回实际绘制的行。

    异常：
        ValueError: 缺少绘制表面或度量函数（调用方错误，属致命前置条件）。
    """
    if surface is None:
        raise ValueError(ErrorHandler.format_error(ERR_SURFACE_MISSING, "缺少绘制表面"))
    lines = layout_box_lines(box, text, measure, surface.get_height())
    for line in lines:
        if not line.text:
            continue
        surface.draw_text(line.text, x=line.x, y=line.y, size=box.size, font=font_name, color=color)
    return lines


__all__ = ["RenderLine", "effective_height", "layout_box_lines", "render_box"]
