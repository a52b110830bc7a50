"""
文件路径：template_filler/processors/compositor.py

说明：页面合成器。按字段绑定顺序逐个解析盒子并绘制：
- 文本字段交给盒子渲染器；
- 图片字段经注入的加载器取得字节，按魔数识别格式，缩放到盒子 w×h（不保持纵横比）后绘制。

页或盒子缺失、图片拉取失败或无法解码都只跳过该字段，不影响其余字段。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..components import ErrorHandler, MeasureFn, box_rect_to_draw, get_logger
from ..variables import (
    CONST_BOX_KIND_IMAGE,
    CONST_BOX_KIND_TEXT,
    ERR_BOX_NOT_FOUND,
    ERR_IMAGE_SKIPPED,
    ERR_MEASURE_MISSING,
    REASON_EMPTY_TEXT,
    REASON_IMAGE_FETCH_FAILED,
    REASON_IMAGE_NO_AREA,
    REASON_IMAGE_UNDECODABLE,
    REASON_NO_BOX,
    REASON_NO_PAGE,
    STYLE_FONT_NAME,
    STYLE_TEXT_COLOR_RGB,
)
from .images import ImageDecodeError, decode_image, load_image_bytes
from .layout import BoxSpec, LayoutTable
from .render import render_box
from .surface import RenderSurface


logger = get_logger(__name__)

ImageLoader = Callable[[Any], bytes]


@dataclass(frozen=True)
class FieldBinding:
    """字段绑定：把一个已归一化的值绑定到 (页键, 盒子键)。"""

    page: str
    box: str
    value: Any
    kind: str = CONST_BOX_KIND_TEXT


@dataclass
class CompositeReport:
    """合成结果统计。"""

    drawn: List[Tuple[str, str]] = field(default_factory=list)
    skipped: List[Dict[str, str]] = field(default_factory=list)
    lines: int = 0

    def skip(self, binding: FieldBinding, reason: str) -> None:
        self.skipped.append({"page": binding.page, "box": binding.box, "reason": reason})


def _draw_image_field(
    surface: RenderSurface,
    box: BoxSpec,
    binding: FieldBinding,
    image_loader: ImageLoader,
    report: CompositeReport,
) -> None:
    if box.w <= 0 or box.h <= 0:
        logger.warning("[%s] 图片盒子无面积，已跳过：%s.%s", ERR_IMAGE_SKIPPED, binding.page, binding.box)
        report.skip(binding, REASON_IMAGE_NO_AREA)
        return
    try:
        data = image_loader(binding.value)
    except Exception as exc:  # noqa: BLE001
        logger.warning("[%s] 图片获取失败，已跳过：%s.%s -> %s", ERR_IMAGE_SKIPPED, binding.page, binding.box, exc)
        report.skip(binding, REASON_IMAGE_FETCH_FAILED)
        return
    try:
        fmt, px_size = decode_image(data)
    except ImageDecodeError as exc:
        logger.warning("[%s] 图片无法解码，已跳过：%s.%s -> %s", ERR_IMAGE_SKIPPED, binding.page, binding.box, exc)
        report.skip(binding, REASON_IMAGE_UNDECODABLE)
        return

    x, y, w, h = box_rect_to_draw(surface.get_height(), box.x, box.y, box.w, box.h)
    surface.draw_image(data, x=x, y=y, width=w, height=h)
    logger.info("已绘制图片：%s.%s (%s %sx%s) -> (%.1f, %.1f, %.1f, %.1f)", binding.page, binding.box, fmt, px_size[0], px_size[1], x, y, w, h)
    report.drawn.append((binding.page, binding.box))


def composite(
    pages: Mapping[str, RenderSurface],
    bindings: Iterable[FieldBinding],
    layout: LayoutTable,
    measure: Optional[MeasureFn],
    *,
    image_loader: Optional[ImageLoader] = None,
    font_name: str = STYLE_FONT_NAME,
    color: Tuple[int, int, int] = STYLE_TEXT_COLOR_RGB,
) -> CompositeReport:
    """将字段绑定逐个绘制到对应页面。

    参数：
        pages: 页键 -> 绘制表面；模板页数不足时对应页键缺席即可。
        bindings: 字段绑定，按顺序绘制。
        layout: 已合并覆盖项的布局表（本次渲染独占）。
        measure: 文字宽度度量函数。
        image_loader: 图片加载器；默认 load_image_bytes。

    返回：
        CompositeReport（已绘制字段、跳过字段及原因、绘制行数）。
    """
    if measure is None:
        raise ValueError(ErrorHandler.format_error(ERR_MEASURE_MISSING, "缺少文字宽度度量函数"))
    loader = image_loader or load_image_bytes
    report = CompositeReport()

    for binding in bindings:
        page_boxes = layout.get(binding.page)
        surface = pages.get(binding.page)
        if page_boxes is None or surface is None:
            logger.warning("[%s] 页不存在，字段已跳过：%s.%s", ERR_BOX_NOT_FOUND, binding.page, binding.box)
            report.skip(binding, REASON_NO_PAGE)
            continue
        box = page_boxes.get(binding.box)
        if box is None:
            logger.warning("[%s] 盒子不存在，字段已跳过：%s.%s", ERR_BOX_NOT_FOUND, binding.page, binding.box)
            report.skip(binding, REASON_NO_BOX)
            continue

        if binding.kind == CONST_BOX_KIND_IMAGE or box.kind == CONST_BOX_KIND_IMAGE:
            if binding.value is None or binding.value == "" or binding.value == b"":
                report.skip(binding, REASON_EMPTY_TEXT)
                continue
            _draw_image_field(surface, box, binding, loader, report)
            continue

        text = "" if binding.value is None else str(binding.value)
        lines = render_box(surface, box, text, measure, font_name=font_name, color=color)
        if not lines:
            report.skip(binding, REASON_EMPTY_TEXT)
            continue
        report.drawn.append((binding.page, binding.box))
        report.lines += len(lines)

    return report


__all__ = ["FieldBinding", "CompositeReport", "ImageLoader", "composite"]
