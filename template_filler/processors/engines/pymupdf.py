"""
文件路径：template_filler/processors/engines/pymupdf.py

说明：PyMuPDF 直接在模板上回放绘制计划。
PyMuPDF 页面坐标原点在左上，回放时将绘制坐标（左下原点）的 y 翻转回去。
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import fitz  # PyMuPDF

from ...components import FileHandler, get_logger
from ...variables import STYLE_FONT_NAME_PYMUPDF_BUILTIN
from ..surface import DrawImageOp, DrawTextOp, PlanSurface


logger = get_logger(__name__)


def fill_with_pymupdf(
    base_pdf: Path,
    plans: Dict[int, PlanSurface],
    output_pdf: Path,
    *,
    font_file: Optional[Path],
    preferred_fontname: str,
) -> Optional[str]:
    """在模板上直接绘制并保存。

    返回实际使用的字体信息（字体文件路径或内置字体名）。
    """
    doc = fitz.open(str(base_pdf))
    try:
        embed = bool(font_file and font_file.exists() and font_file.suffix.lower() in {".ttf", ".otf"})
        fontname_to_use = preferred_fontname if embed else STYLE_FONT_NAME_PYMUPDF_BUILTIN
        font_info: Optional[str] = str(font_file) if embed else fontname_to_use

        for page_index in range(len(doc)):
            plan = plans.get(page_index)
            if plan is None or not plan.ops:
                continue
            page = doc[page_index]
            if embed:
                page.insert_font(fontname=fontname_to_use, fontfile=str(font_file))
            page_h = page.rect.height
            for op in plan.ops:
                if isinstance(op, DrawTextOp):
                    color = tuple(v / 255.0 for v in op.color)
                    page.insert_text(
                        (op.x, page_h - op.y),
                        op.text,
                        fontsize=op.size,
                        fontname=fontname_to_use,
                        color=color,
                    )
                elif isinstance(op, DrawImageOp):
                    rect = fitz.Rect(op.x, page_h - op.y - op.height, op.x + op.width, page_h - op.y)
                    page.insert_image(rect, stream=op.data, keep_proportion=False, overlay=True)

        with FileHandler.staged_output(output_pdf) as staged:
            doc.save(str(staged), deflate=True, garbage=4)
    finally:
        doc.close()

    size_kb = Path(output_pdf).stat().st_size / 1024.0
    logger.info("PyMuPDF 输出完成：%s (%.1f KB)", output_pdf, size_kb)
    return font_info


__all__ = ["fill_with_pymupdf"]
