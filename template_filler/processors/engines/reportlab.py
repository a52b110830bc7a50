"""
文件路径：template_filler/processors/engines/reportlab.py

说明：ReportLab 路径：按绘制计划生成图层 PDF，再用 PyPDF2 合并到模板上。
同时提供基于 ReportLab 字体度量的 measure 函数，两种引擎共用以保证换行一致。
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, List, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas
from PyPDF2 import PdfReader, PdfWriter

from ...components import FileHandler, MeasureFn, get_logger
from ..surface import DrawImageOp, DrawTextOp, PlanSurface


logger = get_logger(__name__)


def make_reportlab_measure(font_name: str) -> MeasureFn:
    """返回使用 pdfmetrics.stringWidth 的度量函数。

    字体须已注册（内置 Helvetica 等无需注册）；未注册时首次度量即抛 KeyError，
    属于调用方错误，不做回退。
    """
    pdfmetrics.getFont(font_name)

    def measure(text: str, size: float) -> float:
        return pdfmetrics.stringWidth(text, font_name, size)

    return measure


def build_overlay(
    page_sizes: List[Tuple[float, float]],
    plans: Dict[int, PlanSurface],
    overlay_path: Path,
    *,
    font_name: str,
) -> None:
    """使用 ReportLab 生成仅含绘制内容的图层 PDF，页数与模板一致。"""
    FileHandler.ensure_parent_writable(overlay_path)
    c = canvas.Canvas(str(overlay_path))

    for page_index, (w, h) in enumerate(page_sizes):
        c.setPageSize((w, h))
        plan = plans.get(page_index)
        for op in (plan.ops if plan is not None else []):
            if isinstance(op, DrawTextOp):
                c.setFillColorRGB(*(v / 255.0 for v in op.color))
                c.setFont(op.font or font_name, op.size)
                c.drawString(op.x, op.y, op.text)
            elif isinstance(op, DrawImageOp):
                c.drawImage(
                    ImageReader(BytesIO(op.data)),
                    op.x,
                    op.y,
                    width=op.width,
                    height=op.height,
                    preserveAspectRatio=False,
                    mask="auto",
                )
        c.showPage()

    c.save()


def merge_pdfs(base_pdf: Path, overlay_pdf: Path, output_pdf: Path) -> None:
    """将 overlay 覆盖合并到 base 上，输出到 output_pdf。"""
    base_reader = PdfReader(str(base_pdf))
    overlay_reader = PdfReader(str(overlay_pdf))

    writer = PdfWriter()
    for i, page in enumerate(base_reader.pages):
        if i < len(overlay_reader.pages):
            page.merge_page(overlay_reader.pages[i])
        writer.add_page(page)

    with FileHandler.staged_output(output_pdf) as staged:
        with open(staged, "wb") as f:
            writer.write(f)
    size_kb = Path(output_pdf).stat().st_size / 1024.0
    logger.info("ReportLab 输出完成：%s (%.1f KB)", output_pdf, size_kb)


__all__ = ["make_reportlab_measure", "build_overlay", "merge_pdfs"]
