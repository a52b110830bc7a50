"""
文件路径：template_filler/pdf_processor.py

模块职责：
- 门面：模板 PDF + 字段绑定 + 覆盖来源 -> 输出 PDF；
- 流程：读取模板页尺寸（pdfplumber）-> 深拷贝默认布局并按固定优先级合并覆盖项
  -> 为每个页键准备记录型绘制表面 -> 页面合成 -> 由所选引擎回放并写出。

注意：
- 坐标系差异：布局表为左上原点；绘制表面为左下原点（ReportLab/PDF 原生）。
- 输出文件只在完整绘制计划生成后一次性写出，不存在部分输出。

组件调用说明：
- FileHandler（校验与目录确保、输出路径生成）、get_logger、map_page_keys、pick_font_file
- processors.layout / processors.compositor / processors.engines.*
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pdfplumber
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .components import (
    ErrorHandler,
    FileHandler,
    get_logger,
    map_page_keys,
    pick_font_file,
    retry_on_exception,
)
from .default_layout import DEFAULT_LAYOUT
from .processors.compositor import CompositeReport, FieldBinding, ImageLoader, composite
from .processors.engines.pymupdf import fill_with_pymupdf as _engine_pymupdf
from .processors.engines.reportlab import (
    build_overlay as _rl_build_overlay,
    make_reportlab_measure,
    merge_pdfs as _rl_merge_pdfs,
)
from .processors.layout import (
    LayoutResolution,
    LayoutResolver,
    OverrideSource,
    parse_query_overrides,
    parse_structured_overrides,
)
from .processors.surface import PlanSurface
from .variables import (
    STYLE_FONT_NAME,
    STYLE_FONT_NAME_EMBEDDED,
    STYLE_TEXT_COLOR_RGB,
    CONST_TEMP_OVERLAY_PREFIX,
    CONST_ENGINE_PYMUPDF,
    CONST_ENGINE_REPORTLAB,
    CONST_ENGINES,
    CONST_OVERRIDE_PRECEDENCE,
    CONST_OVERRIDE_SOURCE_FILE,
    CONST_OVERRIDE_SOURCE_QUERY,
    CONST_OVERRIDE_SOURCE_REQUEST,
    ERR_ENGINE_UNKNOWN,
    ERR_PDF_MERGE_FAILED,
    ERR_PDF_WRITE_FAILED,
)


logger = get_logger(__name__)


def build_override_sources(
    layout_file_overrides: Optional[Mapping[str, Any]] = None,
    request_layout: Optional[Mapping[str, Any]] = None,
    query_pairs: Optional[Iterable[Tuple[str, Any]]] = None,
) -> List[OverrideSource]:
    """按 CONST_OVERRIDE_PRECEDENCE 组装覆盖来源（默认：布局文件 -> 请求内 layout -> 查询串，靠后者胜出）。"""
    parsers = {
        CONST_OVERRIDE_SOURCE_FILE: lambda: parse_structured_overrides(layout_file_overrides, CONST_OVERRIDE_SOURCE_FILE),
        CONST_OVERRIDE_SOURCE_REQUEST: lambda: parse_structured_overrides(request_layout, CONST_OVERRIDE_SOURCE_REQUEST),
        CONST_OVERRIDE_SOURCE_QUERY: lambda: parse_query_overrides(query_pairs or [], source=CONST_OVERRIDE_SOURCE_QUERY),
    }
    return [parsers[name]() for name in CONST_OVERRIDE_PRECEDENCE]


class PDFProcessor:
    """PDF 模板填充器：布局解析、页面合成与输出。

    用法示例：
        processor = PDFProcessor()
        out = processor.fill_template(
            Path("examples/blank_template.pdf"),
            [FieldBinding("p6Q", "workwith_leaders_q", "• How do you adapt?")],
            query_pairs=[("L_p6Q_workwith_leaders_q_y", "1000")],
        )
    """

    def __init__(self, default_layout: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self.resolver = LayoutResolver(DEFAULT_LAYOUT if default_layout is None else default_layout)
        self.font_file: Optional[Path] = None
        self.font_registered_name: str = STYLE_FONT_NAME
        # 运行时信息：用于 CLI/日志展示
        self.last_engine_used: Optional[str] = None
        self.last_font_info: Optional[str] = None
        # 最近一次填充统计：total/drawn/skipped(list)/skipped_count/lines
        self.last_fill_stats: Optional[dict] = None
        # 仅在 debug 模式下记录：applied/ignored 覆盖项明细
        self.last_layout_debug: Optional[dict] = None
        self._ensure_font_registered()

    def _ensure_font_registered(self) -> None:
        """注册可嵌入的 TTF/OTF；找不到时使用 ReportLab 内置 Helvetica（无需注册）。"""
        font_file = pick_font_file()
        if font_file is None:
            return
        try:
            pdfmetrics.registerFont(TTFont(STYLE_FONT_NAME_EMBEDDED, str(font_file)))
        except Exception as exc:  # noqa: BLE001
            logger.warning("注册字体失败：%s，原因：%s，将使用 %s", font_file, exc, STYLE_FONT_NAME)
            return
        self.font_file = font_file
        self.font_registered_name = STYLE_FONT_NAME_EMBEDDED
        logger.info("已注册字体：%s -> %s", STYLE_FONT_NAME_EMBEDDED, font_file)

    # -----------------------------
    # 布局解析
    # -----------------------------
    def resolve_layout(self, sources: Sequence[OverrideSource]) -> LayoutResolution:
        return self.resolver.resolve(sources)

    # -----------------------------
    # 绘制计划
    # -----------------------------
    def build_plans(
        self,
        page_sizes: List[Tuple[float, float]],
        bindings: Iterable[FieldBinding],
        resolution: LayoutResolution,
        image_loader: Optional[ImageLoader] = None,
    ) -> Tuple[Dict[int, PlanSurface], CompositeReport]:
        """为每个可映射的页键准备表面并合成，返回 {页索引: PlanSurface} 与统计。"""
        key_to_index = map_page_keys(resolution.table.keys(), total_pages=len(page_sizes))
        plans: Dict[int, PlanSurface] = {}
        pages: Dict[str, PlanSurface] = {}
        for key, idx in key_to_index.items():
            if idx not in plans:
                w, h = page_sizes[idx]
                plans[idx] = PlanSurface(page_index=idx, width=w, height=h)
            pages[key] = plans[idx]

        report = composite(
            pages,
            bindings,
            resolution.table,
            make_reportlab_measure(self.font_registered_name),
            image_loader=image_loader,
            font_name=self.font_registered_name,
            color=STYLE_TEXT_COLOR_RGB,
        )
        return plans, report

    # -----------------------------
    # 模板填充
    # -----------------------------
    def fill_template(
        self,
        template_pdf: Path,
        bindings: Iterable[FieldBinding],
        *,
        layout_file_overrides: Optional[Mapping[str, Any]] = None,
        request_layout: Optional[Mapping[str, Any]] = None,
        query_pairs: Optional[Iterable[Tuple[str, Any]]] = None,
        output_path: Optional[Path] = None,
        engine: str = CONST_ENGINE_REPORTLAB,
        image_loader: Optional[ImageLoader] = None,
        debug: bool = False,
    ) -> Path:
        """根据字段绑定填充模板，并生成新的 PDF。

        参数：
            template_pdf: 模板 PDF。
            bindings: 字段绑定（已归一化）。
            layout_file_overrides / request_layout / query_pairs: 三类覆盖来源，按此顺序应用。
            output_path: 输出文件路径；不提供时自动生成到 output 目录。
            engine: "reportlab" 或 "pymupdf"。
            image_loader: 图片加载器；默认按 URL/本地路径加载。
            debug: 为 True 时记录覆盖项明细到 last_layout_debug。

        返回：
            最终输出 PDF 路径。
        """
        if engine not in CONST_ENGINES:
            raise ValueError(ErrorHandler.format_error(ERR_ENGINE_UNKNOWN, f"未知输出引擎：{engine}"))
        FileHandler.validate_readable_file(template_pdf)
        FileHandler.ensure_project_dirs()

        with pdfplumber.open(str(template_pdf)) as pdf:
            page_sizes = [(float(p.width), float(p.height)) for p in pdf.pages]

        bindings = list(bindings)
        resolution = self.resolve_layout(build_override_sources(layout_file_overrides, request_layout, query_pairs))
        self.last_layout_debug = resolution.debug_dict() if debug else None
        if debug:
            self.last_layout_debug["layout"] = {
                page: {box: spec.to_dict() for box, spec in boxes.items()}
                for page, boxes in resolution.table.items()
            }

        plans, report = self.build_plans(page_sizes, bindings, resolution, image_loader=image_loader)
        self.last_fill_stats = {
            "total": len(bindings),
            "drawn": len(report.drawn),
            "skipped_count": len(report.skipped),
            "skipped": list(report.skipped),
            "lines": report.lines,
        }
        if not report.drawn:
            logger.warning("未绘制任何字段，输出将与模板一致")

        out = output_path if output_path is not None else FileHandler.timestamped_output_path(template_pdf)

        if engine == CONST_ENGINE_PYMUPDF:
            try:
                self.last_font_info = _engine_pymupdf(
                    template_pdf,
                    plans,
                    out,
                    font_file=self.font_file,
                    preferred_fontname=self.font_registered_name,
                )
            except Exception as exc:  # noqa: BLE001
                raise RuntimeError(ErrorHandler.format_error(ERR_PDF_WRITE_FAILED, f"使用 PyMuPDF 写入失败: {exc}")) from exc
            self.last_engine_used = CONST_ENGINE_PYMUPDF
            return out

        # 图层文件每次调用独占，并发渲染互不干扰
        with FileHandler.scratch_file(CONST_TEMP_OVERLAY_PREFIX) as overlay_pdf:
            try:
                self._build_overlay(page_sizes, plans, overlay_pdf)
            except Exception as exc:  # noqa: BLE001
                raise RuntimeError(ErrorHandler.format_error(ERR_PDF_WRITE_FAILED, f"图层生成失败: {exc}")) from exc
            try:
                self._merge_pdfs(template_pdf, overlay_pdf, out)
            except Exception as exc:  # noqa: BLE001
                raise RuntimeError(ErrorHandler.format_error(ERR_PDF_MERGE_FAILED, f"PDF 合并失败: {exc}")) from exc
        self.last_engine_used = CONST_ENGINE_REPORTLAB
        self.last_font_info = self.font_registered_name
        return out

    @retry_on_exception(exceptions=(OSError,))
    def _build_overlay(
        self,
        page_sizes: List[Tuple[float, float]],
        plans: Dict[int, PlanSurface],
        overlay_path: Path,
    ) -> None:
        _rl_build_overlay(page_sizes, plans, overlay_path, font_name=self.font_registered_name)

    @retry_on_exception(exceptions=(OSError,))
    def _merge_pdfs(self, base_pdf: Path, overlay_pdf: Path, output_pdf: Path) -> None:
        _rl_merge_pdfs(base_pdf, overlay_pdf, output_pdf)


__all__ = [
    "PDFProcessor",
    "build_override_sources",
]
