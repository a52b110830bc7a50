"""
文件路径：main.py

命令行入口：
- 功能：读取模板 PDF，按布局表把字段文字与图表图片绘制到固定盒子中，输出到 output 目录。
- 依赖：`template_filler/pdf_processor.py`、`template_filler/data_handler.py`、`template_filler/variables.py`。

快速使用示例：
    # 1) 生成示例模板与示例请求（6 页空白模板 + examples/request.json）
    python main.py --make-example

    # 2) 使用请求 JSON 进行填充
    python main.py --input examples/blank_template.pdf --data-json examples/request.json

    # 3) 临时微调布局（可多次传入 --override，或传入整段查询串 --query）
    python main.py --data-json examples/request.json --override "L_p6Q_workwith_leaders_q_y=1000" --debug

运行说明：
- 布局覆盖优先级（靠后者胜出）：--layout-json 文件 < 请求 JSON 中的 layout < --query/--override；
- 非法覆盖项不会中断渲染，--debug 会打印已应用/已忽略的覆盖项明细。
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Tuple

from template_filler.components import FileHandler, get_logger, set_log_level
from template_filler.data_handler import (
    RenderRequest,
    load_layout_config,
    load_render_request,
    parse_query_string,
)
from template_filler.pdf_processor import PDFProcessor
from template_filler.variables import (
    PATH_DEFAULT_INPUT_PDF,
    PATH_DEFAULT_REQUEST_JSON,
    PATH_EXAMPLES_DIR,
    STYLE_EXAMPLE_PAGE_SIZE,
    CONST_DEFAULT_OUTPUT_SUFFIX,
    CONST_ENCODING,
    CONST_ENGINE_REPORTLAB,
    CONST_ENGINES,
    CONST_LOG_LEVEL_DEBUG,
)


logger = get_logger(__name__)

_EXAMPLE_REQUEST = {
    "fields": [
        {"page": "p1Header", "box": "fullName", "value": "Alex Example"},
        {"page": "p1Header", "box": "dateLabel", "value": "October 2026"},
        {
            "page": "p2Exec",
            "box": ["exec_summary_para1", "exec_summary_para2"],
            "value": "You tend to stay composed under pressure. You prefer to think before you respond.\n\n"
            "Others read this as steadiness. Under time pressure it can look like hesitation.",
        },
        {"page": "p6WorkWith", "box": "collabC", "value": "Give them time to process before asking for a decision."},
        {"page": "p6WorkWith", "box": "collabT", "value": "Name the tension early and agree on next steps."},
        {"page": "p6Q", "box": "workwith_colleagues_q", "value": "How do you signal that you need more time?", "bullet": True},
        {"page": "p6Q", "box": "workwith_leaders_q", "value": "What would help your leader read you better?", "bullet": True},
    ],
    "layout": {},
    "query": "",
}


def _ensure_example_files() -> Tuple[Path, Path]:
    """若示例模板或示例请求不存在，则生成。

    模板为 6 页空白页，每页左上角标注页码，便于核对绘制位置。
    """
    from reportlab.pdfgen import canvas  # 延迟导入以加快 CLI 启动

    PATH_EXAMPLES_DIR.mkdir(parents=True, exist_ok=True)
    pdf_path = PATH_DEFAULT_INPUT_PDF
    if not pdf_path.exists():
        c = canvas.Canvas(str(pdf_path))
        w, h = STYLE_EXAMPLE_PAGE_SIZE
        for page_no in range(1, 7):
            c.setPageSize((w, h))
            c.setFont("Helvetica", 9)
            c.drawString(20, h - 20, f"page {page_no}")
            c.showPage()
        c.save()
        logger.info("已生成示例模板：%s", pdf_path)

    req_path = PATH_DEFAULT_REQUEST_JSON
    if not req_path.exists():
        req_path.write_text(json.dumps(_EXAMPLE_REQUEST, ensure_ascii=False, indent=2), encoding=CONST_ENCODING)
        logger.info("已生成示例请求：%s", req_path)
    return pdf_path, req_path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PDF 模板填充工具（固定盒子布局 + 覆盖项微调）")
    parser.add_argument("--input", type=Path, default=PATH_DEFAULT_INPUT_PDF, help="模板 PDF 路径")
    parser.add_argument("--output", type=Path, default=None, help="输出 PDF 路径（可省略，自动生成）")
    parser.add_argument("--output-prefix", dest="output_prefix", type=str, default=None, help="输出文件名前缀（覆盖模板文件名 stem）")
    parser.add_argument("--data-json", dest="data_json", type=Path, default=None, help="填充请求 JSON（fields/layout/query）")
    parser.add_argument("--layout-json", dest="layout_json", type=Path, default=None, help="布局覆盖 JSON 文件 {page: {box: {prop: value}}}")
    parser.add_argument("--query", type=str, default=None, help="URL 风格覆盖查询串，如 'L_p6Q_workwith_leaders_q_y=1000&...'")
    parser.add_argument("--override", action="append", default=None, help="单条覆盖 'L_<page>_<box>_<prop>=值'，可重复")
    parser.add_argument("--engine", type=str, choices=list(CONST_ENGINES), default=CONST_ENGINE_REPORTLAB, help="输出引擎：reportlab/pymupdf")
    parser.add_argument("--debug", action="store_true", help="打印已应用/已忽略的覆盖项明细，并输出 DEBUG 级日志")
    parser.add_argument("--make-example", action="store_true", help="若示例模板/请求不存在则生成")
    return parser.parse_args()


def build_query_pairs(args: argparse.Namespace, request: RenderRequest) -> List[Tuple[str, str]]:
    """请求内查询串在前，命令行 --query / --override 在后（后者胜出）。"""
    pairs: List[Tuple[str, str]] = list(request.query_pairs)
    pairs.extend(parse_query_string(args.query))
    for item in args.override or []:
        if "=" not in item:
            raise SystemExit("--override 需为 'L_<page>_<box>_<prop>=值' 格式")
        k, v = item.split("=", 1)
        pairs.append((k.strip(), v.strip()))
    return pairs


def main() -> None:
    args = parse_args()
    if args.debug:
        set_log_level(CONST_LOG_LEVEL_DEBUG)
    if args.make_example:
        pdf_path, req_path = _ensure_example_files()
        print(f"示例文件已就绪：{pdf_path} / {req_path}")
        return

    template_pdf: Path = args.input
    if not template_pdf.exists():
        logger.warning("模板 PDF 不存在：%s，将生成示例模板以便测试。", template_pdf)
        template_pdf, _ = _ensure_example_files()

    request = load_render_request(args.data_json) if args.data_json else RenderRequest()
    if not request.bindings:
        logger.warning("未提供任何字段，输出将与模板一致")

    layout_file_overrides = load_layout_config(args.layout_json)

    if args.output is None and args.output_prefix:
        args.output = FileHandler.timestamped_output_path(
            template_pdf,
            suffix=CONST_DEFAULT_OUTPUT_SUFFIX,
            prefix=args.output_prefix,
        )

    processor = PDFProcessor()
    out = processor.fill_template(
        template_pdf,
        request.bindings,
        layout_file_overrides=layout_file_overrides,
        request_layout=request.layout,
        query_pairs=build_query_pairs(args, request),
        output_path=args.output,
        engine=args.engine,
        debug=args.debug,
    )
    print(f"填充完成，保存至：{out}")

    stats = processor.last_fill_stats or {}
    skipped = stats.get("skipped", [])
    if skipped:
        desc = ", ".join(f"{s['page']}.{s['box']}({s['reason']})" for s in skipped)
        print(f"未绘制字段：{len(skipped)} 项 -> {desc}")
    else:
        print("未绘制字段：0")

    if args.debug and processor.last_layout_debug is not None:
        print(json.dumps(processor.last_layout_debug, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
