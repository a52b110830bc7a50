"""
文件路径：template_filler/variables.py

模块职责：
- 统一管理全局跨模块变量，确保模块化、无冲突、可追溯，可复用。
- 变量命名规范：{分类前缀}_{描述性名称}（全大写+下划线）。
  - PATH_：路径相关
  - STYLE_：样式相关
  - CONST_：通用常量
  - REASON_：覆盖项忽略原因码（稳定字符串，供诊断日志使用）
  - ERR_：错误码

使用说明：
- 业务模块严禁定义新的全局变量，必须从本模块导入所需常量。
- 目录路径均使用 pathlib.Path 对象表示，使用时如需字符串请显式 str() 转换。
"""

from pathlib import Path
from typing import Dict, Optional, Tuple


# =============================
# 路径（PATH_）
# =============================
# 项目根目录：定位到当前文件（variables.py）的上两级目录
PATH_ROOT: Path = Path(__file__).resolve().parents[1]

# 各功能目录
PATH_CONFIG_DIR: Path = PATH_ROOT / "config"
PATH_EXAMPLES_DIR: Path = PATH_ROOT / "examples"
PATH_TEMP_DIR: Path = PATH_ROOT / "temp"
PATH_OUTPUT_DIR: Path = PATH_ROOT / "output"
PATH_LOGS_DIR: Path = PATH_ROOT / "logs"

# 关键文件路径
PATH_LAYOUT_JSON: Path = PATH_CONFIG_DIR / "layout.json"  # 布局覆盖配置（可选）
PATH_DEFAULT_INPUT_PDF: Path = PATH_EXAMPLES_DIR / "blank_template.pdf"  # 示例空白模板
PATH_DEFAULT_REQUEST_JSON: Path = PATH_EXAMPLES_DIR / "request.json"  # 示例填充请求
PATH_LOG_FILE: Path = PATH_LOGS_DIR / "app.log"  # 应用运行日志

# 字体文件（优先使用可嵌入的 TTF/OTF）
PATH_FONT_FILE: Optional[Path] = PATH_CONFIG_DIR / "fonts" / "body.ttf"


# =============================
# 样式（STYLE_）
# =============================
STYLE_FONT_NAME: str = "Helvetica"  # 默认度量与绘制字体（ReportLab 内置）
STYLE_FONT_NAME_EMBEDDED: str = "TemplateBody"  # 注册 TTF/OTF 后使用的字体显示名
STYLE_FONT_NAME_PYMUPDF_BUILTIN: str = "helv"  # PyMuPDF 内置 Helvetica 名称
STYLE_FONT_SIZE_DEFAULT: float = 12.0  # 默认字号（pt）
STYLE_LINE_GAP_DEFAULT: float = 2.0  # 行间额外间距（pt），行高 = size + lineGap
STYLE_PAD_DEFAULT: float = 0.0  # 盒子内边距（pt）
STYLE_ALIGN_DEFAULT: str = "left"
STYLE_TEXT_COLOR_RGB: Tuple[int, int, int] = (0, 0, 0)  # RGB 颜色，黑色
STYLE_EXAMPLE_PAGE_SIZE: Tuple[float, float] = (612.0, 1100.0)  # 示例模板页面尺寸（pt）


# =============================
# 常量（CONST_）
# =============================
CONST_ENCODING: str = "utf-8"  # 文件读写默认编码
CONST_MAX_RETRY: int = 2  # 通用重试次数，用于 IO 等可重试操作
CONST_CLEAN_TEMP_ON_EXIT: bool = True  # 完成后是否清理临时文件
CONST_TEMP_OVERLAY_PREFIX: str = "overlay_"  # 图层临时文件前缀；每次渲染独占一个文件
CONST_DEFAULT_OUTPUT_SUFFIX: str = "_filled.pdf"  # 默认输出文件名后缀
CONST_OUTPUT_PREFIX_DEFAULT: str = ""  # 留空表示使用输入文件名 stem
CONST_PARTIAL_OUTPUT_SUFFIX: str = ".partial"  # 写出过程中的暂存文件后缀，成功后原子替换为目标文件

# maxLines 的“无上限”哨兵值；>= 该值视为不限行数（不触发自动扩高）
CONST_MAX_LINES_UNBOUNDED: int = 9999

# 对齐方式与同义词（仅在输入校验边界使用）
CONST_ALIGN_VALUES: Tuple[str, ...] = ("left", "center", "right")
CONST_ALIGN_SYNONYMS: Dict[str, str] = {"centre": "center"}

# 盒子类型
CONST_BOX_KIND_TEXT: str = "text"
CONST_BOX_KIND_IMAGE: str = "image"

# 覆盖项：可修改属性（线上名称 -> BoxSpec 属性名）
CONST_OVERRIDE_PROPS: Dict[str, str] = {
    "x": "x",
    "y": "y",
    "w": "w",
    "h": "h",
    "size": "size",
    "maxLines": "max_lines",
    "align": "align",
}
# 覆盖项：属性名的等价写法（查询串中大小写/下划线写法各异）
CONST_OVERRIDE_PROP_ALIASES: Dict[str, str] = {
    "maxlines": "maxLines",
    "max_lines": "maxLines",
}
CONST_OVERRIDE_NUMERIC_PROPS: Tuple[str, ...] = ("x", "y", "w", "h", "size", "maxLines")
CONST_OVERRIDE_PREFIX: str = "L"  # 查询串覆盖键前缀，如 L_p6Q_workwith_leaders_q_y=1000
CONST_OVERRIDE_KEY_SEPARATOR: str = "_"

# 覆盖来源及其固定优先级（靠后者覆盖靠前者）
CONST_OVERRIDE_SOURCE_FILE: str = "layout_file"
CONST_OVERRIDE_SOURCE_REQUEST: str = "request_layout"
CONST_OVERRIDE_SOURCE_QUERY: str = "query"
CONST_OVERRIDE_PRECEDENCE: Tuple[str, ...] = (
    CONST_OVERRIDE_SOURCE_FILE,
    CONST_OVERRIDE_SOURCE_REQUEST,
    CONST_OVERRIDE_SOURCE_QUERY,
)

# 页键：形如 p6WorkWith / p6Q，数字为 1 基页码
CONST_PAGE_KEY_PATTERN: str = r"^p(\d+)"

# 结构化文本块展平
CONST_REFLECTION_MARKER: str = "Reflection questions:"
CONST_BULLET_PREFIX: str = "• "

# 图片：魔数签名与拉取配置
CONST_PNG_SIGNATURE: bytes = b"\x89PNG\r\n\x1a\n"
CONST_JPEG_SIGNATURE: bytes = b"\xff\xd8"
CONST_IMAGE_FETCH_TIMEOUT_S: float = 10.0
CONST_IMAGE_FETCH_RETRY: int = 1

# 支持的输出引擎
CONST_ENGINE_REPORTLAB: str = "reportlab"
CONST_ENGINE_PYMUPDF: str = "pymupdf"
CONST_ENGINES: Tuple[str, ...] = (CONST_ENGINE_REPORTLAB, CONST_ENGINE_PYMUPDF)

# 日志格式（供 logging.basicConfig 使用）
CONST_LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONST_LOG_DATEFMT: str = "%Y-%m-%d %H:%M:%S"
CONST_LOG_LEVEL_DEFAULT: str = "INFO"
CONST_LOG_LEVEL_DEBUG: str = "DEBUG"  # --debug 时切换


# =============================
# 覆盖项忽略原因码（REASON_）
# =============================
REASON_BAD_KEY_SHAPE: str = "bad_key_shape"
REASON_UNKNOWN_PAGE: str = "unknown_page"
REASON_UNKNOWN_BOX: str = "unknown_box"
REASON_UNKNOWN_PROP: str = "unknown_prop"
REASON_NOT_A_NUMBER: str = "not_a_number"
REASON_BAD_ALIGN: str = "bad_align"
REASON_OUT_OF_RANGE: str = "out_of_range"

# 字段跳过原因（合成阶段）
REASON_NO_PAGE: str = "no_page"
REASON_NO_BOX: str = "no_box"
REASON_EMPTY_TEXT: str = "empty_text"
REASON_IMAGE_FETCH_FAILED: str = "image_fetch_failed"
REASON_IMAGE_UNDECODABLE: str = "image_undecodable"
REASON_IMAGE_NO_AREA: str = "image_no_area"


# =============================
# 错误码（ERR_）
# =============================
# 1xxx：文件/路径相关
ERR_FILE_NOT_FOUND: int = 1001  # 输入文件不存在
ERR_PATH_NOT_WRITABLE: int = 1003  # 目标路径不可写

# 2xxx：布局/绘制相关
ERR_BOX_NOT_FOUND: int = 2001  # 字段绑定的页或盒子不存在
ERR_OVERRIDE_IGNORED: int = 2002  # 覆盖项被忽略
ERR_IMAGE_SKIPPED: int = 2003  # 图片未绘制

# 3xxx：合并/写入相关
ERR_PDF_MERGE_FAILED: int = 3001  # PDF 合并失败
ERR_PDF_WRITE_FAILED: int = 3002  # PDF 写入失败

# 4xxx：配置/数据相关
ERR_CONFIG_LOAD_FAILED: int = 4001  # 配置加载失败
ERR_DATA_INVALID: int = 4002  # 输入数据非法

# 5xxx：前置条件（致命）
ERR_MEASURE_MISSING: int = 5001  # 缺少文字宽度度量函数
ERR_SURFACE_MISSING: int = 5002  # 缺少绘制表面
ERR_LAYOUT_MISSING: int = 5003  # 缺少默认布局表
ERR_ENGINE_UNKNOWN: int = 5004  # 未知输出引擎


# =============================
# 导出声明
# =============================
__all__ = [name for name in dir() if name.isupper()]
