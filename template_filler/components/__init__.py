"""
文件路径：template_filler/components/__init__.py

说明：
- 通用组件包入口，按职责拆分为：
  `logging.py`（日志/重试/错误格式化）、`io.py`（路径与输出写入）、
  `coords.py`（坐标换算）、`text.py`（换行）、`page.py`（页键映射）、`fonts.py`（字体探测）；
- 业务模块统一使用 `from template_filler.components import ...`。
"""

from __future__ import annotations

from .coords import baseline_y, box_rect_to_draw, clamp_extent, to_draw_y
from .fonts import pick_font_file, probe_available_fonts
from .io import FileHandler
from .logging import ErrorHandler, get_logger, retry_on_exception, set_log_level
from .page import map_page_keys, page_index_from_key
from .text import MeasureFn, wrap_text


__all__ = [
    # 日志、重试与错误处理
    "get_logger",
    "set_log_level",
    "retry_on_exception",
    "ErrorHandler",
    # 文件操作
    "FileHandler",
    # 坐标换算
    "to_draw_y",
    "baseline_y",
    "box_rect_to_draw",
    "clamp_extent",
    # 文本换行
    "MeasureFn",
    "wrap_text",
    # 页键映射
    "page_index_from_key",
    "map_page_keys",
    # 字体探测
    "probe_available_fonts",
    "pick_font_file",
]
