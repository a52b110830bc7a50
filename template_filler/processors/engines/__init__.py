"""
文件路径：template_filler/processors/engines/__init__.py

说明：输出引擎：`reportlab.py`（图层 + PyPDF2 合并）与 `pymupdf.py`（直接回放）。
"""

from typing import List

__all__: List[str] = []
