"""
文件路径：template_filler/components/text.py

说明：文本度量与按宽度贪心换行。换行只依赖外部传入的度量函数，不绑定任何字体库。
"""

from __future__ import annotations

import re
from typing import Callable, List

# 度量函数：(文本, 字号) -> 宽度（pt）
MeasureFn = Callable[[str, float], float]

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def wrap_text(
    text: str,
    measure: MeasureFn,
    size: float,
    max_width: float,
) -> List[str]:
    """按最大行宽将文本贪心换行。

    规则：
    - 先按显式换行符拆分，每段独立换行（保留段落/问题之间的刻意换行）；
    - 段内按空白拆词，逐词拼接候选行，并对“整个候选行”调用 measure 度量；
    - 候选行超宽且当前行非空时，输出当前行，以溢出的词开启新行；
    - 单个词超宽时独占一行，不在词内断开；
    - 空段输出空行，但整块文本末尾的空行会被裁掉。

    同一组 (text, size, max_width, measure) 总是得到相同结果。
    """
    if text is None:
        return []

    lines: List[str] = []
    for unit in _NEWLINE_RE.split(str(text)):
        words = unit.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if current and measure(candidate, size) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)

    while lines and lines[-1] == "":
        lines.pop()
    return lines


__all__ = [
    "MeasureFn",
    "wrap_text",
]
