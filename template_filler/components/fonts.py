"""
文件路径：template_filler/components/fonts.py

说明：字体文件探测与选择。仅使用标准库，供 ReportLab 注册与 PyMuPDF 内嵌共用。
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from ..variables import PATH_CONFIG_DIR, PATH_FONT_FILE

_FONT_SUFFIXES = {".ttf", ".otf"}


def probe_available_fonts() -> List[Path]:
    """探测可用的字体文件（TTF/OTF），按优先级返回去重列表。

    优先级：
    1) 显式指定的 `PATH_FONT_FILE`（若存在）
    2) `config/fonts/` 目录下的 .ttf/.otf 文件（按文件名排序）
    """
    seen: set[str] = set()
    results: List[Path] = []

    def _add(p: Path) -> None:
        key = str(p.resolve())
        if key not in seen and p.exists() and p.suffix.lower() in _FONT_SUFFIXES:
            seen.add(key)
            results.append(p)

    if PATH_FONT_FILE:
        _add(Path(PATH_FONT_FILE))

    fonts_dir = PATH_CONFIG_DIR / "fonts"
    if fonts_dir.exists():
        for p in sorted(list(fonts_dir.glob("*.ttf")) + list(fonts_dir.glob("*.otf"))):
            _add(p)

    return results


def pick_font_file() -> Optional[Path]:
    """选择首个可用的字体文件，若无可用则返回 None（调用方回退内置 Helvetica）。"""
    fonts = probe_available_fonts()
    return fonts[0] if fonts else None


__all__ = ["probe_available_fonts", "pick_font_file"]
