"""
文件路径：template_filler/components/page.py

说明：布局页键与模板物理页之间的映射。
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Optional

from ..variables import CONST_PAGE_KEY_PATTERN

_PAGE_KEY_RE = re.compile(CONST_PAGE_KEY_PATTERN)


def page_index_from_key(page_key: str) -> Optional[int]:
    """由页键推断 0 基页索引，如 "p6WorkWith" -> 5；无法识别时返回 None。"""
    m = _PAGE_KEY_RE.match(str(page_key or ""))
    if not m:
        return None
    number = int(m.group(1))
    if number < 1:
        return None
    return number - 1


def map_page_keys(page_keys: Iterable[str], total_pages: int) -> Dict[str, int]:
    """将一组页键映射到模板中实际存在的页索引。

    多个页键可以指向同一物理页；无法识别或越界的页键不出现在结果中。
    """
    logger = logging.getLogger(__name__)
    result: Dict[str, int] = {}
    for key in page_keys:
        idx = page_index_from_key(key)
        if idx is None:
            logger.warning("无法识别页键：%s，已忽略", key)
            continue
        if idx >= total_pages:
            logger.warning("页键越界，已忽略：%s -> %s / total=%s", key, idx, total_pages)
            continue
        result[key] = idx
    return result


__all__ = ["page_index_from_key", "map_page_keys"]
