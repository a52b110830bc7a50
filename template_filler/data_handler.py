"""
文件路径：template_filler/data_handler.py

模块职责：
- 读取布局覆盖配置 JSON 与填充请求 JSON，转为字段绑定与覆盖来源的原始输入；
- 解析 URL 风格查询串；
- 内容整形：结构化文本块展平、问题加项目符号、长文拆两段。

说明：
- 仅依赖标准库与 `variables.py`，不直接依赖渲染模块（字段绑定类型除外）。
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl

from .components import get_logger
from .processors.compositor import FieldBinding
from .variables import (
    PATH_LAYOUT_JSON,
    CONST_BOX_KIND_IMAGE,
    CONST_BOX_KIND_TEXT,
    CONST_BULLET_PREFIX,
    CONST_ENCODING,
    CONST_REFLECTION_MARKER,
    ERR_CONFIG_LOAD_FAILED,
    ERR_DATA_INVALID,
)


logger = get_logger(__name__)

_BLANK_LINE_RE = re.compile(r"\n\s*\n")
_SENTENCE_RE = re.compile(r"(?<=[.!?。！？])\s+")


def _json_loads_strip_bom(content: str):
    """解析 JSON 字符串，自动去除 UTF-8 BOM。"""
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return json.loads(content)


@dataclass
class RenderRequest:
    """一次填充请求：字段绑定 + 请求内布局覆盖 + 查询串覆盖。"""

    bindings: List[FieldBinding] = field(default_factory=list)
    layout: Dict[str, Any] = field(default_factory=dict)
    query_pairs: List[Tuple[str, str]] = field(default_factory=list)


# =============================
# 内容整形
# =============================
def bullet_question(text: Any) -> str:
    """为非空问题加项目符号前缀；已带前缀的不重复添加。"""
    s = str(text or "").strip()
    if not s:
        return ""
    if s.startswith(CONST_BULLET_PREFIX.strip()):
        return s
    return f"{CONST_BULLET_PREFIX}{s}"


def split_to_two_paras(text: Any) -> Tuple[str, str]:
    """将长文本拆为两段。

    - 含空行时，以第一个空行为界；
    - 否则按句子拆分，前一半句子为第一段；
    - 只有一句时返回 (text, "")。
    """
    s = str(text or "").strip()
    if not s:
        return "", ""
    parts = _BLANK_LINE_RE.split(s, maxsplit=1)
    if len(parts) == 2:
        return parts[0].strip(), parts[1].strip()
    sentences = [p for p in _SENTENCE_RE.split(s) if p.strip()]
    if len(sentences) < 2:
        return s, ""
    mid = (len(sentences) + 1) // 2
    return " ".join(sentences[:mid]).strip(), " ".join(sentences[mid:]).strip()


def flatten_text_block(value: Any) -> str:
    """将文本块展平为单个以换行分隔的字符串。

    - 字符串：原样（去首尾空白）；
    - 列表：逐项换行拼接，空项丢弃；
    - 字典：lead/paragraph 为首段，随后一行 "Reflection questions:"，
      再逐行列出编号问题（questions/bullets）；没有问题时不输出标记行。
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return "\n".join(s for s in (flatten_text_block(v) for v in value) if s)
    if isinstance(value, Mapping):
        lead = flatten_text_block(value.get("lead", value.get("paragraph")))
        raw_qs = value.get("questions", value.get("bullets")) or []
        if isinstance(raw_qs, str):
            raw_qs = [raw_qs]
        questions = [str(q).strip() for q in raw_qs if str(q or "").strip()]
        lines: List[str] = [lead] if lead else []
        if questions:
            lines.append(CONST_REFLECTION_MARKER)
            lines.extend(f"{i}. {q}" for i, q in enumerate(questions, start=1))
        return "\n".join(lines)
    return str(value).strip()


# =============================
# 查询串与配置文件
# =============================
def parse_query_string(query: Optional[str]) -> List[Tuple[str, str]]:
    """解析 URL 查询串为 (key, value) 列表，保留空值与重复键的先后顺序。"""
    if not query:
        return []
    return parse_qsl(str(query).lstrip("?"), keep_blank_values=True)


def load_layout_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """加载结构化布局覆盖 JSON：{page: {box: {prop: value}}}。

    参数：
        config_path: 配置路径；默认读取 `config/layout.json`。

    返回：
        覆盖字典；文件不存在时返回空字典。
    """
    path = config_path or PATH_LAYOUT_JSON
    if not path.exists():
        logger.warning("找不到布局覆盖配置文件，将使用空配置：%s", path)
        return {}
    try:
        data = _json_loads_strip_bom(path.read_text(encoding=CONST_ENCODING))
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"[{ERR_CONFIG_LOAD_FAILED}] 配置加载失败: {exc}") from exc
    if not isinstance(data, dict):
        raise RuntimeError(f"[{ERR_CONFIG_LOAD_FAILED}] 布局覆盖配置必须是对象: {path}")
    return data


def bindings_from_fields(items: Any) -> List[FieldBinding]:
    """将请求中的 fields 列表转为字段绑定。

    - 缺少 page/box 的项记录告警后跳过；
    - `"bullet": true` 的文本先展平再加项目符号；
    - `box` 为两个盒子键的列表时，文本经 split_to_two_paras 拆成两段，分别绑定到两个盒子。
    """
    bindings: List[FieldBinding] = []
    for i, item in enumerate(items or []):
        if not isinstance(item, Mapping) or not item.get("page") or not item.get("box"):
            logger.warning("[%s] 第 %s 个字段缺少 page/box，已忽略：%r", ERR_DATA_INVALID, i + 1, item)
            continue
        page = str(item["page"])
        boxes = item["box"]
        kind = str(item.get("kind") or CONST_BOX_KIND_TEXT).strip().lower()
        value = item.get("value")

        if isinstance(boxes, (list, tuple)):
            if len(boxes) != 2 or kind == CONST_BOX_KIND_IMAGE:
                logger.warning("[%s] 第 %s 个字段的 box 列表须为两个文本盒子，已忽略：%r", ERR_DATA_INVALID, i + 1, boxes)
                continue
            first, second = split_to_two_paras(flatten_text_block(value))
            bindings.append(FieldBinding(page=page, box=str(boxes[0]), value=first))
            bindings.append(FieldBinding(page=page, box=str(boxes[1]), value=second))
            continue

        if kind == CONST_BOX_KIND_IMAGE:
            value = str(value).strip() if value is not None else ""
        else:
            kind = CONST_BOX_KIND_TEXT
            value = flatten_text_block(value)
            if item.get("bullet"):
                value = bullet_question(value)
        bindings.append(FieldBinding(page=page, box=str(boxes), value=value, kind=kind))
    return bindings


def load_render_request(path: Path) -> RenderRequest:
    """从 JSON 文件加载填充请求。

    结构：
        {
          "fields": [{"page": "p6Q", "box": "workwith_leaders_q", "value": "...", "kind": "text"}],
          "layout": {"p6Q": {"workwith_leaders_q": {"y": 1000}}},
          "query": "L_p6Q_workwith_leaders_q_size=12"
        }
    """
    content = path.read_text(encoding=CONST_ENCODING)
    data = _json_loads_strip_bom(content)
    if not isinstance(data, dict):
        raise ValueError(f"[{ERR_DATA_INVALID}] 请求 JSON 必须是对象: {path}")
    layout = data.get("layout") or {}
    if not isinstance(layout, dict):
        logger.warning("[%s] 请求中的 layout 不是对象，已忽略", ERR_DATA_INVALID)
        layout = {}
    return RenderRequest(
        bindings=bindings_from_fields(data.get("fields")),
        layout=layout,
        query_pairs=parse_query_string(data.get("query")),
    )


__all__ = [
    "RenderRequest",
    "bullet_question",
    "split_to_two_paras",
    "flatten_text_block",
    "parse_query_string",
    "load_layout_config",
    "bindings_from_fields",
    "load_render_request",
]
