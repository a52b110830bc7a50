"""
文件路径：template_filler/processors/layout.py

说明：布局表数据模型与覆盖项解析/合并（Layout Resolver）。

- BoxSpec：单个盒子的放置与排版参数（作者坐标系）。
- LayoutTable：页键 -> 盒子键 -> BoxSpec。
- 覆盖项在边界处一次性解析为 OverrideEntry（page/box/prop/raw_value），
  合并器本身不做任何字符串拆分；
- 合并为“尽力而为”：非法覆盖项永不抛异常，只记录到 ignored 日志并保持原值。
"""

from __future__ import annotations

import copy
import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..components import ErrorHandler, clamp_extent, get_logger
from ..variables import (
    CONST_ALIGN_SYNONYMS,
    CONST_ALIGN_VALUES,
    CONST_BOX_KIND_TEXT,
    CONST_MAX_LINES_UNBOUNDED,
    CONST_OVERRIDE_KEY_SEPARATOR,
    CONST_OVERRIDE_NUMERIC_PROPS,
    CONST_OVERRIDE_PREFIX,
    CONST_OVERRIDE_PROP_ALIASES,
    CONST_OVERRIDE_PROPS,
    CONST_OVERRIDE_SOURCE_QUERY,
    ERR_LAYOUT_MISSING,
    ERR_OVERRIDE_IGNORED,
    REASON_BAD_ALIGN,
    REASON_BAD_KEY_SHAPE,
    REASON_NOT_A_NUMBER,
    REASON_OUT_OF_RANGE,
    REASON_UNKNOWN_BOX,
    REASON_UNKNOWN_PAGE,
    REASON_UNKNOWN_PROP,
    STYLE_ALIGN_DEFAULT,
    STYLE_FONT_SIZE_DEFAULT,
    STYLE_LINE_GAP_DEFAULT,
    STYLE_PAD_DEFAULT,
)


logger = get_logger(__name__)


# 布局 JSON 中的驼峰键 -> BoxSpec 属性名
_BOX_JSON_KEYS: Dict[str, str] = {
    "x": "x",
    "y": "y",
    "w": "w",
    "h": "h",
    "size": "size",
    "lineGap": "line_gap",
    "align": "align",
    "maxLines": "max_lines",
    "pad": "pad",
    "autoExpand": "auto_expand",
    "kind": "kind",
}


@dataclass
class BoxSpec:
    """盒子规格。

    属性：
        x, y: 盒子左上角（作者坐标系，原点左上，y 向下）。
        w: 盒子宽度（>=0）。
        h: 盒子高度；0 表示“自动”。
        size: 字号（>0）。
        line_gap: 行间额外间距，行高 = size + line_gap。
        align: left / center / right。
        max_lines: 最大行数；>= CONST_MAX_LINES_UNBOUNDED 视为不限。
        pad: 四周对称内边距。
        auto_expand: 行数有限时，是否把高度扩展到恰好容纳 max_lines 行。
        kind: "text" 或 "image"。
    """

    x: float
    y: float
    w: float
    h: float = 0.0
    size: float = STYLE_FONT_SIZE_DEFAULT
    line_gap: float = STYLE_LINE_GAP_DEFAULT
    align: str = STYLE_ALIGN_DEFAULT
    max_lines: int = CONST_MAX_LINES_UNBOUNDED
    pad: float = STYLE_PAD_DEFAULT
    auto_expand: bool = True
    kind: str = CONST_BOX_KIND_TEXT

    def __post_init__(self) -> None:
        self.w = clamp_extent(self.w)
        self.h = clamp_extent(self.h)
        self.pad = clamp_extent(self.pad)
        self.line_gap = clamp_extent(self.line_gap)

    @property
    def line_height(self) -> float:
        return float(self.size) + float(self.line_gap)

    @property
    def has_line_limit(self) -> bool:
        return int(self.max_lines) < CONST_MAX_LINES_UNBOUNDED

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BoxSpec":
        """由布局 JSON（驼峰键）构造；未知键忽略。"""
        kwargs = {_BOX_JSON_KEYS[k]: v for k, v in raw.items() if k in _BOX_JSON_KEYS}
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        reverse = {v: k for k, v in _BOX_JSON_KEYS.items()}
        return {reverse[f.name]: getattr(self, f.name) for f in fields(self)}


LayoutTable = Dict[str, Dict[str, BoxSpec]]


@dataclass(frozen=True)
class OverrideEntry:
    """单条覆盖项：已在边界拆解为 (page, box, prop, raw_value)。"""

    page: str
    box: str
    prop: str
    raw_value: Any
    source: str = ""
    key: str = ""


@dataclass(frozen=True)
class AppliedOverride:
    source: str
    page: str
    box: str
    prop: str
    value: Any
    previous: Any

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IgnoredOverride:
    source: str
    key: str
    reason: str
    raw_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OverrideSource:
    """一个覆盖来源：可应用的条目 + 解析阶段即被拒绝的条目。"""

    name: str
    entries: List[OverrideEntry] = field(default_factory=list)
    rejected: List[IgnoredOverride] = field(default_factory=list)


@dataclass
class LayoutResolution:
    table: LayoutTable
    applied: List[AppliedOverride]
    ignored: List[IgnoredOverride]

    def debug_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "applied": [a.to_dict() for a in self.applied],
            "ignored": [i.to_dict() for i in self.ignored],
        }


# =============================
# 边界解析：把外部输入拆解为 OverrideEntry
# =============================
def canonical_prop(name: str) -> Optional[str]:
    """返回属性的规范线上名称（如 "maxLines"）；不在允许集合内返回 None。"""
    raw = str(name or "").strip()
    if raw in CONST_OVERRIDE_PROPS:
        return raw
    return CONST_OVERRIDE_PROP_ALIASES.get(raw.lower())


def split_override_key(
    key: str,
    prefix: str = CONST_OVERRIDE_PREFIX,
    sep: str = CONST_OVERRIDE_KEY_SEPARATOR,
) -> Optional[Tuple[str, str, str]]:
    """拆解 `<prefix>_<page>_<box>_<prop>` 形式的键，返回 (page, box, prop)。

    - 盒子键本身可含下划线，取中间所有段；
    - 属性取最后一段；若最后两段组合为多词属性（如 max_lines），则取两段；
    - 段数不足或任一部分为空时返回 None。
    属性是否合法不在此判断，交由合并器记录 unknown_prop。
    """
    parts = str(key).split(sep)
    if len(parts) < 4 or parts[0] != prefix:
        return None
    page = parts[1]
    prop = parts[-1]
    box_parts = parts[2:-1]
    if len(parts) >= 5:
        two = sep.join(parts[-2:])
        if canonical_prop(two) is not None and canonical_prop(prop) is None:
            prop = two
            box_parts = parts[2:-2]
    box = sep.join(box_parts)
    if not page or not box or not prop:
        return None
    return page, box, prop


def parse_query_overrides(
    pairs: Iterable[Tuple[str, Any]],
    source: str = CONST_OVERRIDE_SOURCE_QUERY,
    prefix: str = CONST_OVERRIDE_PREFIX,
) -> OverrideSource:
    """解析 URL 风格的 (key, value) 序列。

    不以 `<prefix>_` 开头的键不是布局覆盖键，直接略过；
    以前缀开头但无法拆解的键记为 bad_key_shape。
    """
    result = OverrideSource(name=source)
    lead = f"{prefix}{CONST_OVERRIDE_KEY_SEPARATOR}"
    for key, value in pairs:
        key = str(key)
        if not key.startswith(lead):
            continue
        parsed = split_override_key(key, prefix=prefix)
        if parsed is None:
            result.rejected.append(IgnoredOverride(source, key, REASON_BAD_KEY_SHAPE, value))
            continue
        page, box, prop = parsed
        result.entries.append(OverrideEntry(page, box, prop, value, source=source, key=key))
    return result


def parse_structured_overrides(obj: Optional[Mapping[str, Any]], source: str) -> OverrideSource:
    """解析结构化覆盖对象：{page: {box: {prop: value}}}。"""
    result = OverrideSource(name=source)
    if not obj:
        return result
    if not isinstance(obj, Mapping):
        result.rejected.append(IgnoredOverride(source, "<root>", REASON_BAD_KEY_SHAPE, obj))
        return result
    for page, boxes in obj.items():
        if not isinstance(boxes, Mapping):
            result.rejected.append(IgnoredOverride(source, str(page), REASON_BAD_KEY_SHAPE, boxes))
            continue
        for box, props in boxes.items():
            if not isinstance(props, Mapping):
                result.rejected.append(IgnoredOverride(source, f"{page}.{box}", REASON_BAD_KEY_SHAPE, props))
                continue
            for prop, value in props.items():
                result.entries.append(
                    OverrideEntry(str(page), str(box), str(prop), value, source=source, key=f"{page}.{box}.{prop}")
                )
    return result


# =============================
# 值校验
# =============================
def _coerce_number(raw: Any) -> Optional[float]:
    """转换为有限浮点数；布尔值、空串、NaN/Inf 一律视为非数字。"""
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def normalize_align(raw: Any) -> Optional[str]:
    """对齐值归一化：小写去空白，并按同义词表映射（centre -> center）。"""
    token = str(raw or "").strip().lower()
    token = CONST_ALIGN_SYNONYMS.get(token, token)
    return token if token in CONST_ALIGN_VALUES else None


def build_layout_table(raw: Optional[Mapping[str, Mapping[str, Any]]]) -> LayoutTable:
    """由默认布局（BoxSpec 或驼峰字典）构造一份全新的 LayoutTable。

    返回值与输入不共享任何可变对象。
    """
    if raw is None:
        raise ValueError(ErrorHandler.format_error(ERR_LAYOUT_MISSING, "缺少默认布局表"))
    table: LayoutTable = {}
    for page, boxes in raw.items():
        page_boxes: Dict[str, BoxSpec] = {}
        for box, spec in boxes.items():
            if isinstance(spec, BoxSpec):
                page_boxes[str(box)] = copy.deepcopy(spec)
            else:
                page_boxes[str(box)] = BoxSpec.from_dict(spec)
        table[str(page)] = page_boxes
    return table


# =============================
# 合并器
# =============================
class LayoutResolver:
    """持有只读默认布局，每次 resolve 基于深拷贝合并覆盖项。

    用法示例：
        resolver = LayoutResolver(DEFAULT_LAYOUT)
        res = resolver.resolve([parse_query_overrides([("L_p6Q_workwith_leaders_q_y", "1000")])])
        res.table["p6Q"]["workwith_leaders_q"].y  # -> 1000.0
    """

    def __init__(self, default_table: Optional[Mapping[str, Mapping[str, Any]]]) -> None:
        if default_table is None:
            raise ValueError(ErrorHandler.format_error(ERR_LAYOUT_MISSING, "缺少默认布局表"))
        self._default = default_table

    def resolve(self, sources: Sequence[OverrideSource] = ()) -> LayoutResolution:
        """按传入顺序依次应用覆盖来源（靠后者胜出）。"""
        table = build_layout_table(self._default)
        applied: List[AppliedOverride] = []
        ignored: List[IgnoredOverride] = []

        for src in sources:
            ignored.extend(src.rejected)
            for entry in src.entries:
                outcome = self._apply_entry(table, entry)
                if isinstance(outcome, AppliedOverride):
                    applied.append(outcome)
                else:
                    ignored.append(outcome)

        for item in ignored:
            logger.warning(
                "[%s] 覆盖项已忽略：source=%s key=%s reason=%s value=%r",
                ERR_OVERRIDE_IGNORED,
                item.source,
                item.key,
                item.reason,
                item.raw_value,
            )
        if applied:
            logger.info("已应用覆盖项 %s 条，忽略 %s 条", len(applied), len(ignored))
        return LayoutResolution(table=table, applied=applied, ignored=ignored)

    @staticmethod
    def _apply_entry(table: LayoutTable, entry: OverrideEntry):
        key = entry.key or f"{entry.page}.{entry.box}.{entry.prop}"

        def _ignore(reason: str) -> IgnoredOverride:
            return IgnoredOverride(entry.source, key, reason, entry.raw_value)

        page_boxes = table.get(entry.page)
        if page_boxes is None:
            return _ignore(REASON_UNKNOWN_PAGE)
        box = page_boxes.get(entry.box)
        if box is None:
            return _ignore(REASON_UNKNOWN_BOX)
        prop = canonical_prop(entry.prop)
        if prop is None:
            return _ignore(REASON_UNKNOWN_PROP)

        if prop in CONST_OVERRIDE_NUMERIC_PROPS:
            number = _coerce_number(entry.raw_value)
            if number is None:
                return _ignore(REASON_NOT_A_NUMBER)
            if prop == "maxLines":
                value: Any = int(math.floor(max(0.0, number)))
            elif prop in ("w", "h"):
                value = clamp_extent(number)
            elif prop == "size":
                if number <= 0:
                    return _ignore(REASON_OUT_OF_RANGE)
                value = number
            else:
                value = number
        else:
            value = normalize_align(entry.raw_value)
            if value is None:
                return _ignore(REASON_BAD_ALIGN)

        attr = CONST_OVERRIDE_PROPS[prop]
        previous = getattr(box, attr)
        setattr(box, attr, value)
        return AppliedOverride(entry.source, entry.page, entry.box, prop, value, previous)


def resolve_layout(
    default_table: Optional[Mapping[str, Mapping[str, Any]]],
    sources: Sequence[OverrideSource] = (),
) -> LayoutResolution:
    """函数式入口：等价于 LayoutResolver(default_table).resolve(sources)。"""
    return LayoutResolver(default_table).resolve(sources)


__all__ = [
    "BoxSpec",
    "LayoutTable",
    "OverrideEntry",
    "AppliedOverride",
    "IgnoredOverride",
    "OverrideSource",
    "LayoutResolution",
    "LayoutResolver",
    "build_layout_table",
    "canonical_prop",
    "normalize_align",
    "split_override_key",
    "parse_query_overrides",
    "parse_structured_overrides",
    "resolve_layout",
]
