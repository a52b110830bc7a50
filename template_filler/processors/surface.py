"""
文件路径：template_filler/processors/surface.py

说明：绘制表面抽象。

- RenderSurface：盒子渲染器与页面合成器只依赖该协议（绘制坐标系，原点左下）。
- PlanSurface：记录型实现，按调用顺序保存绘制指令，由 engines/* 在模板上回放。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Tuple, Union


class RenderSurface(Protocol):
    def draw_text(
        self,
        text: str,
        *,
        x: float,
        y: float,
        size: float,
        font: str,
        color: Tuple[int, int, int],
    ) -> None: ...

    def draw_image(self, data: bytes, *, x: float, y: float, width: float, height: float) -> None: ...

    def get_height(self) -> float: ...


@dataclass(frozen=True)
class DrawTextOp:
    text: str
    x: float
    y: float
    size: float
    font: str
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class DrawImageOp:
    data: bytes
    x: float
    y: float
    width: float
    height: float


DrawOp = Union[DrawTextOp, DrawImageOp]


@dataclass
class PlanSurface:
    """记录绘制指令的页面表面。

    属性：
        page_index: 模板中的 0 基页索引。
        width, height: 页面尺寸（pt）。
        ops: 按调用顺序记录的绘制指令。
    """

    page_index: int
    width: float
    height: float
    ops: List[DrawOp] = field(default_factory=list)

    def draw_text(self, text, *, x, y, size, font, color) -> None:
        self.ops.append(DrawTextOp(str(text), float(x), float(y), float(size), str(font), tuple(color)))

    def draw_image(self, data, *, x, y, width, height) -> None:
        self.ops.append(DrawImageOp(bytes(data), float(x), float(y), float(width), float(height)))

    def get_height(self) -> float:
        return float(self.height)

    @property
    def text_ops(self) -> List[DrawTextOp]:
        return [op for op in self.ops if isinstance(op, DrawTextOp)]

    @property
    def image_ops(self) -> List[DrawImageOp]:
        return [op for op in self.ops if isinstance(op, DrawImageOp)]


__all__ = [
    "RenderSurface",
    "DrawTextOp",
    "DrawImageOp",
    "DrawOp",
    "PlanSurface",
]
