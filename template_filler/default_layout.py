"""
文件路径：template_filler/default_layout.py

说明：编译期默认布局表（作者坐标系，原点左上，单位 pt）。

- 结构：页键 -> 盒子键 -> 盒子参数（驼峰键，同布局 JSON）；
- 页键以 p<页码> 开头，多个页键可指向同一物理页（如 p6WorkWith 与 p6Q）；
- 本表为只读模块状态，每次渲染由 LayoutResolver 深拷贝后再应用覆盖项，请勿原地修改。
"""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_LAYOUT: Dict[str, Dict[str, Dict[str, Any]]] = {
    # 封面：姓名与日期，单行
    "p1Header": {
        "fullName": {"x": 60, "y": 420, "w": 492, "h": 0, "size": 28, "align": "left", "maxLines": 1},
        "dateLabel": {"x": 60, "y": 470, "w": 492, "h": 0, "size": 14, "align": "left", "maxLines": 1},
    },
    # 第 2 页：执行摘要两段
    "p2Exec": {
        "exec_summary_para1": {"x": 60, "y": 160, "w": 492, "h": 260, "size": 12, "align": "left", "maxLines": 18},
        "exec_summary_para2": {"x": 60, "y": 440, "w": 492, "h": 260, "size": 12, "align": "left", "maxLines": 18},
    },
    # 第 3 页：雷达图
    "p3Chart": {
        "spider": {"x": 106, "y": 180, "w": 400, "h": 400, "kind": "image"},
    },
    # 第 6 页：两个大文本框
    "p6WorkWith": {
        "collabC": {"x": 30, "y": 300, "w": 270, "h": 420, "size": 14, "align": "left", "maxLines": 14},
        "collabT": {"x": 320, "y": 300, "w": 260, "h": 420, "size": 14, "align": "left", "maxLines": 14},
    },
    # 第 6 页：底部问题（与大文本框分开）
    "p6Q": {
        "workwith_colleagues_q": {"x": 40, "y": 990, "w": 520, "h": 40, "size": 13, "align": "left", "maxLines": 2},
        "workwith_leaders_q": {"x": 40, "y": 1040, "w": 520, "h": 40, "size": 13, "align": "left", "maxLines": 2},
    },
}


__all__ = ["DEFAULT_LAYOUT"]
