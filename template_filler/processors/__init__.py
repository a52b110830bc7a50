"""
文件路径：template_filler/processors/__init__.py

说明：
- layout.py：BoxSpec 数据模型、覆盖项解析与合并；
- render.py：盒子渲染（换行、截断、对齐、基线）；
- compositor.py：按字段绑定逐页合成文本与图片；
- surface.py：绘制表面协议与记录型实现；
- images.py：图片识别与加载；
- engines/{reportlab.py, pymupdf.py}：在模板上回放绘制计划。
"""

from typing import List

__all__: List[str] = []
