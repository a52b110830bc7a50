"""
文件路径：template_filler/__init__.py

说明：固定版式 PDF 模板填充：在多页模板的固定坐标盒子中放置文字与图片。

常用入口：
    from template_filler.pdf_processor import PDFProcessor
    from template_filler.processors.compositor import FieldBinding
"""

__version__ = "0.4.1"
