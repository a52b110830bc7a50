"""
文件路径：template_filler/components/io.py

说明：文件与路径处理。输出 PDF 先写入同目录的 `.partial` 暂存文件，
写出成功后再原子替换为目标文件，失败时目标路径上不会留下半成品。
"""

from __future__ import annotations

import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..variables import (
    PATH_LOGS_DIR,
    PATH_OUTPUT_DIR,
    PATH_TEMP_DIR,
    CONST_CLEAN_TEMP_ON_EXIT,
    CONST_DEFAULT_OUTPUT_SUFFIX,
    CONST_OUTPUT_PREFIX_DEFAULT,
    CONST_PARTIAL_OUTPUT_SUFFIX,
    ERR_FILE_NOT_FOUND,
    ERR_PATH_NOT_WRITABLE,
)
from .logging import ErrorHandler, get_logger


logger = get_logger(__name__)


class FileHandler:
    """模板读取与输出写入相关的路径处理。"""

    @staticmethod
    def ensure_project_dirs() -> None:
        """确保 logs/output/temp 目录存在。"""
        for d in (PATH_LOGS_DIR, PATH_OUTPUT_DIR, PATH_TEMP_DIR):
            d.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def validate_readable_file(path: Path) -> None:
        """模板等输入文件必须存在且为普通文件。

        异常：
            FileNotFoundError: 文件不存在或不是文件。
        """
        path = Path(path)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise FileNotFoundError(ErrorHandler.format_error(ERR_FILE_NOT_FOUND, f"模板不存在或不可读: {path}"))

    @staticmethod
    def ensure_parent_writable(target: Path) -> None:
        """创建输出文件的父目录并确认可写。

        异常：
            PermissionError: 目录不可写。
        """
        parent = Path(target).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PermissionError(ErrorHandler.format_error(ERR_PATH_NOT_WRITABLE, f"无法创建输出目录: {parent}")) from exc
        if not os.access(parent, os.W_OK):
            raise PermissionError(ErrorHandler.format_error(ERR_PATH_NOT_WRITABLE, f"输出目录不可写: {parent}"))

    @staticmethod
    def timestamped_output_path(
        template_pdf: Optional[Path],
        suffix: str = CONST_DEFAULT_OUTPUT_SUFFIX,
        prefix: Optional[str] = None,
    ) -> Path:
        """在 output 目录下生成 `<前缀或模板名>_<时间戳><后缀>`。

        例如 output/report_20240101_120000_filled.pdf
        """
        FileHandler.ensure_project_dirs()
        use_prefix = (prefix if prefix is not None else CONST_OUTPUT_PREFIX_DEFAULT).strip()
        if use_prefix:
            stem = use_prefix
        else:
            stem = template_pdf.stem if template_pdf is not None else "output"
        return PATH_OUTPUT_DIR / f"{stem}_{time.strftime('%Y%m%d_%H%M%S')}{suffix}"

    @staticmethod
    @contextmanager
    def staged_output(target: Path) -> Iterator[Path]:
        """产出暂存路径供写入；with 块正常结束后替换到 target，异常时删除暂存文件。

        用法示例：
            with FileHandler.staged_output(out) as tmp:
                doc.save(str(tmp))
        """
        target = Path(target)
        FileHandler.ensure_parent_writable(target)
        staged = target.with_name(target.name + CONST_PARTIAL_OUTPUT_SUFFIX)
        try:
            yield staged
            os.replace(staged, target)
        finally:
            if staged.exists():
                staged.unlink()
                logger.debug("已清理暂存输出：%s", staged)

    @staticmethod
    @contextmanager
    def scratch_file(prefix: str, suffix: str = ".pdf") -> Iterator[Path]:
        """在 temp 目录下创建本次调用独占的临时文件，with 块结束后删除。

        并发的多次渲染各自持有不同文件，互不覆盖。
        """
        FileHandler.ensure_project_dirs()
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=str(PATH_TEMP_DIR))
        os.close(fd)
        path = Path(name)
        try:
            yield path
        finally:
            if CONST_CLEAN_TEMP_ON_EXIT:
                path.unlink(missing_ok=True)


__all__ = ["FileHandler"]
