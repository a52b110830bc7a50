"""
文件路径：template_filler/components/logging.py

说明：日志、重试与错误信息格式化。

- get_logger：首次调用时配置文件 + 控制台双输出（logs/app.log）；
- set_log_level：运行期切换根日志级别（CLI --debug）；
- retry_on_exception：IO 类操作的指数退避重试；
- ErrorHandler.format_error：统一的 "[错误码] 信息" 文本。
"""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, Iterable, Type, Union

from ..variables import (
    PATH_LOGS_DIR,
    PATH_LOG_FILE,
    CONST_ENCODING,
    CONST_LOG_DATEFMT,
    CONST_LOG_FORMAT,
    CONST_LOG_LEVEL_DEFAULT,
    CONST_MAX_RETRY,
)

_LOGGER_CONFIGURED: bool = False


def get_logger(name: str) -> logging.Logger:
    """获取 logger，首次调用时配置文件与控制台双输出。

    参数：
        name: 日志记录器名称（一般使用 __name__）。
    """
    global _LOGGER_CONFIGURED
    if not _LOGGER_CONFIGURED:
        PATH_LOGS_DIR.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=CONST_LOG_LEVEL_DEFAULT,
            format=CONST_LOG_FORMAT,
            datefmt=CONST_LOG_DATEFMT,
            handlers=[
                logging.FileHandler(PATH_LOG_FILE, encoding=CONST_ENCODING),
                logging.StreamHandler(),
            ],
        )
        _LOGGER_CONFIGURED = True
    return logging.getLogger(name)


def set_log_level(level: Union[int, str]) -> None:
    """调整根日志级别，已配置的处理器随之生效。"""
    get_logger(__name__)
    logging.getLogger().setLevel(level.upper() if isinstance(level, str) else level)


def retry_on_exception(
    retries: int = CONST_MAX_RETRY,
    exceptions: Iterable[Type[BaseException]] = (Exception,),
    delay_s: float = 0.2,
    backoff: float = 2.0,
) -> Callable[[Callable[..., object]], Callable[..., object]]:
    """装饰器：命中 exceptions 时按指数退避重试，超过 retries 次后原样抛出。

    参数：
        retries: 重试次数（不含首次）。
        exceptions: 触发重试的异常类型。
        delay_s: 首次等待秒数。
        backoff: 每次等待的倍数。
    """
    exc_types = tuple(exceptions)

    def decorator(func: Callable[..., object]) -> Callable[..., object]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            wait = delay_s
            for attempt in range(retries + 1):
                try:
                    return func(*args, **kwargs)
                except exc_types as exc:
                    if attempt >= retries:
                        raise
                    get_logger(func.__module__).warning(
                        "%s 失败，%.1fs 后第 %s 次重试：%s", func.__name__, wait, attempt + 1, exc
                    )
                    time.sleep(wait)
                    wait *= backoff

        return wrapper

    return decorator


class ErrorHandler:
    """错误信息格式化。"""

    @staticmethod
    def format_error(err_code: int, message: str) -> str:
        return f"[{err_code}] {message}"


__all__ = ["get_logger", "set_log_level", "retry_on_exception", "ErrorHandler"]
