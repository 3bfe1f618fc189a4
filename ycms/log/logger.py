"""
日志工具

ycms 各模块通过 get_logger() 取得 "ycms.*" 下的日志器，
由应用在启动时调用 setup_root_logger() 统一配置输出。
"""

import inspect
import logging
import os
import time
from typing import Any, Optional


# 时间 - 级别 - 日志器 - 位置 - 消息
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"

SQL_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class MicrosecondFormatter(logging.Formatter):
    """asctime 精确到微秒：2024-05-01 12:00:00.123456"""

    def formatTime(self, record, datefmt=None):
        seconds = time.strftime(datefmt or _DATE_FORMAT, self.converter(record.created))
        micros = int((record.created % 1) * 1_000_000)
        return f"{seconds}.{micros:06d}"


def _formatter(log_format: Optional[str], use_microseconds: bool) -> logging.Formatter:
    formatter_class = MicrosecondFormatter if use_microseconds else logging.Formatter
    return formatter_class(fmt=log_format or DEFAULT_LOG_FORMAT, datefmt=_DATE_FORMAT)


def setup_logger(
    name: str = None,
    level: str = "INFO",
    log_file: str = None,
    log_format: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    propagate: bool = True,
) -> logging.Logger:
    """配置日志器，重复调用时替换已有处理器

    Args:
        name: 日志器名称，None 为根日志器
        level: DEBUG / INFO / WARNING / ERROR / CRITICAL，大小写均可
        log_file: 日志文件路径，目录不存在时自动创建
        console: 是否输出到 stderr

    使用示例:
        logger = setup_logger("ycms", level="DEBUG", log_file="logs/cms.log")
    """
    target = logging.getLogger(name)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    target.propagate = propagate
    target.handlers.clear()

    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = _formatter(log_format, use_microseconds)
    for handler in handlers:
        handler.setFormatter(formatter)
        target.addHandler(handler)
    return target


def setup_sql_logger(level: str = "DEBUG", log_file: Optional[str] = None, console: bool = False) -> logging.Logger:
    """配置 sqlalchemy.engine 日志器（SQL 语句），不向上传播"""
    return setup_logger(
        name="sqlalchemy.engine",
        level=level,
        log_file=log_file,
        log_format=SQL_LOG_FORMAT,
        console=console,
        propagate=False,
    )


def setup_root_logger(
    level: str = "INFO",
    log_file: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    config: Any = None,
) -> logging.Logger:
    """配置根日志器，ycms.* 日志器沿用它的处理器

    Args:
        config: LoggingSettings，提供时覆盖其余参数，sql_log_enabled 为真时同时配置 SQL 日志

    使用示例:
        setup_root_logger(config=settings.logging)
    """
    if config is not None:
        level = config.level
        log_file = config.file_path or None
        console = config.enable_console
        use_microseconds = config.use_microseconds
        if config.sql_log_enabled:
            setup_sql_logger(level=config.sql_log_level)

    return setup_logger(
        level=level,
        log_file=log_file,
        console=console,
        use_microseconds=use_microseconds,
        propagate=False,
    )


def get_logger(name: str = None) -> logging.Logger:
    """取得日志器

    - 不传名称：使用调用方模块的 __name__
    - 不含点号的简写："orm" -> "ycms.orm"
    - 其他名称原样使用，如 "sqlalchemy.engine"
    """
    if name is None:
        caller = inspect.currentframe().f_back
        name = caller.f_globals.get("__name__", "ycms") if caller is not None else "ycms"
    elif "." not in name and name != "ycms":
        name = f"ycms.{name}"
    return logging.getLogger(name)
