"""日志模块

使用示例:
    from ycms.log import setup_root_logger, get_logger

    setup_root_logger(config=settings.logging)   # 应用启动时
    logger = get_logger()                         # 模块内，名称取模块 __name__
"""

from .logger import (
    DEFAULT_LOG_FORMAT,
    MicrosecondFormatter,
    get_logger,
    setup_logger,
    setup_root_logger,
    setup_sql_logger,
)

__all__ = [
    "DEFAULT_LOG_FORMAT",
    "MicrosecondFormatter",
    "get_logger",
    "setup_logger",
    "setup_root_logger",
    "setup_sql_logger",
]
