"""异常处理模块

提供业务异常类体系和快捷创建入口。

使用示例:
    from ycms.exceptions import Err, ErrorCode

    category = Category.get(category_id)
    if category is None:
        raise Err.not_found("Category not found", code=ErrorCode.CATEGORY_NOT_FOUND)
"""

from .exceptions import (
    # ===== 推荐使用 =====
    Err,                            # 异常快捷创建类
    ErrorCode,                      # 错误代码枚举
    ErrorCodeType,

    # ===== 高级用法 =====
    BusinessException,              # 业务异常基类
    ResourceNotFoundException,      # 404
    ResourceConflictException,      # 409
    ValidationException,            # 422
    LanguageException,              # 404/400
    ServiceUnavailableException,    # 503
)

__all__ = [
    "Err",
    "ErrorCode",
    "ErrorCodeType",
    "BusinessException",
    "ResourceNotFoundException",
    "ResourceConflictException",
    "ValidationException",
    "LanguageException",
    "ServiceUnavailableException",
]
