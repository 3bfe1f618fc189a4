"""验证模块

提供 slug 验证和表单字段验证。验证函数返回错误消息，通过时返回 None，
服务层把错误按字段收集后抛出 ValidationException。

使用示例:
    from ycms.validators import SlugValidator, FieldErrors, validate_name

    errors = FieldErrors()
    errors.add("name", validate_name(name))
    errors.update(SlugValidator().validate_fields(slug, Tag.slug_exists))
    errors.raise_if_any()
"""

from .slug import (
    SlugValidator,
    ExistsChecker,
    is_valid_slug,
    slugify,
    MSG_SLUG_REQUIRED,
    MSG_SLUG_INVALID,
    MSG_SLUG_CHECK_FAILED,
    MSG_SLUG_EXISTS,
)
from .fields import (
    FieldErrors,
    validate_name,
    validate_title,
    normalize_target,
    validate_target,
    validate_language_code,
    validate_direction,
)

__all__ = [
    "SlugValidator",
    "ExistsChecker",
    "is_valid_slug",
    "slugify",
    "MSG_SLUG_REQUIRED",
    "MSG_SLUG_INVALID",
    "MSG_SLUG_CHECK_FAILED",
    "MSG_SLUG_EXISTS",
    "FieldErrors",
    "validate_name",
    "validate_title",
    "normalize_target",
    "validate_target",
    "validate_language_code",
    "validate_direction",
]
