"""表单字段验证

提供名称、标题、菜单打开方式和语言代码的验证函数。
每个函数返回错误消息，验证通过返回 None，由调用方按字段收集。

使用示例:
    from ycms.validators import FieldErrors, validate_name

    errors = FieldErrors()
    errors.add("name", validate_name(name))
    errors.update(slug_validator.validate_fields(slug, Category.slug_exists))
    errors.raise_if_any()
"""

import re
from typing import Optional

from ..config import get_cms_settings
from ..enums import MenuTarget, TextDirection
from ..exceptions import Err, ErrorCode

_LANGUAGE_CODE = re.compile(r"[a-z]{2,3}(-[a-z]{2})?")


class FieldErrors(dict):
    """字段错误收集器

    键为字段名，值为错误消息。add 传入 None 时忽略，便于直接串联验证函数。
    """

    def add(self, field: str, message: Optional[str]) -> None:
        if message and field not in self:
            self[field] = message

    def raise_if_any(
        self,
        message: str = "数据验证失败",
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> None:
        """存在错误时抛出 ValidationException"""
        if self:
            raise Err.invalid(message, code=code, field_errors=dict(self))


def validate_name(
    name: Optional[str],
    min_length: Optional[int] = None,
    label: str = "Name",
) -> Optional[str]:
    """验证名称：必填，去除首尾空白后至少 min_length 个字符"""
    if min_length is None:
        min_length = get_cms_settings().min_name_length
    value = (name or "").strip()
    if not value:
        return f"{label} is required"
    if len(value) < min_length:
        return f"{label} must be at least {min_length} characters"
    return None


def validate_title(title: Optional[str]) -> Optional[str]:
    """验证标题：必填"""
    if not (title or "").strip():
        return "Title is required"
    return None


def normalize_target(target: Optional[str]) -> str:
    """菜单项打开方式，为空时使用默认值"""
    return target or get_cms_settings().menu_item_default_target


def validate_target(target: Optional[str]) -> Optional[str]:
    """验证菜单项打开方式（空值视为默认值）"""
    value = normalize_target(target)
    if value not in {t.value for t in MenuTarget}:
        return "Invalid target (use _self, _blank, _parent or _top)"
    return None


def validate_language_code(code: Optional[str]) -> Optional[str]:
    """验证语言代码：2-5 个字符，小写字母，可带地区后缀（如 pt-br）"""
    if not code:
        return "Language code is required"
    if not 2 <= len(code) <= 5:
        return "Language code must be 2-5 characters"
    if not _LANGUAGE_CODE.fullmatch(code):
        return "Invalid language code format"
    return None


def validate_direction(direction: Optional[str]) -> Optional[str]:
    """验证书写方向：ltr 或 rtl"""
    if direction not in {d.value for d in TextDirection}:
        return "Direction must be ltr or rtl"
    return None


__all__ = [
    "FieldErrors",
    "validate_name",
    "validate_title",
    "normalize_target",
    "validate_target",
    "validate_language_code",
    "validate_direction",
]
