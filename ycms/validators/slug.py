"""Slug 验证

提供 slug 格式判断、唯一性检查和从标题生成 slug 的工具。

验证顺序:
    1. 为空 -> "Slug is required"
    2. 格式错误 -> "Invalid slug format (use lowercase letters, numbers, and hyphens)"
    3. 超出长度 -> "Slug is too long (max N characters)"
    4. 唯一性检查函数抛出异常 -> 记录日志，返回 "Error checking slug"
    5. 已存在 -> "Slug already exists"

使用示例:
    from ycms.validators import SlugValidator, slugify

    validator = SlugValidator()

    error = validator.validate("about-us", Page.slug_exists)
    if error:
        raise Err.invalid(error, field_errors={"slug": error})

    # 更新时 slug 未变化不检查唯一性
    error = validator.validate_for_update(new_slug, page.slug,
                                          lambda s: Page.slug_exists(s, exclude_id=page.id))

    slugify("Crème Brûlée Recipes")  # "creme-brulee-recipes"
"""

import re
import unicodedata
from typing import Callable, Dict, Optional, Union

from ..config import get_cms_settings
from ..log import get_logger

logger = get_logger("ycms.validators.slug")

# 唯一性检查函数：返回已存在的数量或布尔值
ExistsChecker = Callable[[str], Union[int, bool]]

MSG_SLUG_REQUIRED = "Slug is required"
MSG_SLUG_INVALID = "Invalid slug format (use lowercase letters, numbers, and hyphens)"
MSG_SLUG_CHECK_FAILED = "Error checking slug"
MSG_SLUG_EXISTS = "Slug already exists"

_SLUG_CHARS = re.compile(r"[a-z0-9-]+")
_SLUG_DROP = re.compile(r"[^a-z0-9-]")
_SLUG_SEPARATORS = re.compile(r"[\s_]+")
_MULTI_HYPHEN = re.compile(r"-{2,}")


def is_valid_slug(slug: str) -> bool:
    """判断 slug 格式是否合法

    规则：非空；只包含小写字母、数字和连字符；不以连字符开头或结尾；不包含连续连字符。
    """
    if not slug or not _SLUG_CHARS.fullmatch(slug):
        return False
    if slug.startswith("-") or slug.endswith("-"):
        return False
    return "--" not in slug


def slugify(text: str) -> str:
    """把任意文本转换为 slug

    去除重音符号后转小写，空白和下划线转为连字符，丢弃其他字符，合并并修剪连字符。
    结果可能为空字符串（例如纯中文标题），调用方需要自行处理。
    """
    if not text:
        return ""
    normalized = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    slug = _SLUG_SEPARATORS.sub("-", stripped.lower())
    slug = _SLUG_DROP.sub("", slug)
    slug = _MULTI_HYPHEN.sub("-", slug)
    return slug.strip("-")


class SlugValidator:
    """Slug 验证器

    Args:
        max_length: slug 最大长度，None 时使用 CmsSettings.max_slug_length
    """

    def __init__(self, max_length: Optional[int] = None):
        self.max_length = max_length if max_length is not None else get_cms_settings().max_slug_length

    def validate(self, slug: str, exists_checker: ExistsChecker) -> Optional[str]:
        """验证 slug

        Args:
            slug: 待验证的 slug
            exists_checker: 唯一性检查函数

        Returns:
            错误消息，验证通过返回 None
        """
        if not slug:
            return MSG_SLUG_REQUIRED
        if not is_valid_slug(slug):
            return MSG_SLUG_INVALID
        if len(slug) > self.max_length:
            return f"Slug is too long (max {self.max_length} characters)"

        try:
            exists = exists_checker(slug)
        except Exception:
            logger.exception(f"检查 slug 唯一性失败: {slug}")
            return MSG_SLUG_CHECK_FAILED

        if exists:
            return MSG_SLUG_EXISTS
        return None

    def validate_for_update(
        self,
        slug: str,
        current_slug: str,
        exists_checker: ExistsChecker,
    ) -> Optional[str]:
        """更新场景下验证 slug，未变化时直接通过"""
        if slug == current_slug:
            return None
        return self.validate(slug, exists_checker)

    def validate_fields(
        self,
        slug: str,
        exists_checker: ExistsChecker,
        current_slug: Optional[str] = None,
        field: str = "slug",
    ) -> Dict[str, str]:
        """验证 slug 并返回字段错误字典，通过时返回空字典

        Args:
            current_slug: 当前 slug，提供时按更新场景验证
            field: 错误字典中使用的字段名
        """
        if current_slug is not None:
            error = self.validate_for_update(slug, current_slug, exists_checker)
        else:
            error = self.validate(slug, exists_checker)
        return {field: error} if error else {}


__all__ = [
    "SlugValidator",
    "ExistsChecker",
    "is_valid_slug",
    "slugify",
    "MSG_SLUG_REQUIRED",
    "MSG_SLUG_INVALID",
    "MSG_SLUG_CHECK_FAILED",
    "MSG_SLUG_EXISTS",
]
