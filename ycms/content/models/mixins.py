"""
内容模块 - 模型公共 Mixin
"""

from typing import Any, Optional

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class SlugLookupMixin:
    """slug 唯一性查询

    模型需要定义 slug 字段。数据库唯一约束是最终保证，这里的查询只用于表单提前提示。
    """

    @classmethod
    def slug_exists(cls, slug: str, exclude_id: Optional[int] = None, **scope: Any) -> int:
        """统计使用该 slug 的记录数

        Args:
            slug: 待检查的 slug
            exclude_id: 排除的记录ID（更新场景下排除自身）
            **scope: 唯一性作用域，如菜单的 language_id，None 值按 IS NULL 匹配
        """
        query = cls.query.filter(cls.slug == slug)
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        for field, value in scope.items():
            column = getattr(cls, field)
            query = query.filter(column.is_(None) if value is None else column == value)
        return query.count()

    @classmethod
    def get_by_slug(cls, slug: str, **scope: Any):
        query = cls.query.filter(cls.slug == slug)
        for field, value in scope.items():
            column = getattr(cls, field)
            query = query.filter(column.is_(None) if value is None else column == value)
        return query.first()


class LanguageFieldMixin:
    """内容所属语言"""

    @declared_attr
    def language_id(cls) -> Mapped[Optional[int]]:
        return mapped_column(
            Integer,
            ForeignKey("language.id"),
            nullable=True,
            index=True,
            comment="所属语言ID"
        )


__all__ = [
    "SlugLookupMixin",
    "LanguageFieldMixin",
]
