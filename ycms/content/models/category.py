"""
内容模块 - 分类模型

分类是邻接表树：parent_id 指向父分类，根分类的 parent_id 为空。
删除分类时其直接子分类变为根分类（ON DELETE SET NULL）。
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...orm import CoreModel, PositionFieldMixin, SortableMixin, TreeMixin
from .mixins import LanguageFieldMixin, SlugLookupMixin


class Category(CoreModel, TreeMixin, PositionFieldMixin, SortableMixin, SlugLookupMixin, LanguageFieldMixin):
    """分类模型

    字段说明:
        - name: 分类名称
        - slug: URL 标识（全局唯一）
        - description: 描述
        - parent_id: 父分类ID，为空表示根分类
        - position: 同一父分类下的排序位置
        - language_id: 所属语言

    树形操作方法（继承自 TreeMixin）:
        - get_children(): 直接子分类
        - get_descendant_ids(): 所有子孙分类ID
        - get_tree() / get_flat_tree(): 整表的树
        - get_parent_options(exclude_id): 父分类下拉选项
        - validate_parent(new_parent_id): 循环引用检查
    """

    __sort_group_by__ = "parent_id"
    __tree_sort_fields__ = ("position", "name")

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="分类名称"
    )

    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="URL 标识"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="描述"
    )

    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("category.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="父分类ID"
    )

    def __repr__(self):
        return f"<Category id={self.id} slug={self.slug!r}>"


__all__ = ["Category"]
