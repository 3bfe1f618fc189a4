"""
内容模块 - 导航菜单模型

Menu 是菜单容器，MenuItem 是菜单内的邻接表树。
菜单项的排序作用域是 (menu_id, parent_id)。
"""

from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...enums import MenuTarget
from ...orm import CoreModel, PositionFieldMixin, SortableMixin, TreeMixin
from .mixins import LanguageFieldMixin, SlugLookupMixin


class Menu(CoreModel, SlugLookupMixin, LanguageFieldMixin):
    """菜单模型

    约束:
        (slug, language_id) 唯一，不同语言可以使用相同的 slug。
        唯一约束不比较 NULL，未指定语言的菜单由部分唯一索引保证 slug 唯一。
    """
    __table_args__ = (
        UniqueConstraint("slug", "language_id", name="uq_menu_slug_language"),
        Index(
            "uq_menu_slug_no_language",
            "slug",
            unique=True,
            sqlite_where=text("language_id IS NULL"),
            postgresql_where=text("language_id IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="菜单名称"
    )

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="URL 标识"
    )

    items: Mapped[List["MenuItem"]] = relationship(
        "MenuItem",
        back_populates="menu",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Menu id={self.id} slug={self.slug!r}>"


class MenuItem(CoreModel, TreeMixin, PositionFieldMixin, SortableMixin):
    """菜单项模型

    字段说明:
        - menu_id: 所属菜单（菜单删除时级联删除）
        - parent_id: 父菜单项（父项删除时级联删除子项）
        - title: 显示标题
        - url: 链接地址
        - page_id: 关联页面（页面删除时置空）
        - target: 打开方式 _self / _blank / _parent / _top
        - position: 同一 (menu_id, parent_id) 下的排序位置
        - css_class: 自定义样式类
        - is_active: 是否显示
    """

    __sort_group_by__ = ["menu_id", "parent_id"]
    __tree_scope__ = "menu_id"
    __tree_sort_fields__ = ("position", "id")

    menu_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("menu.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="所属菜单ID"
    )

    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("menu_item.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        comment="父菜单项ID"
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="标题"
    )

    url: Mapped[Optional[str]] = mapped_column(
        String(2048),
        nullable=True,
        comment="链接地址"
    )

    page_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("page.id", ondelete="SET NULL"),
        nullable=True,
        comment="关联页面ID"
    )

    target: Mapped[str] = mapped_column(
        String(10),
        default=MenuTarget.SELF.value,
        nullable=False,
        comment="打开方式"
    )

    css_class: Mapped[str] = mapped_column(
        String(100),
        default="",
        nullable=False,
        comment="样式类"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="是否显示"
    )

    menu: Mapped[Menu] = relationship(Menu, back_populates="items")

    def __repr__(self):
        return f"<MenuItem id={self.id} menu_id={self.menu_id} title={self.title!r}>"


__all__ = [
    "Menu",
    "MenuItem",
]
