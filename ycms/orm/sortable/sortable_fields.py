"""排序字段定义

提供标准的排序字段定义 Mixin，简化模型定义。

使用示例:
    from ycms.orm import CoreModel
    from ycms.orm.sortable import PositionFieldMixin, SortableMixin

    class Category(CoreModel, PositionFieldMixin, SortableMixin):
        __sort_group_by__ = "parent_id"

        name = mapped_column(String(100))
        # position 字段由 PositionFieldMixin 自动提供
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column


class PositionFieldMixin:
    """排序字段 Mixin

    字段说明:
        - position: 同一作用域内的位置，从 0 开始，值越小越靠前
    """

    position: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        index=True,
        comment="排序位置"
    )


__all__ = [
    "PositionFieldMixin",
]
