"""
内容模块 - 页面模型
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...enums import PageStatus
from ...orm import CoreModel
from .mixins import LanguageFieldMixin, SlugLookupMixin


class Page(CoreModel, SlugLookupMixin, LanguageFieldMixin):
    """页面模型

    字段说明:
        - title: 标题
        - slug: URL 标识（全局唯一）
        - body: 正文
        - status: draft / published，翻译生成的页面总是草稿
    """

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="标题"
    )

    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="URL 标识"
    )

    body: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
        comment="正文"
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=PageStatus.DRAFT.value,
        nullable=False,
        comment="状态"
    )

    def __repr__(self):
        return f"<Page id={self.id} slug={self.slug!r}>"


__all__ = ["Page"]
