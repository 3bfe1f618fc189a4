"""
内容模块 - 标签模型
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ...orm import CoreModel
from .mixins import LanguageFieldMixin, SlugLookupMixin


class Tag(CoreModel, SlugLookupMixin, LanguageFieldMixin):
    """标签模型（扁平，无层级）"""

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="标签名称"
    )

    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="URL 标识"
    )

    def __repr__(self):
        return f"<Tag id={self.id} slug={self.slug!r}>"


__all__ = ["Tag"]
