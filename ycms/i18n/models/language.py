"""
多语言模块 - 语言模型

定义站点支持的语言（Language）。
"""

from typing import List, Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ...enums import TextDirection
from ...orm import CoreModel, PositionFieldMixin, SortableMixin


class Language(CoreModel, PositionFieldMixin, SortableMixin):
    """语言模型

    字段说明:
        - code: 语言代码（唯一，如 en、fr、pt-br）
        - name: 英文名称
        - native_name: 本地名称（如 Français）
        - direction: 书写方向 ltr / rtl
        - is_active: 是否启用，未启用的语言不能作为翻译目标
        - is_default: 是否默认语言，任一时刻只有一个
        - position: 列表排序

    业务规则由 LanguageService 维护：默认语言不能停用或删除，
    未启用的语言不能设为默认。
    """

    code: Mapped[str] = mapped_column(
        String(5),
        unique=True,
        nullable=False,
        comment="语言代码"
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="语言名称"
    )

    native_name: Mapped[str] = mapped_column(
        String(100),
        default="",
        nullable=False,
        comment="本地名称"
    )

    direction: Mapped[str] = mapped_column(
        String(3),
        default=TextDirection.LTR.value,
        nullable=False,
        comment="书写方向"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="是否启用"
    )

    is_default: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="是否默认语言"
    )

    def __repr__(self):
        return f"<Language code={self.code!r}>"

    # ==================== 查询方法 ====================

    @classmethod
    def get_by_code(cls, code: str) -> Optional["Language"]:
        """按语言代码查询，不存在返回 None"""
        if not code:
            return None
        return cls.query.filter(cls.code == code).first()

    @classmethod
    def get_default(cls) -> Optional["Language"]:
        """获取默认语言"""
        return cls.query.filter(cls.is_default.is_(True)).first()

    @classmethod
    def list_active(cls) -> List["Language"]:
        """获取所有启用的语言，按 position、name 排序"""
        return (
            cls.query
            .filter(cls.is_active.is_(True))
            .order_by(cls.position, cls.name)
            .all()
        )

    @classmethod
    def list_all(cls) -> List["Language"]:
        return cls.query.order_by(cls.position, cls.name).all()


__all__ = ["Language"]
