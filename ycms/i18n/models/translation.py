"""
多语言模块 - 翻译关联模型

定义实体与其其他语言版本之间的关联（TranslationLink）。

关联是有方向的：entity_id 是源实体，translation_id 是在 language_id 语言下新建的实体。
查询“相关翻译”时两个方向都要考虑。
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, or_
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...orm import CoreModel
from .language import Language


class TranslationLink(CoreModel):
    """翻译关联

    字段说明:
        - entity_type: 实体类型（page / tag / category）
        - entity_id: 源实体ID
        - language_id: 翻译目标语言
        - translation_id: 翻译实体ID

    约束:
        (entity_type, entity_id, language_id) 唯一，同一实体在同一语言下只能有一个翻译。
        关联创建后不再修改，实体删除时由服务层清理两端的关联。
    """
    __tablename__ = "translation"
    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", "language_id", name="uq_translation_entity_language"),
    )

    entity_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="实体类型"
    )

    entity_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="源实体ID"
    )

    language_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("language.id", ondelete="CASCADE"),
        nullable=False,
        comment="目标语言ID"
    )

    translation_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="翻译实体ID"
    )

    language: Mapped[Language] = relationship(Language)

    def __repr__(self):
        return (
            f"<TranslationLink {self.entity_type} "
            f"{self.entity_id} -> {self.translation_id} (language_id={self.language_id})>"
        )

    # ==================== 查询方法 ====================

    @classmethod
    def find(cls, entity_type: str, entity_id: int, language_id: int) -> Optional["TranslationLink"]:
        """按 (entity_type, entity_id, language_id) 查询关联"""
        return cls.query.filter(
            cls.entity_type == entity_type,
            cls.entity_id == entity_id,
            cls.language_id == language_id,
        ).first()

    @classmethod
    def find_as_translation(cls, entity_type: str, translation_id: int) -> List["TranslationLink"]:
        """查询以该实体为翻译端的关联（反向）"""
        return cls.query.filter(
            cls.entity_type == entity_type,
            cls.translation_id == translation_id,
        ).order_by(cls.id).all()

    @classmethod
    def find_related(cls, entity_type: str, entity_id: int) -> List["TranslationLink"]:
        """查询与实体相关的全部关联（entity_id = X 或 translation_id = X）"""
        return cls.query.filter(
            cls.entity_type == entity_type,
            or_(cls.entity_id == entity_id, cls.translation_id == entity_id),
        ).order_by(cls.id).all()

    @classmethod
    def create_link(
        cls,
        entity_type: str,
        entity_id: int,
        language_id: int,
        translation_id: int,
    ) -> "TranslationLink":
        """创建关联并 flush，唯一约束冲突时抛出 IntegrityError"""
        link = cls(
            entity_type=entity_type,
            entity_id=entity_id,
            language_id=language_id,
            translation_id=translation_id,
        )
        return link.flush()

    @classmethod
    def delete_related(cls, entity_type: str, entity_id: int) -> int:
        """删除与实体相关的全部关联，返回删除数量"""
        return cls.query.filter(
            cls.entity_type == entity_type,
            or_(cls.entity_id == entity_id, cls.translation_id == entity_id),
        ).delete(synchronize_session="fetch")


__all__ = ["TranslationLink"]
