"""
模型基类

所有 CMS 实体（分类、标签、页面、菜单、语言、翻译关联）都继承 CoreModel，
获得自增主键、时间戳和与事务上下文配合的保存方法。
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, ClassVar, Optional, TYPE_CHECKING

from sqlalchemy import DateTime, Integer, func, inspect
from sqlalchemy.orm import Mapped, Query, Session, declarative_base, declared_attr, mapped_column

from ..log import get_logger
from .transaction import get_current_transaction

if TYPE_CHECKING:
    from typing_extensions import Self

logger = get_logger("ycms.orm.model")

Base = declarative_base()


def to_snake_case(name: str) -> str:
    """类名转表名：MenuItem -> menu_item"""
    name = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()


class CoreModel(Base):
    """CMS 实体基类

    - 表名由类名生成（MenuItem -> menu_item）
    - created_at 由数据库写入，updated_at 在更新时刷新
    - save(commit=True) 在事务上下文中只 flush，提交交给事务

    query 由 init_database() 设置为 scoped_session 的 query_property，
    只能在具体模型类上访问（Category.query），基类本身没有映射。

    使用示例:
        tag = Tag(name="Python", slug="python").save(commit=True)
        Tag.get(tag.id)
    """
    __abstract__ = True

    if TYPE_CHECKING:
        query: ClassVar[Query[Self]]
    else:
        query = None

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return to_snake_case(cls.__name__)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        comment="创建时间"
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
        onupdate=func.now(),
        comment="更新时间"
    )

    # 由数据库维护，构造和批量赋值时忽略
    _readonly_fields: ClassVar[frozenset] = frozenset({"id", "created_at", "updated_at"})

    def __init__(self, **kwargs):
        for field in self._readonly_fields - {"id"}:
            kwargs.pop(field, None)
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<{self.__class__.__name__} id={self.id}>"

    @property
    def session(self) -> Session:
        """实例所在的 session，未关联时取当前线程的 scoped session"""
        from .db_session import db_manager
        return Session.object_session(self) or db_manager.get_session()

    # ==================== 写操作 ====================

    def save(self, commit: bool = False) -> Self:
        """加入 session，commit=True 时提交（事务中改为 flush）"""
        self.session.add(self)
        self._finish_write(commit)
        return self

    def flush(self) -> Self:
        """写入但不提交，用于拿到自增 id"""
        self.session.add(self)
        self.session.flush()
        return self

    def delete(self, commit: bool = False) -> None:
        self.session.delete(self)
        self._finish_write(commit)

    def update_properties(self, **kwargs) -> Self:
        """设置模型上存在的字段，只读字段和未知键跳过，不保存"""
        for key, value in kwargs.items():
            if key not in self._readonly_fields and hasattr(self, key):
                setattr(self, key, value)
        return self

    def _finish_write(self, commit: bool) -> None:
        if not commit:
            return
        tx = get_current_transaction()
        if tx is not None and tx.should_suppress_commit():
            logger.debug(f"{self!r}: 事务进行中，commit 改为 flush")
            self.session.flush()
        else:
            self.session.commit()

    # ==================== 查询 ====================

    @classmethod
    def get(cls, id: Any):
        """按主键查询，id 为 None 或记录不存在时返回 None"""
        if id is None:
            return None
        return cls.query.filter(cls.id == id).first()

    def to_dict(self, exclude: set = None) -> dict:
        """列字段转字典"""
        exclude = exclude or set()
        return {
            attr.key: getattr(self, attr.key)
            for attr in inspect(self).mapper.column_attrs
            if attr.key not in exclude
        }
