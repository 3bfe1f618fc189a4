"""事务管理器

重排、创建翻译、删除分类等多步写操作都通过 transaction_manager 包成一个事务，
任一步失败时整体回滚。当前事务保存在 ContextVar 中，线程和协程之间互不影响。

使用示例:
    from ycms.orm import transaction_manager as tm

    with tm.transaction():
        entity = adapter.create_translation(source, slug, language)
        TranslationLink.create_link("page", source.id, language.id, entity.id)

    @tm.transactional()
    def delete_category(category_id):
        ...
"""

from contextlib import contextmanager
from contextvars import ContextVar
from functools import wraps
from typing import Callable, Generator, Optional, TypeVar

from sqlalchemy.orm import Session

from ...log import get_logger
from .context import TransactionContext
from .exceptions import PropagationError
from .state import TransactionPropagation

logger = get_logger("ycms.orm.transaction")

T = TypeVar("T")

_current_transaction: ContextVar[Optional[TransactionContext]] = ContextVar(
    "_current_transaction", default=None
)


def get_current_transaction() -> Optional[TransactionContext]:
    """当前事务上下文，不在事务中时返回 None"""
    return _current_transaction.get()


class TransactionManager:
    """事务管理器"""

    def get_session(self) -> Session:
        """当前线程的 scoped session，与各模型的 query 共用"""
        from ..db_session import db_manager
        return db_manager.get_session()

    @property
    def current_transaction(self) -> Optional[TransactionContext]:
        return _current_transaction.get()

    def is_in_transaction(self) -> bool:
        tx = _current_transaction.get()
        return tx is not None and tx.is_active

    @contextmanager
    def transaction(
        self,
        propagation: TransactionPropagation = TransactionPropagation.REQUIRED,
        auto_commit: bool = True,
    ) -> Generator[TransactionContext, None, None]:
        """开启或加入事务

        Args:
            propagation: 传播行为，默认 REQUIRED
            auto_commit: 最外层正常结束时是否自动提交

        Raises:
            PropagationError: MANDATORY 但当前没有事务
        """
        current = _current_transaction.get()
        if current is not None and current.is_active:
            # 内层异常继续向外抛出，由最外层回滚
            current.join()
            try:
                yield current
            finally:
                current.leave()
            return

        if propagation == TransactionPropagation.MANDATORY:
            raise PropagationError("MANDATORY", "必须在已开启的事务中调用")

        ctx = TransactionContext(self.get_session(), auto_commit=auto_commit)
        token = _current_transaction.set(ctx)
        try:
            with ctx:
                yield ctx
        finally:
            _current_transaction.reset(token)

    def transactional(
        self,
        propagation: TransactionPropagation = TransactionPropagation.REQUIRED,
    ) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """把函数体包在 transaction() 中执行的装饰器"""
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            @wraps(func)
            def wrapper(*args, **kwargs) -> T:
                with self.transaction(propagation=propagation):
                    return func(*args, **kwargs)
            return wrapper
        return decorator


transaction_manager = TransactionManager()
