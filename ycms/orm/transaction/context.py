"""事务上下文

一个 TransactionContext 对应一次最外层的 tm.transaction() 调用。
内层调用加入时只增加 nesting_level，提交和回滚都由最外层完成。
"""

from typing import Any, Callable, List

from sqlalchemy.orm import Session

from ...log import get_logger
from .exceptions import TransactionAlreadyCommittedError, TransactionNotActiveError
from .state import TransactionState

logger = get_logger("ycms.orm.transaction")

Callback = Callable[["TransactionContext"], Any]


class TransactionContext:
    """事务上下文

    在上下文内：
    - CoreModel.save(commit=True) 只 flush，由上下文结束时统一提交
    - 任何异常都会回滚整个事务
    - after_commit / after_rollback 注册的回调在事务结束后执行，回调失败只记录日志

    使用示例:
        with tm.transaction() as tx:
            category.save(commit=True)   # 只 flush
            tx.after_commit(lambda ctx: logger.info("分类已保存"))
    """

    def __init__(self, session: Session, auto_commit: bool = True):
        self.session = session
        self.auto_commit = auto_commit
        self._state = TransactionState.INACTIVE
        self._nesting_level = 0
        self._commit_callbacks: List[Callback] = []
        self._rollback_callbacks: List[Callback] = []

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == TransactionState.ACTIVE

    @property
    def nesting_level(self) -> int:
        """当前加入该事务的层数，最外层为 1"""
        return self._nesting_level

    # ==================== 生命周期 ====================

    def begin(self) -> "TransactionContext":
        # session 使用 autobegin，这里只记录状态
        self._state = TransactionState.ACTIVE
        self._nesting_level = 1
        logger.debug("事务开始")
        return self

    def join(self) -> None:
        self._nesting_level += 1
        logger.debug(f"加入现有事务 (level={self._nesting_level})")

    def leave(self) -> None:
        if self._nesting_level > 1:
            self._nesting_level -= 1

    def commit(self) -> None:
        if self._state == TransactionState.COMMITTED:
            raise TransactionAlreadyCommittedError("事务已提交")
        if not self.is_active:
            raise TransactionNotActiveError(f"无法提交：事务状态为 {self._state.value}")

        try:
            self.session.commit()
        except Exception:
            self._state = TransactionState.FAILED
            raise
        self._finish(TransactionState.COMMITTED, self._commit_callbacks)

    def rollback(self) -> None:
        """回滚事务，重复调用无副作用"""
        if self._state == TransactionState.COMMITTED:
            raise TransactionAlreadyCommittedError("无法回滚：事务已提交")
        if self._state not in (TransactionState.ACTIVE, TransactionState.FAILED):
            return

        try:
            self.session.rollback()
        except Exception:
            self._state = TransactionState.FAILED
            logger.exception("事务回滚失败")
            raise
        self._finish(TransactionState.ROLLED_BACK, self._rollback_callbacks)

    def _finish(self, state: TransactionState, callbacks: List[Callback]) -> None:
        self._state = state
        self._nesting_level = 0
        logger.debug(f"事务结束: {state.value}")
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.warning(f"事务回调执行失败 ({state.value}): {e}")

    def should_suppress_commit(self) -> bool:
        """CoreModel.save(commit=True) 是否只 flush"""
        return self.is_active

    # ==================== 回调 ====================

    def after_commit(self, func: Callback) -> Callback:
        """注册提交后回调，可作为装饰器使用"""
        self._commit_callbacks.append(func)
        return func

    def after_rollback(self, func: Callback) -> Callback:
        """注册回滚后回调，可作为装饰器使用"""
        self._rollback_callbacks.append(func)
        return func

    # ==================== 上下文管理器 ====================

    def __enter__(self) -> "TransactionContext":
        return self.begin()

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
            return False
        if self.auto_commit and self.is_active:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        return False

    def __repr__(self) -> str:
        return f"<TransactionContext state={self._state.value} level={self._nesting_level}>"
