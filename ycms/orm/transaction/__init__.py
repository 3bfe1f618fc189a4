"""事务管理模块

使用示例:
    from ycms.orm.transaction import transaction_manager as tm

    with tm.transaction() as tx:
        # 多步写操作，任一步失败全部回滚
        ...
"""

from .state import TransactionState, TransactionPropagation
from .exceptions import (
    TransactionError,
    TransactionNotActiveError,
    TransactionAlreadyCommittedError,
    PropagationError,
)
from .context import TransactionContext
from .manager import (
    TransactionManager,
    transaction_manager,
    get_current_transaction,
)

__all__ = [
    "TransactionState",
    "TransactionPropagation",
    "TransactionError",
    "TransactionNotActiveError",
    "TransactionAlreadyCommittedError",
    "PropagationError",
    "TransactionContext",
    "TransactionManager",
    "transaction_manager",
    "get_current_transaction",
]
