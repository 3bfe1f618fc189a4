"""事务状态与传播行为"""

from enum import Enum


class TransactionState(str, Enum):
    """事务状态

    INACTIVE → ACTIVE → COMMITTED
                  ↘
                   ROLLED_BACK

    提交或回滚本身失败时进入 FAILED。
    """

    INACTIVE = "inactive"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


class TransactionPropagation(str, Enum):
    """事务传播行为

    - REQUIRED: 已有事务时加入，没有则新建（默认）
    - MANDATORY: 必须由调用方先开启事务，用于只负责写入的底层步骤

    使用示例:
        @tm.transactional(propagation=TransactionPropagation.MANDATORY)
        def write_positions(items):
            ...
    """

    REQUIRED = "required"
    MANDATORY = "mandatory"
