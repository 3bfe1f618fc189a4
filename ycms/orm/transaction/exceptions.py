"""事务异常"""


class TransactionError(Exception):
    """事务异常基类"""

    def __init__(self, message: str = "事务错误"):
        self.message = message
        super().__init__(message)


class TransactionNotActiveError(TransactionError):
    """对未开始或已结束的事务执行提交"""


class TransactionAlreadyCommittedError(TransactionError):
    """事务已提交后再次提交或回滚"""


class PropagationError(TransactionError):
    """调用方式不满足传播行为的要求"""

    def __init__(self, propagation: str, message: str):
        self.propagation = propagation
        super().__init__(f"[{propagation}] {message}")
