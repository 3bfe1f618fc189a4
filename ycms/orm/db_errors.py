"""数据库异常转换

把 SQLAlchemy 异常转换为业务异常：

- IntegrityError（唯一约束冲突）交给调用方提供的 conflict 工厂，通常转为 409
- 其他 SQLAlchemyError 记录日志后转为 503，不向调用方暴露内部细节

使用示例:
    from ycms.orm.db_errors import map_db_errors

    with map_db_errors("create_tag", conflict=slug_conflict):
        tag.save(commit=True)
"""

from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..exceptions import BusinessException, Err, ErrorCode
from ..log import get_logger
from .transaction import transaction_manager

logger = get_logger("ycms.orm.session")

ConflictFactory = Callable[[IntegrityError], BusinessException]


def _rollback_outside_transaction() -> None:
    """不在事务中时回滚 session，使其可继续使用"""
    if transaction_manager.is_in_transaction():
        return
    transaction_manager.get_session().rollback()


@contextmanager
def map_db_errors(
    operation: str,
    conflict: Optional[ConflictFactory] = None,
) -> Generator[None, None, None]:
    """转换代码块内抛出的数据库异常

    Args:
        operation: 操作名称，写入日志和异常 extra
        conflict: IntegrityError 到业务异常的转换函数，None 表示按数据库错误处理

    Raises:
        BusinessException: conflict 工厂返回的异常
        ServiceUnavailableException: 其他数据库错误
    """
    try:
        yield
    except IntegrityError as e:
        _rollback_outside_transaction()
        if conflict is None:
            logger.exception(f"数据库完整性错误: {operation}")
            raise Err.unavailable(
                "数据库操作失败", code=ErrorCode.DATABASE_ERROR, operation=operation
            ) from e
        logger.info(f"唯一约束冲突: {operation}")
        raise conflict(e) from e
    except SQLAlchemyError as e:
        _rollback_outside_transaction()
        logger.exception(f"数据库操作失败: {operation}")
        raise Err.unavailable(
            "数据库操作失败", code=ErrorCode.DATABASE_ERROR, operation=operation
        ) from e


def slug_conflict(e: IntegrityError) -> BusinessException:
    """slug 唯一约束冲突"""
    return Err.conflict(
        "Slug already exists",
        code=ErrorCode.SLUG_EXISTS,
        field_errors={"slug": "Slug already exists"},
    )


__all__ = [
    "map_db_errors",
    "slug_conflict",
]
