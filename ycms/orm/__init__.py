"""ORM 模块

提供模型基类、会话管理、事务管理、树形结构和排序支持。

使用示例:
    from ycms.orm import CoreModel, init_database, transaction_manager as tm

    init_database("sqlite:///./cms.db", create_tables=True)

    with tm.transaction():
        ...
"""

from .core_model import Base, CoreModel, to_snake_case
from .db_session import (
    db_manager,
    DatabaseManager,
    init_database,
    get_engine,
    db_session_scope,
    enable_sqlite_foreign_keys,
)
from .db_errors import map_db_errors, slug_conflict
from .transaction import (
    TransactionContext,
    TransactionManager,
    TransactionPropagation,
    TransactionState,
    transaction_manager,
    get_current_transaction,
)
from .tree import (
    TreeMixin,
    TreeNode,
    build_tree,
    flatten_tree,
    find_orphans,
    descendant_ids,
    exclude_subtree,
    parent_options,
    validate_no_circular_reference,
)
from .sortable import PositionFieldMixin, SortableMixin, PositionManager, ReorderItem

__all__ = [
    # 模型基类
    "Base",
    "CoreModel",
    "to_snake_case",
    # 会话
    "db_manager",
    "DatabaseManager",
    "init_database",
    "get_engine",
    "db_session_scope",
    "enable_sqlite_foreign_keys",
    "map_db_errors",
    "slug_conflict",
    # 事务
    "TransactionContext",
    "TransactionManager",
    "TransactionPropagation",
    "TransactionState",
    "transaction_manager",
    "get_current_transaction",
    # 树形结构
    "TreeMixin",
    "TreeNode",
    "build_tree",
    "flatten_tree",
    "find_orphans",
    "descendant_ids",
    "exclude_subtree",
    "parent_options",
    "validate_no_circular_reference",
    # 排序
    "PositionFieldMixin",
    "SortableMixin",
    "PositionManager",
    "ReorderItem",
]
