"""排序管理模块

导出:
    - PositionFieldMixin: 排序字段 Mixin（提供 position 字段）
    - SortableMixin: 分组内位置计算
    - PositionManager: 位置分配与拖拽重排
    - ReorderItem: 重排请求节点
"""

from .sortable_fields import PositionFieldMixin
from .sortable_mixin import SortableMixin
from .position_manager import PositionManager, ReorderItem

__all__ = [
    "PositionFieldMixin",
    "SortableMixin",
    "PositionManager",
    "ReorderItem",
]
