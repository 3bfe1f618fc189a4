"""位置管理器

负责树形可排序记录的位置分配和拖拽重排。

- next_position: 新记录追加到 (owner, parent) 分组末尾
- reorder: 按前端提交的嵌套树重写 parent_id 和 position

reorder 在一个事务中执行，任一节点校验失败时全部回滚。
提交的树只影响其中列出的记录，未列出的记录保持原样。

使用示例:
    from ycms.orm.sortable import PositionManager

    manager = PositionManager(MenuItem, owner_field="menu_id", owner_label="menu")

    item.position = manager.next_position(menu_id=1, parent_id=None)

    manager.reorder(1, [
        {"id": 10, "children": [{"id": 12}, {"id": 11}]},
    ])
    # 12 -> position 0, 11 -> position 1，两者 parent_id 均为 10
"""

from typing import Any, Dict, List, Optional, Sequence, Set, Type, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ...exceptions import Err, ErrorCode
from ...log import get_logger
from ..transaction import transaction_manager

logger = get_logger("ycms.orm.sortable")


class ReorderItem(BaseModel):
    """重排请求中的一个节点

    parent_id 字段允许提交但会被忽略，父节点由嵌套关系决定。
    """
    id: int = Field(..., description="记录ID")
    parent_id: Optional[int] = Field(None, description="父节点ID（忽略，以嵌套关系为准）")
    children: List["ReorderItem"] = Field(default_factory=list, description="子节点")

    model_config = ConfigDict(extra="ignore")


# 支持递归引用
ReorderItem.model_rebuild()


ReorderTree = Sequence[Union[ReorderItem, Dict[str, Any]]]


class PositionManager:
    """位置管理器

    Args:
        model: 使用 SortableMixin 的模型类
        owner_field: 归属字段名（如 "menu_id"），None 表示不校验归属
        owner_label: 归属对象名称，用于错误消息
        parent_field: 父节点字段名
        not_found_code: 记录不存在时的错误码
    """

    def __init__(
        self,
        model: Type,
        owner_field: Optional[str] = None,
        owner_label: str = "menu",
        parent_field: str = "parent_id",
        not_found_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
    ):
        self.model = model
        self.owner_field = owner_field
        self.owner_label = owner_label
        self.parent_field = parent_field
        self.position_field = getattr(model, '__sort_field__', 'position')
        self.not_found_code = not_found_code

    # ==================== 位置分配 ====================

    def get_max_position(self, **scope: Any) -> Optional[int]:
        """分组内的最大位置，分组为空时返回 None"""
        return self.model.get_max_position(scope)

    def next_position(self, **scope: Any) -> int:
        """分组内的下一个位置，分组为空时返回 0"""
        return self.model.next_position(**scope)

    # ==================== 重排 ====================

    def reorder(self, owner_id: Any, item_tree: ReorderTree) -> int:
        """按嵌套树重写 parent_id 和 position

        先序遍历每个节点：加载记录、校验归属、写入父节点和同级序号（每层从 0 开始），
        再递归处理子节点。

        Args:
            owner_id: 归属对象ID（如 menu_id）
            item_tree: 嵌套树，元素为 {"id": ..., "children": [...]} 字典或 ReorderItem

        Returns:
            写入的记录数

        Raises:
            ResourceNotFoundException: 记录不存在
            ValidationException: 记录不属于 owner_id、ID 重复或树格式错误
        """
        if self.owner_field is not None:
            # 归属字段是整数列，"3" 与 3 视为同一个归属
            try:
                owner_id = int(owner_id)
            except (TypeError, ValueError) as e:
                raise Err.invalid(f"invalid {self.owner_label} id: {owner_id!r}") from e
        nodes = self._parse_tree(item_tree)
        self._check_duplicates(nodes)

        with transaction_manager.transaction():
            count = self._apply(owner_id, nodes, None)

        logger.info(f"{self.model.__name__} 重排完成: owner={owner_id}, count={count}")
        return count

    def _parse_tree(self, item_tree: ReorderTree) -> List[ReorderItem]:
        try:
            return [
                node if isinstance(node, ReorderItem) else ReorderItem.model_validate(node)
                for node in item_tree
            ]
        except PydanticValidationError as e:
            raise Err.invalid("Invalid reorder payload", details=[str(e)]) from e

    def _check_duplicates(self, nodes: List[ReorderItem]) -> None:
        seen: Set[int] = set()
        stack = list(nodes)
        while stack:
            node = stack.pop()
            if node.id in seen:
                raise Err.invalid(f"item {node.id} appears more than once", resource_id=node.id)
            seen.add(node.id)
            stack.extend(node.children)

    def _apply(self, owner_id: Any, nodes: List[ReorderItem], parent_id: Any) -> int:
        count = 0
        for position, node in enumerate(nodes):
            item = self.model.get(node.id)
            if item is None:
                raise Err.not_found(
                    f"item {node.id} not found",
                    code=self.not_found_code,
                    resource_id=node.id,
                )
            if self.owner_field and getattr(item, self.owner_field) != owner_id:
                raise Err.invalid(
                    f"item {node.id} does not belong to this {self.owner_label}",
                    code=ErrorCode.WRONG_COLLECTION,
                    resource_id=node.id,
                )

            setattr(item, self.parent_field, parent_id)
            setattr(item, self.position_field, position)
            count += 1
            count += self._apply(owner_id, node.children, node.id)
        return count


__all__ = [
    "PositionManager",
    "ReorderItem",
]
