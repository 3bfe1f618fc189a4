"""树形结构工具函数

提供邻接表（id + parent_id）树形数据的通用处理函数。
节点可以是 ORM 对象，也可以是字典。

使用示例:
    from ycms.orm.tree import build_tree, flatten_tree, descendant_ids

    rows = Category.query.order_by(Category.position, Category.name).all()

    # 构建嵌套树（保持输入顺序）
    tree = build_tree(rows)

    # 展平为带深度的先序序列，用于缩进列表
    for node in flatten_tree(tree):
        print("  " * node.depth + node.item.name)

    # 子孙节点 ID（不含自身）
    ids = descendant_ids(rows, category.id)
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from ...log import get_logger

logger = get_logger("ycms.orm.tree")


def _get(node: Any, name: str) -> Any:
    """读取节点字段，兼容字典和对象"""
    if isinstance(node, dict):
        return node.get(name)
    return getattr(node, name, None)


@dataclass
class TreeNode:
    """树节点

    Attributes:
        item: 原始节点（ORM 对象或字典）
        depth: 节点深度，根节点为 build_tree 传入的 depth（默认 0）
        children: 子节点列表
    """
    item: Any
    depth: int = 0
    children: List["TreeNode"] = field(default_factory=list)
    id_field: str = field(default="id", repr=False)
    parent_field: str = field(default="parent_id", repr=False)

    @property
    def id(self) -> Any:
        return _get(self.item, self.id_field)

    @property
    def parent_id(self) -> Any:
        return _get(self.item, self.parent_field)

    @property
    def has_children(self) -> bool:
        return bool(self.children)


def _group_by_parent(
    nodes: Iterable[Any],
    parent_field: str,
) -> Dict[Any, List[Any]]:
    """按 parent_id 分组，组内保持输入顺序"""
    groups: Dict[Any, List[Any]] = defaultdict(list)
    for node in nodes:
        groups[_get(node, parent_field)].append(node)
    return groups


def find_orphans(
    nodes: Sequence[Any],
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> List[Any]:
    """查找父节点不存在的节点 ID

    Args:
        nodes: 扁平节点列表
        id_field: ID 字段名
        parent_field: 父节点 ID 字段名

    Returns:
        声明了 parent_id 但父节点不在 nodes 中的节点 ID 列表
    """
    known_ids = {_get(node, id_field) for node in nodes}
    return [
        _get(node, id_field)
        for node in nodes
        if _get(node, parent_field) is not None and _get(node, parent_field) not in known_ids
    ]


def build_tree(
    nodes: Sequence[Any],
    parent_id: Any = None,
    depth: int = 0,
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> List[TreeNode]:
    """将扁平列表构建为嵌套树结构

    按 parent_id 对 nodes 做稳定分组：同一父节点下的子节点保持在 nodes 中的相对顺序，
    本函数不做排序，排序由调用方在查询时完成（通常按 position、name）。

    根节点匹配规则：parent_id 为 None 时只匹配 parent_id 同为 None 的节点。

    Args:
        nodes: 扁平的节点列表（ORM 对象或字典）
        parent_id: 起始父节点 ID，None 表示从根开始
        depth: 起始深度
        id_field: ID 字段名
        parent_field: 父节点 ID 字段名

    Returns:
        嵌套的 TreeNode 列表

    使用示例:
        rows = [
            {"id": 1, "parent_id": None},
            {"id": 2, "parent_id": 1},
            {"id": 3, "parent_id": 2},
        ]
        tree = build_tree(rows)
        # tree[0].id == 1, tree[0].children[0].id == 2, tree[0].children[0].depth == 1
    """
    if not nodes:
        return []

    groups = _group_by_parent(nodes, parent_field)
    visited: Set[Any] = set()

    def _build(current_parent: Any, current_depth: int) -> List[TreeNode]:
        result: List[TreeNode] = []
        for node in groups.get(current_parent, []):
            node_id = _get(node, id_field)
            if node_id in visited:
                # 存储数据中存在环，跳过重复节点
                logger.warning(f"树数据存在循环引用，节点 {node_id} 已跳过")
                continue
            visited.add(node_id)
            result.append(TreeNode(
                item=node,
                depth=current_depth,
                children=_build(node_id, current_depth + 1),
                id_field=id_field,
                parent_field=parent_field,
            ))
        return result

    tree = _build(parent_id, depth)

    if parent_id is None:
        orphans = find_orphans(nodes, id_field, parent_field)
        if orphans:
            logger.warning(f"以下节点的父节点不存在，未纳入树结构: {orphans}")

    return tree


def flatten_tree(tree: Sequence[TreeNode]) -> List[TreeNode]:
    """将嵌套树展平为先序（深度优先）序列

    每个 TreeNode 保留自身的 depth，可直接用于渲染缩进列表。
    纯函数，结果一次性物化，可重复调用。

    Args:
        tree: build_tree 返回的嵌套树

    Returns:
        先序排列的 TreeNode 列表
    """
    result: List[TreeNode] = []
    for node in tree:
        result.append(node)
        if node.children:
            result.extend(flatten_tree(node.children))
    return result


def descendant_ids(
    nodes: Sequence[Any],
    root_id: Any,
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> Set[Any]:
    """计算节点的全部子孙 ID

    从 root_id 的直接子节点开始沿 parent_id 边做广度优先遍历，
    结果不包含 root_id 本身（即使存储数据中存在指回 root_id 的环）。

    Args:
        nodes: 全量扁平节点列表
        root_id: 起始节点 ID
        id_field: ID 字段名
        parent_field: 父节点 ID 字段名

    Returns:
        子孙节点 ID 集合
    """
    children_ids: Dict[Any, List[Any]] = defaultdict(list)
    for node in nodes:
        children_ids[_get(node, parent_field)].append(_get(node, id_field))

    result: Set[Any] = set()
    queue = deque(children_ids.get(root_id, []))
    while queue:
        current = queue.popleft()
        if current == root_id or current in result:
            continue
        result.add(current)
        queue.extend(children_ids.get(current, []))
    return result


def exclude_subtree(
    nodes: Sequence[Any],
    node_id: Any,
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> List[Any]:
    """排除节点自身及其全部子孙

    用于编辑节点时的父节点下拉框：节点不能选择自己或自己的子孙作为父节点。

    Returns:
        剩余节点列表（保持原顺序）
    """
    excluded = descendant_ids(nodes, node_id, id_field, parent_field)
    excluded.add(node_id)
    return [node for node in nodes if _get(node, id_field) not in excluded]


def parent_options(
    nodes: Sequence[Any],
    exclude_id: Optional[Any] = None,
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> List[TreeNode]:
    """生成父节点下拉选项（带深度的先序序列）

    Args:
        nodes: 全量扁平节点列表（已排序）
        exclude_id: 正在编辑的节点 ID，None 表示新建（不排除）

    Returns:
        先序排列的 TreeNode 列表
    """
    if exclude_id is not None:
        nodes = exclude_subtree(nodes, exclude_id, id_field, parent_field)
    return flatten_tree(build_tree(nodes, id_field=id_field, parent_field=parent_field))


def validate_no_circular_reference(
    node_id: Any,
    new_parent_id: Any,
    nodes: Sequence[Any],
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> bool:
    """验证重新指定父节点不会造成循环引用

    Args:
        node_id: 要移动的节点 ID
        new_parent_id: 新父节点 ID，None 表示移到根级
        nodes: 全量扁平节点列表

    Returns:
        True 表示没有循环引用，可以移动；
        新父节点是自身或自身的子孙时返回 False
    """
    if new_parent_id is None:
        return True

    if node_id == new_parent_id:
        return False

    return new_parent_id not in descendant_ids(nodes, node_id, id_field, parent_field)


__all__ = [
    "TreeNode",
    "build_tree",
    "flatten_tree",
    "find_orphans",
    "descendant_ids",
    "exclude_subtree",
    "parent_options",
    "validate_no_circular_reference",
]
