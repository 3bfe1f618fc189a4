"""树形结构模块

提供邻接表树的构建、展平、子孙计算和循环引用检查。

导出:
    - TreeMixin: 树形结构 Mixin（提供模型级树操作）
    - TreeNode: 树节点
    - build_tree / flatten_tree: 构建与展平
    - descendant_ids / exclude_subtree / parent_options: 子孙计算
    - validate_no_circular_reference: 循环引用检查
"""

from .tree_mixin import TreeMixin
from .tree_utils import (
    TreeNode,
    build_tree,
    flatten_tree,
    find_orphans,
    descendant_ids,
    exclude_subtree,
    parent_options,
    validate_no_circular_reference,
)

__all__ = [
    "TreeMixin",
    "TreeNode",
    "build_tree",
    "flatten_tree",
    "find_orphans",
    "descendant_ids",
    "exclude_subtree",
    "parent_options",
    "validate_no_circular_reference",
]
