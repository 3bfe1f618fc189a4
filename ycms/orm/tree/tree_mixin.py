"""树形结构 Mixin

提供邻接表（Adjacency List）模式的树形操作方法。

邻接表模式说明：
    - 每个节点只存储 parent_id
    - 优点：移动节点只需更新一行
    - 缺点：查询子孙需要加载同一作用域内的全部节点，在内存中遍历

使用示例:
    from ycms.orm import CoreModel
    from ycms.orm.tree import TreeMixin

    class Category(CoreModel, TreeMixin):
        parent_id = mapped_column(Integer, ForeignKey("category.id"), nullable=True)
        position = mapped_column(Integer, default=0)
        name = mapped_column(String(100))

    category = Category.get(1)
    children = category.get_children()          # 直接子节点
    ids = category.get_descendant_ids()         # 所有子孙 ID
    Category.get_tree()                         # 嵌套树
    category.validate_parent(new_parent_id)     # 循环引用检查
"""

from typing import Any, Dict, List, Optional, Set

from .tree_utils import (
    TreeNode,
    build_tree,
    descendant_ids,
    flatten_tree,
    parent_options,
    validate_no_circular_reference,
)


class TreeMixin:
    """树形结构 Mixin

    字段要求（使用者需定义）:
        - id: 主键
        - parent_id: 父节点ID，根节点为 None

    可配置属性（子类可覆盖）:
        - __tree_sort_fields__: 同级排序字段，默认 ("position",)
        - __tree_scope__: 树的作用域字段，如菜单项的 "menu_id"，默认 None（整表一棵森林）
    """

    # ==================== 可配置属性 ====================

    __tree_sort_fields__: tuple = ("position",)

    __tree_scope__: Optional[str] = None

    # ==================== 内部方法 ====================

    @classmethod
    def _tree_order_by(cls) -> list:
        return [getattr(cls, name) for name in cls.__tree_sort_fields__ if hasattr(cls, name)]

    @classmethod
    def _tree_query(cls, scope_value: Any = None):
        query = cls.query
        if cls.__tree_scope__ and scope_value is not None:
            query = query.filter(getattr(cls, cls.__tree_scope__) == scope_value)
        return query.order_by(*cls._tree_order_by())

    def _scope_value(self) -> Any:
        if self.__class__.__tree_scope__:
            return getattr(self, self.__class__.__tree_scope__)
        return None

    # ==================== 节点查询方法 ====================

    def get_children(self) -> List:
        """获取直接子节点

        Returns:
            子节点列表，按排序字段排序
        """
        cls = self.__class__
        query = cls.query.filter(cls.parent_id == self.id)
        return query.order_by(*cls._tree_order_by()).all()

    def get_descendant_ids(self) -> Set[Any]:
        """获取所有子孙节点 ID（不含自身）"""
        nodes = self.__class__.list_nodes(self._scope_value())
        return descendant_ids(nodes, self.id)

    def is_root(self) -> bool:
        return self.parent_id is None

    def validate_parent(self, new_parent_id: Any) -> bool:
        """检查把 new_parent_id 设为父节点是否会造成循环引用

        Returns:
            True 表示可以移动；new_parent_id 为自身或自身子孙时返回 False
        """
        if new_parent_id is None:
            return True
        if new_parent_id == self.id:
            return False
        nodes = self.__class__.list_nodes(self._scope_value())
        return validate_no_circular_reference(self.id, new_parent_id, nodes)

    # ==================== 类方法 ====================

    @classmethod
    def list_nodes(cls, scope_value: Any = None) -> List:
        """按排序字段加载作用域内的全部节点"""
        return cls._tree_query(scope_value).all()

    @classmethod
    def get_roots(cls, scope_value: Any = None) -> List:
        """获取所有根节点"""
        return cls._tree_query(scope_value).filter(cls.parent_id.is_(None)).all()

    @classmethod
    def get_tree(cls, scope_value: Any = None) -> List[TreeNode]:
        """获取嵌套树

        Args:
            scope_value: 作用域值（如 menu_id），None 表示整表

        Returns:
            嵌套的 TreeNode 列表
        """
        return build_tree(cls.list_nodes(scope_value))

    @classmethod
    def get_flat_tree(cls, scope_value: Any = None) -> List[TreeNode]:
        """获取先序展平的树（带 depth）"""
        return flatten_tree(cls.get_tree(scope_value))

    @classmethod
    def get_parent_options(
        cls,
        exclude_id: Any = None,
        scope_value: Any = None,
    ) -> List[TreeNode]:
        """获取父节点下拉选项

        Args:
            exclude_id: 正在编辑的节点 ID，该节点及其子孙不出现在选项中
            scope_value: 作用域值

        Returns:
            先序排列的 TreeNode 列表
        """
        return parent_options(cls.list_nodes(scope_value), exclude_id)

    @classmethod
    def get_tree_dicts(cls, scope_value: Any = None) -> List[Dict[str, Any]]:
        """获取嵌套字典格式的树（用于序列化）"""

        def _to_dict(node: TreeNode) -> Dict[str, Any]:
            data = node.item.to_dict()
            data["depth"] = node.depth
            data["children"] = [_to_dict(child) for child in node.children]
            return data

        return [_to_dict(node) for node in cls.get_tree(scope_value)]


__all__ = ["TreeMixin"]
