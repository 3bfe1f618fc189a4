"""排序管理 Mixin

提供分组内的位置计算。新记录追加到所在分组的末尾。

使用示例:
    from ycms.orm import CoreModel
    from ycms.orm.sortable import PositionFieldMixin, SortableMixin

    # 多字段分组（同一菜单、同一父节点内排序）
    class MenuItem(CoreModel, PositionFieldMixin, SortableMixin):
        __sort_group_by__ = ["menu_id", "parent_id"]

    MenuItem.get_max_position({"menu_id": 1, "parent_id": None})  # 空分组返回 None
    MenuItem.next_position(menu_id=1, parent_id=None)             # 空分组返回 0

    item = MenuItem(menu_id=1, title="首页")
    item.init_position()   # 放到分组末尾
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func


class SortableMixin:
    """排序管理 Mixin

    字段要求（使用者需定义或使用 PositionFieldMixin）:
        - position: int  排序位置

    可配置属性（子类可覆盖）:
        - __sort_field__: 排序字段名，默认 "position"
        - __sort_group_by__: 分组字段，默认 None（不分组）
            - 字符串: 单字段分组，如 "parent_id"
            - 列表: 多字段分组，如 ["menu_id", "parent_id"]
    """

    # ==================== 配置 ====================

    __sort_field__: str = "position"

    __sort_group_by__: Union[str, List[str], None] = None

    # ==================== 内部方法 ====================

    @classmethod
    def _get_group_fields(cls) -> List[str]:
        """获取分组字段列表"""
        group_by = getattr(cls, '__sort_group_by__', None)
        if not group_by:
            return []
        if isinstance(group_by, str):
            return [group_by]
        return list(group_by)

    def _get_group_filters(self) -> Dict[str, Any]:
        """获取分组过滤条件（基于当前实例的值）"""
        return {field: getattr(self, field) for field in self._get_group_fields()}

    @classmethod
    def _build_group_query(cls, query, group_filters: Optional[Dict[str, Any]] = None):
        """为查询添加分组过滤条件，None 值按 IS NULL 匹配"""
        for field, value in (group_filters or {}).items():
            column = getattr(cls, field)
            if value is None:
                query = query.filter(column.is_(None))
            else:
                query = query.filter(column == value)
        return query

    # ==================== 实例方法 ====================

    def init_position(self) -> int:
        """把当前记录放到所在分组的末尾

        在创建新记录或更换分组（如修改 parent_id）时调用。

        Returns:
            设置的位置值
        """
        field_name = getattr(self.__class__, '__sort_field__', 'position')
        position = self.__class__.next_position(**self._get_group_filters())
        setattr(self, field_name, position)
        return position

    # ==================== 类方法 ====================

    @classmethod
    def get_max_position(cls, group_filters: Optional[Dict[str, Any]] = None) -> Optional[int]:
        """获取分组内的最大位置

        Args:
            group_filters: 分组过滤条件，None 表示不过滤

        Returns:
            最大位置；分组为空时返回 None
        """
        field_name = getattr(cls, '__sort_field__', 'position')
        sort_field = getattr(cls, field_name)
        query = cls._build_group_query(cls.query, group_filters)
        return query.with_entities(func.max(sort_field)).scalar()

    @classmethod
    def next_position(cls, **scope: Any) -> int:
        """计算分组内的下一个位置

        Args:
            **scope: 分组字段值，如 menu_id=1, parent_id=None

        Returns:
            最大位置 + 1；分组为空时返回 0
        """
        max_position = cls.get_max_position(scope)
        if max_position is None:
            max_position = -1
        return max_position + 1

    @classmethod
    def get_sorted(cls, group_filters: Optional[Dict[str, Any]] = None) -> List:
        """获取分组内按位置排序的记录"""
        field = getattr(cls, getattr(cls, '__sort_field__', 'position'))
        query = cls._build_group_query(cls.query, group_filters)
        return query.order_by(field, cls.id).all()


__all__ = [
    "SortableMixin",
]
