"""
内容模块 - 导航菜单服务

菜单项是菜单内的邻接表树，排序作用域为 (menu_id, parent_id)：

- 新菜单项追加到所在分组末尾
- 更换父菜单项后追加到新分组末尾
- 删除菜单项时连同其全部子孙一起删除
- 拖拽重排由 PositionManager 在一个事务中完成
"""

from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError

from ...exceptions import Err, ErrorCode
from ...log import get_logger
from ...orm import PositionManager, TreeNode, map_db_errors, transaction_manager
from ...orm.sortable.position_manager import ReorderTree
from ...validators import FieldErrors, normalize_target, validate_name, validate_target, validate_title
from ..models import Menu, MenuItem, Page
from .base import BaseContentService

logger = get_logger("ycms.content.menu")

MSG_ITEM_OWN_PARENT = "Menu item cannot be its own parent"
MSG_ITEM_CIRCULAR_PARENT = "Cannot set a descendant as parent (circular reference)"
MSG_ITEM_PARENT_NOT_FOUND = "Parent item not found"
MSG_ITEM_PARENT_OTHER_MENU = "Parent item must belong to the same menu"

_ITEM_FIELDS = {"title", "url", "page_id", "target", "css_class", "is_active", "parent_id"}


def _menu_slug_conflict(e: IntegrityError):
    return Err.conflict(
        "Slug already exists for this language",
        code=ErrorCode.SLUG_EXISTS,
        field_errors={"slug": "Slug already exists"},
    )


class MenuService(BaseContentService):
    """导航菜单服务

    使用示例:
        service = MenuService()
        menu = service.create_menu("Main", language_id=en.id)
        home = service.create_item(menu.id, "Home", url="/")
        about = service.create_item(menu.id, "About", url="/about", parent_id=home.id)

        service.reorder_items(menu.id, [{"id": about.id}, {"id": home.id}])
    """

    model = Menu
    not_found_code = ErrorCode.MENU_NOT_FOUND
    label = "Menu"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.positions = PositionManager(
            MenuItem,
            owner_field="menu_id",
            owner_label="menu",
            not_found_code=ErrorCode.MENU_ITEM_NOT_FOUND,
        )

    # ==================== 菜单 ====================

    def get_menu(self, menu_id: int) -> Menu:
        return self._get_or_404(menu_id)

    def get_menu_by_slug(self, slug: str, language_id: Optional[int] = None) -> Optional[Menu]:
        return Menu.get_by_slug(slug, language_id=language_id)

    def list_menus(self, language_id: Optional[int] = None) -> List[Menu]:
        query = Menu.query
        if language_id is not None:
            query = query.filter(Menu.language_id == language_id)
        return query.order_by(Menu.name).all()

    def create_menu(self, name: str, slug: Optional[str] = None, language_id: Optional[int] = None) -> Menu:
        """创建菜单，slug 在同一语言内唯一"""
        slug = self._resolve_slug(slug, name)

        errors = FieldErrors()
        errors.add("name", validate_name(name, min_length=1))
        errors.update(self.slug_validator.validate_fields(
            slug, lambda s: Menu.slug_exists(s, language_id=language_id)
        ))
        errors.raise_if_any()

        with map_db_errors("create_menu", conflict=_menu_slug_conflict):
            menu = Menu(name=name.strip(), slug=slug, language_id=language_id)
            menu.save(commit=True)

        logger.info(f"创建菜单: {menu.slug} (id={menu.id}, language_id={language_id})")
        return menu

    def update_menu(self, menu_id: int, **fields: Any) -> Menu:
        """更新菜单（name, slug, language_id）

        slug 和语言都未变化时不检查唯一性。
        """
        menu = self.get_menu(menu_id)
        fields = {key: value for key, value in fields.items() if key in ("name", "slug", "language_id")}

        errors = FieldErrors()
        if "name" in fields:
            errors.add("name", validate_name(fields["name"], min_length=1))
            fields["name"] = (fields["name"] or "").strip()

        new_slug = fields.get("slug", menu.slug)
        new_language_id = fields.get("language_id", menu.language_id)
        if new_slug != menu.slug or new_language_id != menu.language_id:
            errors.update(self.slug_validator.validate_fields(
                new_slug,
                lambda s: Menu.slug_exists(s, exclude_id=menu.id, language_id=new_language_id),
            ))
        errors.raise_if_any()

        with map_db_errors("update_menu", conflict=_menu_slug_conflict):
            menu.update_properties(**fields)
            menu.save(commit=True)
        return menu

    def delete_menu(self, menu_id: int) -> None:
        """删除菜单及其全部菜单项"""
        menu = self.get_menu(menu_id)
        with map_db_errors("delete_menu"):
            with transaction_manager.transaction():
                count = self._delete_nodes(MenuItem.get_flat_tree(menu.id))
                menu.session.expire(menu, ["items"])
                menu.delete(commit=True)
        logger.info(f"删除菜单: id={menu_id}, 菜单项 {count} 个")

    # ==================== 菜单项 ====================

    def get_item(self, item_id: int) -> MenuItem:
        return self._get_or_404(item_id, MenuItem, ErrorCode.MENU_ITEM_NOT_FOUND, "Menu item")

    def get_item_tree(self, menu_id: int) -> List[TreeNode]:
        menu = self.get_menu(menu_id)
        return MenuItem.get_tree(menu.id)

    def get_flat_items(self, menu_id: int) -> List[TreeNode]:
        menu = self.get_menu(menu_id)
        return MenuItem.get_flat_tree(menu.id)

    def get_item_parent_options(self, menu_id: int, item_id: Optional[int] = None) -> List[TreeNode]:
        """父菜单项下拉选项，编辑时排除菜单项自身及其子孙"""
        menu = self.get_menu(menu_id)
        return MenuItem.get_parent_options(exclude_id=item_id, scope_value=menu.id)

    def _check_item_parent(
        self,
        menu_id: int,
        parent_id: Optional[int],
        errors: FieldErrors,
        item: Optional[MenuItem] = None,
    ) -> None:
        """父菜单项检查：存在、同一菜单、不是自身、不是子孙"""
        if parent_id is None:
            return
        if item is not None and parent_id == item.id:
            errors.add("parent_id", MSG_ITEM_OWN_PARENT)
            return
        parent = MenuItem.get(parent_id)
        if parent is None:
            errors.add("parent_id", MSG_ITEM_PARENT_NOT_FOUND)
        elif parent.menu_id != menu_id:
            errors.add("parent_id", MSG_ITEM_PARENT_OTHER_MENU)
        elif item is not None and not item.validate_parent(parent_id):
            errors.add("parent_id", MSG_ITEM_CIRCULAR_PARENT)

    @staticmethod
    def _raise_item_errors(errors: FieldErrors) -> None:
        code = ErrorCode.VALIDATION_ERROR
        parent_error = errors.get("parent_id")
        if parent_error in (MSG_ITEM_OWN_PARENT, MSG_ITEM_CIRCULAR_PARENT):
            code = ErrorCode.CIRCULAR_REFERENCE
        elif parent_error == MSG_ITEM_PARENT_OTHER_MENU:
            code = ErrorCode.WRONG_COLLECTION
        errors.raise_if_any(code=code)

    def create_item(
        self,
        menu_id: int,
        title: str,
        url: Optional[str] = None,
        page_id: Optional[int] = None,
        parent_id: Optional[int] = None,
        target: Optional[str] = None,
        css_class: str = "",
        is_active: bool = True,
    ) -> MenuItem:
        """创建菜单项，追加到 (menu_id, parent_id) 分组末尾

        Raises:
            ResourceNotFoundException: 菜单不存在
            ValidationException: 标题、打开方式或父菜单项不合法
        """
        menu = self.get_menu(menu_id)
        parent_id = parent_id or None

        errors = FieldErrors()
        errors.add("title", validate_title(title))
        errors.add("target", validate_target(target))
        if page_id and Page.get(page_id) is None:
            errors.add("page_id", "Page not found")
        self._check_item_parent(menu.id, parent_id, errors)
        self._raise_item_errors(errors)

        with map_db_errors("create_menu_item"):
            item = MenuItem(
                menu_id=menu.id,
                parent_id=parent_id,
                title=title.strip(),
                url=url,
                page_id=page_id or None,
                target=normalize_target(target),
                css_class=css_class or "",
                is_active=is_active,
                position=self.positions.next_position(menu_id=menu.id, parent_id=parent_id),
            )
            item.save(commit=True)

        logger.info(f"创建菜单项: {item.title} (id={item.id}, menu_id={menu.id}, parent_id={parent_id})")
        return item

    def update_item(self, item_id: int, **fields: Any) -> MenuItem:
        """更新菜单项

        parent_id 为 0 或 None 表示移到根级；更换父菜单项后追加到新分组末尾。
        """
        item = self.get_item(item_id)
        fields = {key: value for key, value in fields.items() if key in _ITEM_FIELDS}

        errors = FieldErrors()
        if "title" in fields:
            errors.add("title", validate_title(fields["title"]))
            fields["title"] = (fields["title"] or "").strip()
        if "target" in fields:
            errors.add("target", validate_target(fields["target"]))
            fields["target"] = normalize_target(fields["target"])
        if fields.get("page_id") and Page.get(fields["page_id"]) is None:
            errors.add("page_id", "Page not found")
        if "page_id" in fields:
            fields["page_id"] = fields["page_id"] or None

        parent_changed = False
        if "parent_id" in fields:
            new_parent_id = fields.pop("parent_id") or None
            self._check_item_parent(item.menu_id, new_parent_id, errors, item=item)
            parent_changed = new_parent_id != item.parent_id
        self._raise_item_errors(errors)

        with map_db_errors("update_menu_item"):
            with transaction_manager.transaction():
                item.update_properties(**fields)
                if parent_changed:
                    position = self.positions.next_position(menu_id=item.menu_id, parent_id=new_parent_id)
                    item.parent_id = new_parent_id
                    item.position = position
                item.save(commit=True)
        return item

    def delete_item(self, item_id: int) -> int:
        """删除菜单项及其全部子孙，返回删除数量

        逐个通过 session 删除，不依赖数据库级联，已加载的实例同步变为已删除。
        """
        item = self.get_item(item_id)
        ids = item.get_descendant_ids()
        ids.add(item.id)
        subtree = [node for node in MenuItem.get_flat_tree(item.menu_id) if node.item.id in ids]

        with map_db_errors("delete_menu_item"):
            with transaction_manager.transaction():
                count = self._delete_nodes(subtree)

        logger.info(f"删除菜单项: id={item_id}, 共 {count} 个（含子孙）")
        return count

    @staticmethod
    def _delete_nodes(flat: List[TreeNode]) -> int:
        # 先序的逆序：子项先于父项删除
        for node in reversed(flat):
            node.item.delete(commit=True)
        return len(flat)

    def reorder_items(self, menu_id: int, tree: ReorderTree) -> int:
        """按嵌套树重排菜单项

        Args:
            menu_id: 菜单ID
            tree: [{"id": 10, "children": [{"id": 12}, {"id": 11}]}, ...]

        Returns:
            写入的菜单项数量

        Raises:
            ResourceNotFoundException: 菜单或菜单项不存在
            ValidationException: 菜单项不属于该菜单或 ID 重复
        """
        menu = self.get_menu(menu_id)
        with map_db_errors("reorder_menu_items"):
            return self.positions.reorder(menu.id, tree)


__all__ = ["MenuService"]
