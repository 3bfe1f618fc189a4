"""
内容模块 - 分类服务

提供分类的增删改查、树形查询和翻译。

重新指定父分类前必须通过两项检查：不能是自身，不能是自身的子孙。
删除分类时直接子分类变为根分类，追加到根级末尾。
"""

from typing import Any, List, Optional

from ...enums import EntityType
from ...exceptions import ErrorCode
from ...log import get_logger
from ...orm import PositionManager, TreeNode, map_db_errors, slug_conflict, transaction_manager
from ...validators import FieldErrors, validate_name
from ..models import Category
from .base import BaseContentService

logger = get_logger("ycms.content.category")

MSG_OWN_PARENT = "Category cannot be its own parent"
MSG_CIRCULAR_PARENT = "Cannot set a descendant as parent (circular reference)"
MSG_PARENT_NOT_FOUND = "Parent category not found"

_EDITABLE_FIELDS = {"name", "slug", "description", "parent_id", "language_id"}


class CategoryService(BaseContentService):
    """分类服务

    使用示例:
        service = CategoryService()
        news = service.create_category("News")
        local = service.create_category("Local", parent_id=news.id)

        service.update_category(news.id, parent_id=local.id)
        # ValidationException: {"parent_id": "Cannot set a descendant as parent (circular reference)"}

        for node in service.get_flat_tree():
            print("  " * node.depth + node.item.name)
    """

    model = Category
    entity_type = EntityType.CATEGORY
    not_found_code = ErrorCode.CATEGORY_NOT_FOUND
    label = "Category"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.positions = PositionManager(Category, not_found_code=ErrorCode.CATEGORY_NOT_FOUND)

    # ==================== 查询 ====================

    def get_category(self, category_id: int) -> Category:
        return self._get_or_404(category_id)

    def list_categories(self) -> List[Category]:
        """按 position、name 排序的全部分类"""
        return Category.list_nodes()

    def get_tree(self) -> List[TreeNode]:
        return Category.get_tree()

    def get_flat_tree(self) -> List[TreeNode]:
        return Category.get_flat_tree()

    def get_parent_options(self, category_id: Optional[int] = None) -> List[TreeNode]:
        """父分类下拉选项，编辑时排除分类自身及其子孙"""
        return Category.get_parent_options(exclude_id=category_id)

    # ==================== 创建与更新 ====================

    def create_category(
        self,
        name: str,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
        language_id: Optional[int] = None,
    ) -> Category:
        """创建分类，追加到父分类下的末尾

        Raises:
            ValidationException: 名称、slug 或父分类不合法
            ResourceConflictException: slug 唯一约束冲突
        """
        slug = self._resolve_slug(slug, name)
        parent_id = parent_id or None

        errors = FieldErrors()
        errors.add("name", validate_name(name))
        errors.update(self.slug_validator.validate_fields(slug, Category.slug_exists))
        if parent_id is not None and Category.get(parent_id) is None:
            errors.add("parent_id", MSG_PARENT_NOT_FOUND)
        errors.raise_if_any()

        with map_db_errors("create_category", conflict=slug_conflict):
            category = Category(
                name=name.strip(),
                slug=slug,
                description=description,
                parent_id=parent_id,
                language_id=language_id,
                position=self.positions.next_position(parent_id=parent_id),
            )
            category.save(commit=True)

        logger.info(f"创建分类: {category.slug} (id={category.id}, parent_id={parent_id})")
        return category

    def _check_parent(self, category: Category, new_parent_id: Optional[int], errors: FieldErrors) -> None:
        """父分类检查：存在、不是自身、不是子孙"""
        if new_parent_id is None:
            return
        if new_parent_id == category.id:
            errors.add("parent_id", MSG_OWN_PARENT)
        elif Category.get(new_parent_id) is None:
            errors.add("parent_id", MSG_PARENT_NOT_FOUND)
        elif not category.validate_parent(new_parent_id):
            errors.add("parent_id", MSG_CIRCULAR_PARENT)

    def update_category(self, category_id: int, **fields: Any) -> Category:
        """更新分类

        Args:
            category_id: 分类ID
            **fields: name, slug, description, parent_id, language_id

        Raises:
            ResourceNotFoundException: 分类不存在
            ValidationException: 字段不合法或父分类会造成循环
        """
        category = self.get_category(category_id)
        fields = {key: value for key, value in fields.items() if key in _EDITABLE_FIELDS}

        errors = FieldErrors()
        if "name" in fields:
            errors.add("name", validate_name(fields["name"]))
            fields["name"] = (fields["name"] or "").strip()
        if "slug" in fields:
            errors.update(self.slug_validator.validate_fields(
                fields["slug"],
                lambda s: Category.slug_exists(s, exclude_id=category.id),
                current_slug=category.slug,
            ))

        parent_changed = False
        if "parent_id" in fields:
            new_parent_id = fields.pop("parent_id") or None
            self._check_parent(category, new_parent_id, errors)
            parent_changed = new_parent_id != category.parent_id

        code = ErrorCode.VALIDATION_ERROR
        if errors.get("parent_id") in (MSG_OWN_PARENT, MSG_CIRCULAR_PARENT):
            code = ErrorCode.CIRCULAR_REFERENCE
        errors.raise_if_any(code=code)

        with map_db_errors("update_category", conflict=slug_conflict):
            with transaction_manager.transaction():
                category.update_properties(**fields)
                if parent_changed:
                    # 更换父分类后追加到新父分类下的末尾
                    position = self.positions.next_position(parent_id=new_parent_id)
                    category.parent_id = new_parent_id
                    category.position = position
                category.save(commit=True)

        return category

    # ==================== 删除 ====================

    def delete_category(self, category_id: int) -> None:
        """删除分类

        直接子分类变为根分类（追加到根级末尾），相关翻译关联一并删除。
        """
        category = self.get_category(category_id)

        with map_db_errors("delete_category"):
            with transaction_manager.transaction():
                children = category.get_children()
                for child in children:
                    child.position = self.positions.next_position(parent_id=None)
                    child.parent_id = None
                    child.flush()
                self.linker.remove_links(EntityType.CATEGORY, category.id)
                category.delete(commit=True)

        logger.info(f"删除分类: id={category_id}, 子分类 {len(children)} 个变为根分类")


__all__ = ["CategoryService"]
