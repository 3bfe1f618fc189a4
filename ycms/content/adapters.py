"""
内容模块 - 可翻译实体适配器

定义页面、标签、分类在创建翻译时复制哪些字段：

- 页面：复制标题，正文为空，状态为草稿
- 标签：复制名称
- 分类：复制名称和描述，作为根分类放在位置 0
"""

from typing import Any

from ..enums import EntityType, PageStatus
from ..i18n import AdapterRegistry, EntityAdapter
from .models import Category, Page, Tag


class PageAdapter(EntityAdapter):
    entity_type = EntityType.PAGE
    model = Page

    def create_translation(self, source: Page, slug: str, language: Any) -> Page:
        page = Page(
            title=source.title,
            slug=slug,
            body="",
            status=PageStatus.DRAFT.value,
            language_id=language.id,
        )
        return page.flush()


class TagAdapter(EntityAdapter):
    entity_type = EntityType.TAG
    model = Tag

    def create_translation(self, source: Tag, slug: str, language: Any) -> Tag:
        tag = Tag(name=source.name, slug=slug, language_id=language.id)
        return tag.flush()


class CategoryAdapter(EntityAdapter):
    entity_type = EntityType.CATEGORY
    model = Category

    def create_translation(self, source: Category, slug: str, language: Any) -> Category:
        category = Category(
            name=source.name,
            slug=slug,
            description=source.description,
            parent_id=None,
            position=0,
            language_id=language.id,
        )
        return category.flush()


def default_registry() -> AdapterRegistry:
    """注册了页面、标签、分类适配器的注册表"""
    registry = AdapterRegistry()
    registry.register(PageAdapter())
    registry.register(TagAdapter())
    registry.register(CategoryAdapter())
    return registry


__all__ = [
    "PageAdapter",
    "TagAdapter",
    "CategoryAdapter",
    "default_registry",
]
