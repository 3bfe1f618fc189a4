"""内容模块

提供分类、标签、页面和导航菜单。

导出:
    - Category, Tag, Page, Menu, MenuItem: 模型
    - CategoryService, TagService, PageService, MenuService: 服务
    - PageAdapter, TagAdapter, CategoryAdapter, default_registry: 翻译适配器
"""

from .models import Category, Tag, Page, Menu, MenuItem
from .adapters import PageAdapter, TagAdapter, CategoryAdapter, default_registry
from .services import (
    BaseContentService,
    CategoryService,
    TagService,
    PageService,
    MenuService,
)

__all__ = [
    "Category",
    "Tag",
    "Page",
    "Menu",
    "MenuItem",
    "PageAdapter",
    "TagAdapter",
    "CategoryAdapter",
    "default_registry",
    "BaseContentService",
    "CategoryService",
    "TagService",
    "PageService",
    "MenuService",
]
