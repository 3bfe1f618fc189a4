"""内容模块 - 服务"""

from .base import BaseContentService
from .category_service import CategoryService
from .tag_service import TagService
from .page_service import PageService
from .menu_service import MenuService

__all__ = [
    "BaseContentService",
    "CategoryService",
    "TagService",
    "PageService",
    "MenuService",
]
