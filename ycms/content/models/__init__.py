"""内容模块 - 模型"""

from .category import Category
from .tag import Tag
from .page import Page
from .menu import Menu, MenuItem

__all__ = [
    "Category",
    "Tag",
    "Page",
    "Menu",
    "MenuItem",
]
