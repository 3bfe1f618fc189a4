"""
内容管理 - 枚举定义

提供内容、菜单和多语言相关的枚举类型
"""

from enum import Enum


class EntityType(str, Enum):
    """可翻译的实体类型

    取值同时写入 translation 表的 entity_type 列。
    """

    PAGE = "page"

    TAG = "tag"

    CATEGORY = "category"


class PageStatus(str, Enum):
    """页面状态

    翻译生成的页面总是以草稿状态创建。
    """

    DRAFT = "draft"

    PUBLISHED = "published"


class MenuTarget(str, Enum):
    """菜单项链接的打开方式（HTML target 属性）"""

    # 当前窗口（默认）
    SELF = "_self"

    # 新窗口
    BLANK = "_blank"

    PARENT = "_parent"

    TOP = "_top"


class TextDirection(str, Enum):
    """语言书写方向"""

    # 从左到右
    LTR = "ltr"

    # 从右到左（阿拉伯语、希伯来语等）
    RTL = "rtl"


__all__ = [
    "EntityType",
    "PageStatus",
    "MenuTarget",
    "TextDirection",
]
