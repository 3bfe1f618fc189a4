"""
ycms - CMS 内容树与多语言关联引擎

提供分类树和导航菜单的构建、循环引用检查、位置管理，
以及页面、标签、分类的跨语言翻译关联。
"""

from .version import __version__, __author__, __description__

# 导出异常
from .exceptions import (
    Err,
    ErrorCode,
    BusinessException,
    ResourceNotFoundException,
    ResourceConflictException,
    ValidationException,
    LanguageException,
    ServiceUnavailableException,
)

# 导出日志
from .log import get_logger, setup_logger, setup_root_logger

# 导出配置
from .config import AppSettings, CmsSettings, get_cms_settings, configure_cms

# 导出 ORM
from .orm import (
    CoreModel,
    init_database,
    db_session_scope,
    transaction_manager,
    build_tree,
    flatten_tree,
    descendant_ids,
    validate_no_circular_reference,
    PositionManager,
)

# 导出验证
from .validators import SlugValidator, is_valid_slug, slugify

# 导出枚举
from .enums import EntityType, PageStatus, MenuTarget, TextDirection

# 导出领域模块
from .i18n import Language, TranslationLink, LanguageService, TranslationLinker, LinkResult
from .content import (
    Category,
    Tag,
    Page,
    Menu,
    MenuItem,
    CategoryService,
    TagService,
    PageService,
    MenuService,
)

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    # 异常
    "Err",
    "ErrorCode",
    "BusinessException",
    "ResourceNotFoundException",
    "ResourceConflictException",
    "ValidationException",
    "LanguageException",
    "ServiceUnavailableException",
    # 日志
    "get_logger",
    "setup_logger",
    "setup_root_logger",
    # 配置
    "AppSettings",
    "CmsSettings",
    "get_cms_settings",
    "configure_cms",
    # ORM
    "CoreModel",
    "init_database",
    "db_session_scope",
    "transaction_manager",
    "build_tree",
    "flatten_tree",
    "descendant_ids",
    "validate_no_circular_reference",
    "PositionManager",
    # 验证
    "SlugValidator",
    "is_valid_slug",
    "slugify",
    # 枚举
    "EntityType",
    "PageStatus",
    "MenuTarget",
    "TextDirection",
    # 多语言
    "Language",
    "TranslationLink",
    "LanguageService",
    "TranslationLinker",
    "LinkResult",
    # 内容
    "Category",
    "Tag",
    "Page",
    "Menu",
    "MenuItem",
    "CategoryService",
    "TagService",
    "PageService",
    "MenuService",
]
