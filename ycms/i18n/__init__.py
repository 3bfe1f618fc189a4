"""多语言模块

提供语言管理和跨语言翻译关联。

导出:
    - Language, TranslationLink: 模型
    - LanguageService: 语言规则（默认语言、启用状态、删除保护）
    - TranslationLinker, LinkResult: 创建翻译并维护关联
    - EntityAdapter, AdapterRegistry: 可翻译实体适配器
"""

from .models import Language, TranslationLink
from .adapters import EntityAdapter, AdapterRegistry
from .translation_linker import TranslationLinker, LinkResult
from .services import LanguageService

__all__ = [
    "Language",
    "TranslationLink",
    "EntityAdapter",
    "AdapterRegistry",
    "TranslationLinker",
    "LinkResult",
    "LanguageService",
]
