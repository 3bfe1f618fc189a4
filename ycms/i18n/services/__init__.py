"""多语言模块 - 服务"""

from .language_service import LanguageService

__all__ = ["LanguageService"]
