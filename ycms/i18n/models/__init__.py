"""多语言模块 - 模型"""

from .language import Language
from .translation import TranslationLink

__all__ = [
    "Language",
    "TranslationLink",
]
