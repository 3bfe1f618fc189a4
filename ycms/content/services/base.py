"""
内容模块 - 服务基类

提供按 ID 加载（不存在时抛出 404）、slug 推导和翻译相关的公共方法。
"""

from typing import Any, Dict, List, Optional, Type

from ...enums import EntityType
from ...exceptions import Err, ErrorCode
from ...i18n import Language, LinkResult, TranslationLinker
from ...validators import SlugValidator, slugify
from ..adapters import default_registry


class BaseContentService:
    """内容服务基类

    子类配置:
        - model: 模型类
        - entity_type: 可翻译实体类型，None 表示不支持翻译
        - not_found_code: 记录不存在时的错误码
        - label: 错误消息中的实体名称
    """

    model: Type = None
    entity_type: Optional[EntityType] = None
    not_found_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND
    label: str = "Item"

    def __init__(
        self,
        linker: Optional[TranslationLinker] = None,
        slug_validator: Optional[SlugValidator] = None,
    ):
        if self.model is None:
            raise ValueError("请在子类中配置 model")
        self.linker = linker or TranslationLinker(default_registry())
        self.slug_validator = slug_validator or SlugValidator()

    # ==================== 通用方法 ====================

    def _get_or_404(self, entity_id: Any, model: Type = None, code: ErrorCode = None, label: str = None):
        model = model or self.model
        entity = model.get(entity_id)
        if entity is None:
            label = label or self.label
            raise Err.not_found(
                f"{label} not found",
                code=code or self.not_found_code,
                resource_type=model.__tablename__,
                resource_id=entity_id,
            )
        return entity

    @staticmethod
    def _resolve_slug(slug: Optional[str], source_text: Optional[str]) -> str:
        """表单未填写 slug 时从名称或标题生成"""
        if slug:
            return slug.strip()
        return slugify(source_text or "")

    # ==================== 翻译 ====================

    def _require_translatable(self) -> EntityType:
        if self.entity_type is None:
            raise Err.fail(f"{self.label} does not support translations")
        return self.entity_type

    def translate(self, entity_id: int, language_code: str) -> LinkResult:
        """创建目标语言的翻译，已存在时返回已有翻译（created=False）"""
        return self.linker.link_translation(self._require_translatable(), entity_id, language_code)

    def related_translations(self, entity_id: int) -> Dict[str, int]:
        """语言代码 -> 对应实体ID"""
        return self.linker.related_translations(self._require_translatable(), entity_id)

    def missing_languages(self, entity_id: int) -> List[Language]:
        """尚未翻译的启用语言"""
        entity = self._get_or_404(entity_id)
        return self.linker.missing_languages(
            self._require_translatable(), entity.id, entity.language_id
        )


__all__ = ["BaseContentService"]
