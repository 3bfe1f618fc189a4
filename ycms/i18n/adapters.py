"""
多语言模块 - 实体适配器

TranslationLinker 通过适配器访问不同类型的实体，不直接依赖具体模型。
每种可翻译实体提供一个适配器，注册到 AdapterRegistry。

使用示例:
    class TagAdapter(EntityAdapter):
        entity_type = EntityType.TAG
        model = Tag

        def create_translation(self, source, slug, language):
            return Tag(name=source.name, slug=slug, language_id=language.id).flush()

    registry = AdapterRegistry()
    registry.register(TagAdapter())
    registry.get(EntityType.TAG)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, Union

from ..enums import EntityType
from ..exceptions import Err


class EntityAdapter(ABC):
    """可翻译实体适配器基类

    子类需要设置:
        - entity_type: 实体类型
        - model: 模型类（需提供 get 和 slug_exists 类方法）
        - slug_field: slug 字段名，默认 "slug"

    子类需要实现:
        - create_translation(source, slug, language): 复制字段创建翻译实体并 flush
    """

    entity_type: EntityType
    model: Type
    slug_field: str = "slug"

    def get_by_id(self, entity_id: Any) -> Optional[Any]:
        return self.model.get(entity_id)

    def slug_of(self, entity: Any) -> str:
        return getattr(entity, self.slug_field)

    def slug_exists(self, slug: str) -> bool:
        return bool(self.model.slug_exists(slug))

    def language_id_of(self, entity: Any) -> Optional[int]:
        return getattr(entity, "language_id", None)

    @abstractmethod
    def create_translation(self, source: Any, slug: str, language: Any) -> Any:
        """基于源实体创建目标语言的新实体

        Args:
            source: 源实体
            slug: 已确认唯一的 slug
            language: 目标语言

        Returns:
            已 flush（拥有 id）的新实体
        """


class AdapterRegistry:
    """实体适配器注册表，按 EntityType 索引"""

    def __init__(self):
        self._adapters: Dict[EntityType, EntityAdapter] = {}

    def register(self, adapter: EntityAdapter) -> EntityAdapter:
        self._adapters[EntityType(adapter.entity_type)] = adapter
        return adapter

    def get(self, entity_type: Union[EntityType, str]) -> EntityAdapter:
        """获取适配器

        Raises:
            ValidationException: 实体类型未注册
        """
        try:
            return self._adapters[EntityType(entity_type)]
        except (KeyError, ValueError):
            raise Err.invalid(
                f"Unsupported entity type: {entity_type}",
                field_errors={"entity_type": "Unsupported entity type"},
            ) from None

    def __contains__(self, entity_type: Union[EntityType, str]) -> bool:
        try:
            return EntityType(entity_type) in self._adapters
        except ValueError:
            return False


__all__ = [
    "EntityAdapter",
    "AdapterRegistry",
]
