"""
多语言模块 - 翻译关联

为页面、标签、分类创建其他语言版本，并维护 TranslationLink 关联。

创建流程:
    1. 解析目标语言（不存在 404，未启用 400）
    2. 已有关联（任一方向）时直接返回已有翻译，created=False
    3. 生成唯一 slug：{slug}-{code}，冲突时依次尝试 {slug}-{code}-2、-3 ...
    4. 适配器复制字段创建新实体
    5. 写入关联

步骤 3-5 在同一事务中执行，关联写入失败时新实体一并回滚。

使用示例:
    from ycms.i18n import TranslationLinker

    linker = TranslationLinker(registry)
    result = linker.link_translation(EntityType.PAGE, page.id, "fr")
    if result.created:
        logger.info(f"已创建翻译 {result.entity.slug}")
    else:
        # 翻译已存在，跳转到已有翻译
        redirect_to(result.entity)

    linker.missing_languages(EntityType.PAGE, page.id, page.language_id)
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError

from ..config import CmsSettings, get_cms_settings
from ..enums import EntityType
from ..exceptions import BusinessException, Err, ErrorCode
from ..log import get_logger
from ..orm import map_db_errors, transaction_manager
from .adapters import AdapterRegistry, EntityAdapter
from .models import Language, TranslationLink

logger = get_logger("ycms.i18n.translation")

_NOT_FOUND_CODES = {
    EntityType.PAGE: ErrorCode.PAGE_NOT_FOUND,
    EntityType.TAG: ErrorCode.TAG_NOT_FOUND,
    EntityType.CATEGORY: ErrorCode.CATEGORY_NOT_FOUND,
}


@dataclass
class LinkResult:
    """翻译关联结果

    Attributes:
        entity: 目标语言下的实体（新建或已有）
        language: 目标语言
        created: 是否本次新建
        link: 对应的关联记录
    """
    entity: Any
    language: Language
    created: bool
    link: Optional[TranslationLink] = None


def _translation_conflict(e: IntegrityError) -> BusinessException:
    message = str(getattr(e, "orig", e))
    if "uq_translation_entity_language" in message or "translation." in message:
        return Err.conflict(
            "Translation already exists",
            code=ErrorCode.TRANSLATION_EXISTS,
            field_errors={"language": "Translation already exists"},
        )
    return Err.conflict(
        "Slug already exists",
        code=ErrorCode.SLUG_EXISTS,
        field_errors={"slug": "Slug already exists"},
    )


class TranslationLinker:
    """翻译关联服务

    Args:
        registry: 实体适配器注册表
        settings: CMS 配置，None 时使用全局配置
    """

    def __init__(self, registry: AdapterRegistry, settings: Optional[CmsSettings] = None):
        self.registry = registry
        self.settings = settings or get_cms_settings()

    # ==================== 创建翻译 ====================

    def link_translation(
        self,
        entity_type: Union[EntityType, str],
        source_id: int,
        language_code: str,
    ) -> LinkResult:
        """为实体创建目标语言的翻译

        Args:
            entity_type: 实体类型
            source_id: 源实体ID
            language_code: 目标语言代码

        Returns:
            LinkResult，已存在翻译时 created=False

        Raises:
            LanguageException: 语言不存在或未启用
            ResourceNotFoundException: 源实体不存在
            ValidationException: 目标语言与源实体语言相同
            ResourceConflictException: 并发创建导致唯一约束冲突
        """
        adapter = self.registry.get(entity_type)
        entity_type = adapter.entity_type

        language = Language.get_by_code(language_code)
        if language is None:
            raise Err.language(
                f"Language not found: {language_code}",
                code=ErrorCode.LANGUAGE_NOT_FOUND,
                language_code=language_code,
            )
        if not language.is_active:
            raise Err.language(
                f"Language is not active: {language_code}",
                code=ErrorCode.LANGUAGE_INACTIVE,
                language_code=language_code,
            )

        source = adapter.get_by_id(source_id)
        if source is None:
            raise Err.not_found(
                f"{entity_type.value} {source_id} not found",
                code=_NOT_FOUND_CODES[entity_type],
                resource_type=entity_type.value,
                resource_id=source_id,
            )
        if adapter.language_id_of(source) == language.id:
            raise Err.invalid(
                "Entity is already in this language",
                field_errors={"language": "Entity is already in this language"},
            )

        existing = self._find_existing(adapter, source_id, language)
        if existing is not None:
            logger.info(
                f"翻译已存在，返回已有实体: {entity_type.value} {source_id} -> "
                f"{existing.entity.id} ({language.code})"
            )
            return existing

        with map_db_errors("link_translation", conflict=_translation_conflict):
            with transaction_manager.transaction():
                slug = self.generate_unique_slug(adapter, adapter.slug_of(source), language.code)
                entity = adapter.create_translation(source, slug, language)
                link = TranslationLink.create_link(
                    entity_type.value, source_id, language.id, entity.id
                )

        logger.info(
            f"创建翻译: {entity_type.value} {source_id} -> {entity.id} "
            f"({language.code}, slug={slug})"
        )
        return LinkResult(entity=entity, language=language, created=True, link=link)

    def _find_existing(
        self,
        adapter: EntityAdapter,
        source_id: int,
        language: Language,
    ) -> Optional[LinkResult]:
        """查找已有翻译（正向和反向关联）"""
        entity_type = adapter.entity_type.value

        link = TranslationLink.find(entity_type, source_id, language.id)
        if link is not None:
            target = adapter.get_by_id(link.translation_id)
            if target is None:
                # 翻译实体已被删除但关联残留，会阻塞唯一约束
                logger.warning(f"清理失效的翻译关联: {link!r}")
                link.delete()
                transaction_manager.get_session().flush()
            else:
                return LinkResult(entity=target, language=language, created=False, link=link)

        for link in TranslationLink.find_as_translation(entity_type, source_id):
            counterpart = adapter.get_by_id(link.entity_id)
            if counterpart is not None and adapter.language_id_of(counterpart) == language.id:
                return LinkResult(entity=counterpart, language=language, created=False, link=link)

        return None

    def generate_unique_slug(self, adapter: EntityAdapter, source_slug: str, language_code: str) -> str:
        """生成目标语言下唯一的 slug

        intro + fr -> intro-fr；intro-fr 已存在时依次尝试 intro-fr-2、intro-fr-3 ...
        """
        separator = self.settings.translation_slug_separator
        base = f"{source_slug}{separator}{language_code}"
        if not adapter.slug_exists(base):
            return base

        counter = self.settings.slug_suffix_start
        while True:
            candidate = f"{base}{separator}{counter}"
            if not adapter.slug_exists(candidate):
                logger.debug(f"slug {base} 已存在，使用 {candidate}")
                return candidate
            counter += 1

    # ==================== 查询 ====================

    def _counterparts(self, adapter: EntityAdapter, entity_id: int) -> Iterator[Tuple[Optional[int], int]]:
        """遍历相关实体，产出 (语言ID, 实体ID)"""
        for link in TranslationLink.find_related(adapter.entity_type.value, entity_id):
            if link.entity_id == entity_id:
                yield link.language_id, link.translation_id
            else:
                counterpart = adapter.get_by_id(link.entity_id)
                if counterpart is not None:
                    yield adapter.language_id_of(counterpart), link.entity_id

    def related_translations(
        self,
        entity_type: Union[EntityType, str],
        entity_id: int,
    ) -> Dict[str, int]:
        """获取实体的相关翻译

        Returns:
            语言代码 -> 对应实体ID
        """
        adapter = self.registry.get(entity_type)
        result: Dict[str, int] = {}
        for language_id, counterpart_id in self._counterparts(adapter, entity_id):
            language = Language.get(language_id)
            if language is not None:
                result[language.code] = counterpart_id
        return result

    def missing_languages(
        self,
        entity_type: Union[EntityType, str],
        entity_id: int,
        entity_language_id: Optional[int],
        active_languages: Optional[List[Language]] = None,
    ) -> List[Language]:
        """获取实体尚未翻译的启用语言

        排除实体自身的语言和已关联的语言，保持 active_languages 的顺序。
        """
        if active_languages is None:
            active_languages = Language.list_active()

        adapter = self.registry.get(entity_type)
        linked = {language_id for language_id, _ in self._counterparts(adapter, entity_id)}

        return [
            language for language in active_languages
            if language.is_active
            and language.id != entity_language_id
            and language.id not in linked
        ]

    # ==================== 清理 ====================

    def remove_links(self, entity_type: Union[EntityType, str], entity_id: int) -> int:
        """删除与实体相关的全部关联（实体删除时调用）"""
        count = TranslationLink.delete_related(EntityType(entity_type).value, entity_id)
        if count:
            logger.info(f"删除翻译关联: {EntityType(entity_type).value} {entity_id}, count={count}")
        return count


__all__ = [
    "TranslationLinker",
    "LinkResult",
]
