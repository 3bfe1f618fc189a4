"""
内容模块 - 标签服务
"""

from typing import Any, List, Optional

from ...enums import EntityType
from ...exceptions import ErrorCode
from ...log import get_logger
from ...orm import map_db_errors, slug_conflict, transaction_manager
from ...validators import FieldErrors, validate_name
from ..models import Tag
from .base import BaseContentService

logger = get_logger("ycms.content.tag")


class TagService(BaseContentService):
    """标签服务"""

    model = Tag
    entity_type = EntityType.TAG
    not_found_code = ErrorCode.TAG_NOT_FOUND
    label = "Tag"

    def get_tag(self, tag_id: int) -> Tag:
        return self._get_or_404(tag_id)

    def list_tags(self, language_id: Optional[int] = None) -> List[Tag]:
        query = Tag.query
        if language_id is not None:
            query = query.filter(Tag.language_id == language_id)
        return query.order_by(Tag.name).all()

    def create_tag(self, name: str, slug: Optional[str] = None, language_id: Optional[int] = None) -> Tag:
        """创建标签

        Raises:
            ValidationException: 名称或 slug 不合法
            ResourceConflictException: slug 唯一约束冲突
        """
        slug = self._resolve_slug(slug, name)

        errors = FieldErrors()
        errors.add("name", validate_name(name))
        errors.update(self.slug_validator.validate_fields(slug, Tag.slug_exists))
        errors.raise_if_any()

        with map_db_errors("create_tag", conflict=slug_conflict):
            tag = Tag(name=name.strip(), slug=slug, language_id=language_id)
            tag.save(commit=True)

        logger.info(f"创建标签: {tag.slug} (id={tag.id})")
        return tag

    def update_tag(self, tag_id: int, **fields: Any) -> Tag:
        """更新标签（name, slug, language_id），slug 未变化时不检查唯一性"""
        tag = self.get_tag(tag_id)
        fields = {key: value for key, value in fields.items() if key in ("name", "slug", "language_id")}

        errors = FieldErrors()
        if "name" in fields:
            errors.add("name", validate_name(fields["name"]))
            fields["name"] = (fields["name"] or "").strip()
        if "slug" in fields:
            errors.update(self.slug_validator.validate_fields(
                fields["slug"],
                lambda s: Tag.slug_exists(s, exclude_id=tag.id),
                current_slug=tag.slug,
            ))
        errors.raise_if_any()

        with map_db_errors("update_tag", conflict=slug_conflict):
            tag.update_properties(**fields)
            tag.save(commit=True)
        return tag

    def delete_tag(self, tag_id: int) -> None:
        """删除标签及其翻译关联"""
        tag = self.get_tag(tag_id)
        with map_db_errors("delete_tag"):
            with transaction_manager.transaction():
                self.linker.remove_links(EntityType.TAG, tag.id)
                tag.delete(commit=True)
        logger.info(f"删除标签: id={tag_id}")


__all__ = ["TagService"]
