"""
内容模块 - 页面服务

页面的正文编辑不在本引擎范围内，这里只提供翻译所需的创建、删除和查询。
"""

from typing import List, Optional

from ...enums import EntityType, PageStatus
from ...exceptions import ErrorCode
from ...log import get_logger
from ...orm import map_db_errors, slug_conflict, transaction_manager
from ...validators import FieldErrors, validate_title
from ..models import MenuItem, Page
from .base import BaseContentService

logger = get_logger("ycms.content.page")


class PageService(BaseContentService):
    """页面服务

    使用示例:
        service = PageService()
        page = service.create_page("Intro", language_id=en.id)
        result = service.translate(page.id, "fr")
        # result.entity.slug == "intro-fr"，状态为草稿，正文为空
    """

    model = Page
    entity_type = EntityType.PAGE
    not_found_code = ErrorCode.PAGE_NOT_FOUND
    label = "Page"

    def get_page(self, page_id: int) -> Page:
        return self._get_or_404(page_id)

    def list_pages(self, language_id: Optional[int] = None) -> List[Page]:
        query = Page.query
        if language_id is not None:
            query = query.filter(Page.language_id == language_id)
        return query.order_by(Page.title).all()

    def create_page(
        self,
        title: str,
        slug: Optional[str] = None,
        body: str = "",
        status: str = PageStatus.DRAFT.value,
        language_id: Optional[int] = None,
    ) -> Page:
        """创建页面

        Raises:
            ValidationException: 标题、slug 或状态不合法
            ResourceConflictException: slug 唯一约束冲突
        """
        slug = self._resolve_slug(slug, title)

        errors = FieldErrors()
        errors.add("title", validate_title(title))
        errors.update(self.slug_validator.validate_fields(slug, Page.slug_exists))
        if status not in {s.value for s in PageStatus}:
            errors.add("status", "Status must be draft or published")
        errors.raise_if_any()

        with map_db_errors("create_page", conflict=slug_conflict):
            page = Page(
                title=title.strip(),
                slug=slug,
                body=body or "",
                status=status,
                language_id=language_id,
            )
            page.save(commit=True)

        logger.info(f"创建页面: {page.slug} (id={page.id})")
        return page

    def delete_page(self, page_id: int) -> None:
        """删除页面及其翻译关联，引用该页面的菜单项解除关联"""
        page = self.get_page(page_id)
        with map_db_errors("delete_page"):
            with transaction_manager.transaction():
                MenuItem.query.filter(MenuItem.page_id == page.id).update(
                    {MenuItem.page_id: None}, synchronize_session="fetch"
                )
                self.linker.remove_links(EntityType.PAGE, page.id)
                page.delete(commit=True)
        logger.info(f"删除页面: id={page_id}")


__all__ = ["PageService"]
