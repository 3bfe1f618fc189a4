"""分类服务测试

测试分类的创建位置、父分类循环检查、删除时子分类变为根分类和翻译
"""

import pytest

from ycms.content import Category, CategoryService
from ycms.exceptions import (
    ErrorCode,
    ResourceConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from ycms.i18n import TranslationLink


class TestCreateCategory:
    """创建分类测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope):
        """初始化数据库"""
        self.service = CategoryService()

    def test_positions_per_parent(self):
        """新分类追加到所在父分类的末尾"""
        news = self.service.create_category("News")
        sport = self.service.create_category("Sport")
        local = self.service.create_category("Local", parent_id=news.id)
        world = self.service.create_category("World", parent_id=news.id)

        assert (news.position, sport.position) == (0, 1)
        assert (local.position, world.position) == (0, 1)
        assert local.parent_id == news.id

    def test_slug_from_name(self):
        category = self.service.create_category("Crème Brûlée")
        assert category.slug == "creme-brulee"

    def test_parent_id_zero_means_root(self):
        category = self.service.create_category("News", parent_id=0)
        assert category.parent_id is None

    def test_field_errors(self):
        with pytest.raises(ValidationException) as exc_info:
            self.service.create_category("N", slug="Bad Slug", parent_id=99)

        assert exc_info.value.field_errors == {
            "name": "Name must be at least 2 characters",
            "slug": "Invalid slug format (use lowercase letters, numbers, and hyphens)",
            "parent_id": "Parent category not found",
        }

    def test_duplicate_slug(self):
        self.service.create_category("News")

        with pytest.raises(ValidationException) as exc_info:
            self.service.create_category("News")

        assert exc_info.value.field_errors == {"slug": "Slug already exists"}

    def test_unique_constraint_becomes_conflict(self, monkeypatch):
        """提前检查被绕过时由数据库唯一约束兜底，转换为 409"""
        self.service.create_category("News")
        monkeypatch.setattr(
            Category, "slug_exists", classmethod(lambda cls, slug, exclude_id=None, **scope: 0)
        )

        with pytest.raises(ResourceConflictException) as exc_info:
            self.service.create_category("News")

        assert exc_info.value.code == ErrorCode.SLUG_EXISTS
        assert Category.query.count() == 1


class TestCategoryTree:
    """父分类变更和删除测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope):
        """news > local > city，sport 为根分类"""
        self.session_scope = session_scope
        self.service = CategoryService()
        self.news = self.service.create_category("News")
        self.sport = self.service.create_category("Sport")
        self.local = self.service.create_category("Local", parent_id=self.news.id)
        self.city = self.service.create_category("City", parent_id=self.local.id)

    def test_cannot_be_own_parent(self):
        with pytest.raises(ValidationException) as exc_info:
            self.service.update_category(self.news.id, parent_id=self.news.id)

        assert exc_info.value.code == ErrorCode.CIRCULAR_REFERENCE
        assert exc_info.value.field_errors["parent_id"] == "Category cannot be its own parent"

    def test_cannot_move_under_descendant(self):
        with pytest.raises(ValidationException) as exc_info:
            self.service.update_category(self.news.id, parent_id=self.city.id)

        assert exc_info.value.code == ErrorCode.CIRCULAR_REFERENCE
        assert exc_info.value.field_errors["parent_id"] == (
            "Cannot set a descendant as parent (circular reference)"
        )
        assert Category.get(self.news.id).parent_id is None

    def test_move_grandchild_under_ancestor(self):
        """city 移到祖先 news 下，不构成循环"""
        updated = self.service.update_category(self.city.id, parent_id=self.news.id)

        assert updated.parent_id == self.news.id
        assert updated.position == 1

    def test_missing_parent(self):
        with pytest.raises(ValidationException) as exc_info:
            self.service.update_category(self.sport.id, parent_id=999)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_move_appends_to_new_parent(self):
        updated = self.service.update_category(self.sport.id, parent_id=self.news.id)

        assert updated.parent_id == self.news.id
        assert updated.position == 1

    def test_move_to_root(self):
        updated = self.service.update_category(self.city.id, parent_id=None)

        assert updated.parent_id is None
        assert updated.position == 2

    def test_update_without_parent_change_keeps_position(self):
        updated = self.service.update_category(
            self.local.id, name="Local News", parent_id=self.news.id, description="城市新闻"
        )

        assert updated.name == "Local News"
        assert updated.position == 0
        assert updated.description == "城市新闻"

    def test_update_same_slug_allowed(self):
        updated = self.service.update_category(self.news.id, slug="news")
        assert updated.slug == "news"

    def test_update_slug_with_trailing_newline(self):
        with pytest.raises(ValidationException) as exc_info:
            self.service.update_category(self.news.id, slug="news\n")

        assert exc_info.value.field_errors == {
            "slug": "Invalid slug format (use lowercase letters, numbers, and hyphens)"
        }
        assert Category.get(self.news.id).slug == "news"

    def test_update_slug_taken(self):
        with pytest.raises(ValidationException) as exc_info:
            self.service.update_category(self.news.id, slug="sport")

        assert exc_info.value.field_errors == {"slug": "Slug already exists"}

    def test_delete_orphans_children_to_root(self):
        """删除分类后直接子分类变为根分类，追加到根级末尾，孙分类不变"""
        self.service.delete_category(self.news.id)
        self.session_scope.expire_all()

        local = Category.get(self.local.id)
        assert Category.get(self.news.id) is None
        assert local.parent_id is None
        assert local.position == 2
        assert Category.get(self.city.id).parent_id == local.id
        assert [node.item.name for node in self.service.get_tree()] == ["Sport", "Local"]

    def test_delete_missing(self):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            self.service.delete_category(999)

        assert exc_info.value.code == ErrorCode.CATEGORY_NOT_FOUND

    def test_flat_tree_and_parent_options(self):
        flat = self.service.get_flat_tree()
        assert [(node.item.name, node.depth) for node in flat] == [
            ("News", 0), ("Local", 1), ("City", 2), ("Sport", 0),
        ]

        options = self.service.get_parent_options(self.local.id)
        assert [node.item.name for node in options] == ["News", "Sport"]


class TestCategoryTranslation:
    """分类翻译测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope, languages):
        """初始化数据库"""
        self.service = CategoryService()
        self.languages = languages

    def test_translate_and_delete_removes_links(self):
        news = self.service.create_category("News", language_id=self.languages["en"].id)

        result = self.service.translate(news.id, "fr")

        assert result.entity.slug == "news-fr"
        assert self.service.related_translations(news.id) == {"fr": result.entity.id}
        assert [language.code for language in self.service.missing_languages(news.id)] == ["de"]

        self.service.delete_category(news.id)

        assert TranslationLink.query.count() == 0
        assert Category.get(result.entity.id) is not None
