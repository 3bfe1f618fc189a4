"""TreeMixin 测试

使用 Category 和 MenuItem 模型测试模型级树操作
"""

import pytest

from ycms.content.models import Category, Menu, MenuItem


class TestTreeMixin:
    """分类树测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope):
        """初始化数据库

        news(1)
        ├── local(2)
        │   └── city(3)
        └── world(4)
        sport(5)
        """
        self.session_scope = session_scope
        self.news = Category(name="News", slug="news", position=0).save(commit=True)
        self.local = Category(name="Local", slug="local", parent_id=self.news.id, position=0).save(commit=True)
        self.city = Category(name="City", slug="city", parent_id=self.local.id, position=0).save(commit=True)
        self.world = Category(name="World", slug="world", parent_id=self.news.id, position=1).save(commit=True)
        self.sport = Category(name="Sport", slug="sport", position=1).save(commit=True)

    def test_get_children(self):
        """直接子节点按 position 排序"""
        children = self.news.get_children()
        assert [c.slug for c in children] == ["local", "world"]

    def test_get_descendant_ids(self):
        assert self.news.get_descendant_ids() == {self.local.id, self.city.id, self.world.id}
        assert self.city.get_descendant_ids() == set()

    def test_get_roots(self):
        assert [c.slug for c in Category.get_roots()] == ["news", "sport"]

    def test_get_tree(self):
        tree = Category.get_tree()
        assert [node.item.slug for node in tree] == ["news", "sport"]
        assert [node.item.slug for node in tree[0].children] == ["local", "world"]

    def test_get_flat_tree(self):
        flat = Category.get_flat_tree()
        assert [(node.item.slug, node.depth) for node in flat] == [
            ("news", 0), ("local", 1), ("city", 2), ("world", 1), ("sport", 0),
        ]

    def test_sibling_order_uses_name_as_tiebreaker(self):
        """同一位置按名称排序"""
        Category(name="Arts", slug="arts", position=1).save(commit=True)
        assert [c.slug for c in Category.get_roots()] == ["news", "arts", "sport"]

    def test_get_parent_options_excludes_subtree(self):
        options = Category.get_parent_options(exclude_id=self.local.id)
        assert [node.item.slug for node in options] == ["news", "world", "sport"]

    def test_validate_parent(self):
        assert self.news.validate_parent(None) is True
        assert self.news.validate_parent(self.news.id) is False
        assert self.news.validate_parent(self.city.id) is False
        assert self.city.validate_parent(self.news.id) is True
        assert self.local.validate_parent(self.sport.id) is True

    def test_get_tree_dicts(self):
        data = Category.get_tree_dicts()
        assert data[0]["slug"] == "news"
        assert data[0]["depth"] == 0
        assert data[0]["children"][0]["children"][0]["slug"] == "city"


class TestScopedTreeMixin:
    """按菜单隔离的菜单项树测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope):
        """初始化数据库"""
        self.main = Menu(name="Main", slug="main").save(commit=True)
        self.footer = Menu(name="Footer", slug="footer").save(commit=True)
        self.home = MenuItem(menu_id=self.main.id, title="Home", position=0).save(commit=True)
        self.about = MenuItem(menu_id=self.main.id, title="About", parent_id=self.home.id, position=0).save(commit=True)
        self.legal = MenuItem(menu_id=self.footer.id, title="Legal", position=0).save(commit=True)

    def test_tree_is_scoped_to_menu(self):
        tree = MenuItem.get_tree(self.main.id)
        assert [node.item.title for node in tree] == ["Home"]
        assert [node.item.title for node in tree[0].children] == ["About"]

        footer_tree = MenuItem.get_tree(self.footer.id)
        assert [node.item.title for node in footer_tree] == ["Legal"]

    def test_descendants_within_menu(self):
        assert self.home.get_descendant_ids() == {self.about.id}
