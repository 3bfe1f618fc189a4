"""树形工具函数测试

测试邻接表树的构建、展平、子孙计算和循环引用检查
"""

import logging

import pytest

from ycms.orm.tree import (
    TreeNode,
    build_tree,
    flatten_tree,
    find_orphans,
    descendant_ids,
    exclude_subtree,
    parent_options,
    validate_no_circular_reference,
)


def _nodes():
    """
    1
    ├── 2
    │   ├── 4
    │   └── 5
    └── 3
    6
    """
    return [
        {"id": 1, "parent_id": None, "name": "root-a"},
        {"id": 2, "parent_id": 1, "name": "a-1"},
        {"id": 3, "parent_id": 1, "name": "a-2"},
        {"id": 4, "parent_id": 2, "name": "a-1-1"},
        {"id": 5, "parent_id": 2, "name": "a-1-2"},
        {"id": 6, "parent_id": None, "name": "root-b"},
    ]


class TestBuildTree:
    """build_tree 测试"""

    def test_empty_input(self):
        """空输入返回空树"""
        assert build_tree([]) == []

    def test_nested_structure(self):
        """构建嵌套结构"""
        tree = build_tree(_nodes())

        assert [node.id for node in tree] == [1, 6]
        assert [child.id for child in tree[0].children] == [2, 3]
        assert [child.id for child in tree[0].children[0].children] == [4, 5]
        assert tree[1].children == []

    def test_depth(self):
        """深度从起始值递增"""
        tree = build_tree(_nodes())
        assert tree[0].depth == 0
        assert tree[0].children[0].depth == 1
        assert tree[0].children[0].children[0].depth == 2

    def test_custom_start(self):
        """从指定父节点和深度开始构建"""
        tree = build_tree(_nodes(), parent_id=2, depth=5)
        assert [node.id for node in tree] == [4, 5]
        assert all(node.depth == 5 for node in tree)

    def test_preserves_input_order(self):
        """同级节点保持输入顺序，不重新排序"""
        nodes = [
            {"id": 9, "parent_id": None},
            {"id": 3, "parent_id": None},
            {"id": 7, "parent_id": None},
        ]
        assert [node.id for node in build_tree(nodes)] == [9, 3, 7]

    def test_works_with_objects(self):
        """支持对象节点"""

        class Row:
            def __init__(self, id, parent_id):
                self.id = id
                self.parent_id = parent_id

        tree = build_tree([Row(1, None), Row(2, 1)])
        assert tree[0].item.id == 1
        assert tree[0].children[0].parent_id == 1

    def test_orphan_excluded_and_logged(self, caplog):
        """父节点不存在的节点被排除，并记录警告"""
        nodes = _nodes() + [{"id": 99, "parent_id": 42}]

        with caplog.at_level(logging.WARNING, logger="ycms.orm.tree"):
            tree = build_tree(nodes)

        ids = [node.id for node in flatten_tree(tree)]
        assert 99 not in ids
        assert "99" in caplog.text

    def test_stored_cycle_does_not_loop(self):
        """存储数据中的环不会导致无限递归"""
        nodes = [
            {"id": 1, "parent_id": None},
            {"id": 2, "parent_id": 1},
            {"id": 3, "parent_id": 2},
        ]
        # 2 和 3 互为父子，从 2 开始构建
        nodes[1]["parent_id"] = 3
        tree = build_tree(nodes, parent_id=3)
        flat = flatten_tree(tree)
        assert len(flat) == len({node.id for node in flat})


class TestFlattenTree:
    """flatten_tree 测试"""

    def test_pre_order(self):
        """先序遍历"""
        flat = flatten_tree(build_tree(_nodes()))
        assert [node.id for node in flat] == [1, 2, 4, 5, 3, 6]
        assert [node.depth for node in flat] == [0, 1, 2, 2, 1, 0]

    def test_visits_every_node_once(self):
        """合法森林中每个节点恰好出现一次"""
        nodes = _nodes()
        flat = flatten_tree(build_tree(nodes))
        assert sorted(node.id for node in flat) == sorted(n["id"] for n in nodes)

    def test_depth_is_distance_from_root(self):
        """深度等于到根节点的距离"""
        nodes = _nodes()
        by_id = {n["id"]: n for n in nodes}

        def distance(node_id):
            parent = by_id[node_id]["parent_id"]
            return 0 if parent is None else 1 + distance(parent)

        for node in flatten_tree(build_tree(nodes)):
            assert node.depth == distance(node.id)

    def test_restartable(self):
        """结果可重复遍历"""
        flat = flatten_tree(build_tree(_nodes()))
        assert [n.id for n in flat] == [n.id for n in flat]

    def test_tree_node_has_children(self):
        node = TreeNode(item={"id": 1, "parent_id": None})
        assert not node.has_children
        assert node.id == 1


class TestDescendantIds:
    """descendant_ids 测试"""

    def test_all_descendants(self):
        assert descendant_ids(_nodes(), 1) == {2, 3, 4, 5}

    def test_leaf_has_none(self):
        assert descendant_ids(_nodes(), 4) == set()

    def test_never_contains_root(self):
        """结果不包含自身，即使数据中存在指回自身的环"""
        nodes = [
            {"id": 1, "parent_id": 3},
            {"id": 2, "parent_id": 1},
            {"id": 3, "parent_id": 2},
        ]
        result = descendant_ids(nodes, 1)
        assert 1 not in result
        assert result == {2, 3}

    def test_unknown_root(self):
        assert descendant_ids(_nodes(), 404) == set()


class TestSubtreeHelpers:
    """exclude_subtree / parent_options / find_orphans 测试"""

    def test_exclude_subtree(self):
        remaining = exclude_subtree(_nodes(), 2)
        assert [n["id"] for n in remaining] == [1, 3, 6]

    def test_parent_options_for_new_item(self):
        """新建时所有节点都可选"""
        options = parent_options(_nodes())
        assert [node.id for node in options] == [1, 2, 4, 5, 3, 6]

    def test_parent_options_excludes_self_and_descendants(self):
        options = parent_options(_nodes(), exclude_id=2)
        assert [(node.id, node.depth) for node in options] == [(1, 0), (3, 1), (6, 0)]

    def test_find_orphans(self):
        nodes = _nodes() + [{"id": 7, "parent_id": 100}]
        assert find_orphans(nodes) == [7]


class TestValidateNoCircularReference:
    """循环引用检查测试"""

    def test_move_to_root(self):
        assert validate_no_circular_reference(2, None, _nodes()) is True

    def test_self_as_parent(self):
        assert validate_no_circular_reference(2, 2, _nodes()) is False

    @pytest.mark.parametrize("descendant", [2, 3, 4, 5])
    def test_descendant_as_parent(self, descendant):
        """重新挂到自身子孙下被拒绝"""
        assert validate_no_circular_reference(1, descendant, _nodes()) is False

    def test_unrelated_parent(self):
        assert validate_no_circular_reference(2, 6, _nodes()) is True

    def test_chain_scenario(self):
        """{1: null, 2: 1, 3: 2}：1 挂到 3 下失败，3 挂到 1 下成功"""
        nodes = [
            {"id": 1, "parent_id": None},
            {"id": 2, "parent_id": 1},
            {"id": 3, "parent_id": 2},
        ]
        assert validate_no_circular_reference(1, 3, nodes) is False
        assert validate_no_circular_reference(3, 1, nodes) is True
