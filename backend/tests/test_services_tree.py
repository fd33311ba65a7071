"""
Unit tests for services_tree: parent lookup, root listing and insert rules.
"""
from unittest.mock import MagicMock

import pytest

from models import Node, NodeCreateRequest
from node_store import NodeRepository, build_forest
from services_tree import (
    ParentNodeNotFoundError,
    TreeError,
    find_parent_node,
    insert_node,
    list_roots,
)


def _node(node_id, parent_id="0", children=None):
    return Node(id=node_id, parent_id=parent_id, children=children or [])


class TestFindParentNode:

    def test_empty_forest(self):
        assert find_parent_node([], "1") is None

    def test_finds_top_level_node(self):
        a, b = _node("1"), _node("2")
        assert find_parent_node([a, b], "2") is b

    def test_finds_nested_node(self):
        leaf = _node("3", "2")
        forest = [_node("1", children=[_node("2", "1", children=[leaf])])]

        assert find_parent_node(forest, "3") is leaf

    def test_checks_node_before_its_children(self):
        # Duplicate ids only exist through out-of-band writes; pre-order wins.
        inner = _node("x", "outer")
        outer = _node("x", children=[inner])

        assert find_parent_node([outer], "x") is outer

    def test_left_subtree_searched_before_right_sibling(self):
        deep = _node("t", "l")
        left = _node("l", children=[deep])
        right = _node("t")

        assert find_parent_node([left, right], "t") is deep

    def test_no_match_returns_none(self):
        forest = [_node("1", children=[_node("2", "1")])]
        assert find_parent_node(forest, "99") is None

    def test_deep_chain_does_not_hit_recursion_limit(self):
        root = _node("0-root")
        current = root
        for i in range(5000):
            child = _node(str(i), current.id)
            current.children.append(child)
            current = child

        assert find_parent_node([root], "4999") is current


class TestBuildForest:

    def test_attaches_children_by_node_id(self):
        rows = [
            {"id": "1", "parent_id": "0", "node_id": None},
            {"id": "2", "parent_id": "1", "node_id": "1"},
            {"id": "3", "parent_id": "1", "node_id": "1"},
        ]

        nodes = build_forest(rows)

        assert [n.id for n in nodes] == ["1", "2", "3"]
        assert [c.id for c in nodes[0].children] == ["2", "3"]
        # Non-roots are still listed with their own subtrees
        assert nodes[1].children == []

    def test_child_row_before_owner_row(self):
        rows = [
            {"id": "2", "parent_id": "1", "node_id": "1"},
            {"id": "1", "parent_id": "0", "node_id": None},
        ]

        nodes = build_forest(rows)

        owner = next(n for n in nodes if n.id == "1")
        assert [c.id for c in owner.children] == ["2"]

    def test_dangling_owner_leaves_node_unattached(self):
        nodes = build_forest([{"id": "5", "parent_id": "4", "node_id": "4"}])

        assert len(nodes) == 1
        assert nodes[0].children == []


class TestListRoots:

    def test_filters_on_root_sentinel(self, repo, seed_rows):
        seed_rows([
            ("1", "0", None),
            ("2", "1", "1"),
            ("3", "0", None),
        ])

        roots = list_roots(repo)

        assert {n.id for n in roots} == {"1", "3"}
        root_1 = next(n for n in roots if n.id == "1")
        assert [c.id for c in root_1.children] == ["2"]

    def test_root_without_sentinel_parent_id_not_listed(self, repo, seed_rows):
        # Detached row (no owner) whose parentId isn't "0"
        seed_rows([("1", "42", None)])

        assert list_roots(repo) == []


class TestInsertNode:

    def test_root_insert(self, repo, stored_count):
        created = insert_node(repo, NodeCreateRequest(parent_id="0"))

        assert created == _node("1")
        assert stored_count() == 1

    def test_child_insert_links_to_parent(self, repo, seed_rows):
        seed_rows([("1", "0", None)])

        created = insert_node(repo, NodeCreateRequest(parent_id="1"))

        assert created.id == "2"
        roots = list_roots(repo)
        assert [c.id for c in roots[0].children] == ["2"]

    def test_unknown_parent_raises(self, repo, stored_count):
        with pytest.raises(ParentNodeNotFoundError) as excinfo:
            insert_node(repo, NodeCreateRequest(parent_id="99"))

        assert excinfo.value.parent_id == "99"
        assert str(excinfo.value) == "Parent node not found."
        assert isinstance(excinfo.value, TreeError)
        assert stored_count() == 0

    def test_reject_does_not_touch_store(self):
        fake_repo = MagicMock(spec=NodeRepository)
        fake_repo.count.return_value = 0
        fake_repo.list_all.return_value = []

        with pytest.raises(ParentNodeNotFoundError):
            insert_node(fake_repo, NodeCreateRequest(parent_id="7"))

        fake_repo.insert.assert_not_called()
        fake_repo.save.assert_not_called()

    def test_attach_saves_once_with_found_parent(self):
        parent = _node("1")
        fake_repo = MagicMock(spec=NodeRepository)
        fake_repo.count.return_value = 1
        fake_repo.list_all.return_value = [parent]

        created = insert_node(fake_repo, NodeCreateRequest(parent_id="1"))

        fake_repo.insert.assert_called_once_with(created, parent=parent)
        fake_repo.save.assert_called_once()
        assert parent.children == [created]

    def test_id_is_count_plus_one(self):
        fake_repo = MagicMock(spec=NodeRepository)
        fake_repo.count.return_value = 41
        fake_repo.list_all.return_value = []

        created = insert_node(fake_repo, NodeCreateRequest(parent_id="0"))

        assert created.id == "42"
        fake_repo.insert.assert_called_once_with(created)
