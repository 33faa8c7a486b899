"""Tests for the sidebar tree repository."""
import pytest

from services.errors import NotFoundError, ValidationError
from services.sidebar_repository import SidebarRepository, build_tree


@pytest.fixture
def repo(db_session):
    return SidebarRepository(db_session)


class TestCreate:
    def test_sort_order_is_scoped_to_parent(self, repo):
        first = repo.create("Alpha", item_type="folder")
        second = repo.create("Beta", item_type="folder")
        child = repo.create("Child", parent_id=first.id, item_type="folder")
        other_child = repo.create("Other", parent_id=first.id, item_type="table")

        assert first.sort_order == 1
        assert second.sort_order == 2
        assert child.sort_order == 1
        assert other_child.sort_order == 2

    def test_name_is_trimmed(self, repo):
        item = repo.create("  Reports  ", item_type="folder", icon="folder")
        assert item.name == "Reports"
        assert item.icon == "folder"
        assert item.parent_id is None

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, repo, name):
        with pytest.raises(ValidationError):
            repo.create(name, item_type="folder")

    def test_unknown_item_type_rejected(self, repo):
        with pytest.raises(ValidationError) as exc_info:
            repo.create("Thing", item_type="view")
        assert exc_info.value.details == {"allowed": ["folder", "table"]}

    def test_missing_parent(self, repo):
        with pytest.raises(NotFoundError):
            repo.create("Orphan", parent_id=999, item_type="folder")

    def test_parent_must_be_folder(self, repo):
        table_item = repo.create("Customers", item_type="table")
        with pytest.raises(ValidationError):
            repo.create("Nested", parent_id=table_item.id, item_type="folder")


class TestList:
    def test_roots_first_then_sort_order_then_name(self, repo):
        folder = repo.create("Zeta", item_type="folder")
        repo.create("Inner B", parent_id=folder.id, item_type="table")
        repo.create("Alpha", item_type="folder")
        repo.create("Inner A", parent_id=folder.id, item_type="table")

        names = [item.name for item in repo.list_items()]

        assert names == ["Zeta", "Alpha", "Inner B", "Inner A"]

    def test_equal_sort_order_falls_back_to_name(self, repo):
        b = repo.create("B", item_type="folder")
        a = repo.create("A", item_type="folder")
        repo.update(a.id, {"sort_order": b.sort_order})

        assert [item.name for item in repo.list_items()] == ["A", "B"]


class TestUpdate:
    def test_rename(self, repo):
        item = repo.create("Old", item_type="folder")
        renamed = repo.rename(item.id, "New")
        assert renamed.name == "New"

    def test_rename_missing_item(self, repo):
        with pytest.raises(NotFoundError):
            repo.rename(42, "Anything")

    def test_rename_to_same_name_is_noop(self, repo):
        item = repo.create("Same", item_type="folder")
        before = item.updated_at
        result = repo.rename(item.id, "Same")
        assert result.id == item.id
        assert result.name == "Same"
        assert result.updated_at == before

    def test_rename_to_blank_rejected(self, repo):
        item = repo.create("Named", item_type="folder")
        with pytest.raises(ValidationError):
            repo.rename(item.id, "  ")

    def test_move_to_other_folder_and_back_to_root(self, repo):
        source = repo.create("Source", item_type="folder")
        target = repo.create("Target", item_type="folder")
        item = repo.create("Item", parent_id=source.id, item_type="table")

        moved = repo.update(item.id, {"parent_id": target.id})
        assert moved.parent_id == target.id

        at_root = repo.update(item.id, {"parent_id": None})
        assert at_root.parent_id is None

    def test_move_into_own_descendant_rejected(self, repo):
        top = repo.create("Top", item_type="folder")
        middle = repo.create("Middle", parent_id=top.id, item_type="folder")
        bottom = repo.create("Bottom", parent_id=middle.id, item_type="folder")

        with pytest.raises(ValidationError):
            repo.update(top.id, {"parent_id": bottom.id})
        with pytest.raises(ValidationError):
            repo.update(top.id, {"parent_id": top.id})

    def test_move_under_table_rejected(self, repo):
        folder = repo.create("Folder", item_type="folder")
        table_item = repo.create("Table", item_type="table")
        with pytest.raises(ValidationError):
            repo.update(folder.id, {"parent_id": table_item.id})

    def test_move_under_missing_parent_rejected(self, repo):
        item = repo.create("Item", item_type="folder")
        with pytest.raises(ValidationError):
            repo.update(item.id, {"parent_id": 4242})
        assert repo.get(item.id).parent_id is None


class TestSubtree:
    def test_subtree_lists_parents_before_children(self, repo):
        root = repo.create("Root", item_type="folder")
        a = repo.create("A", parent_id=root.id, item_type="folder")
        b = repo.create("B", parent_id=root.id, item_type="table")
        a1 = repo.create("A1", parent_id=a.id, item_type="table")
        unrelated = repo.create("Unrelated", item_type="folder")

        ids = repo.subtree_ids(root.id)

        assert ids[0] == root.id
        assert set(ids) == {root.id, a.id, b.id, a1.id}
        assert ids.index(a.id) < ids.index(a1.id)
        assert unrelated.id not in ids

    def test_delete_removes_descendants(self, repo):
        root = repo.create("Root", item_type="folder")
        child = repo.create("Child", parent_id=root.id, item_type="folder")
        repo.create("Grandchild", parent_id=child.id, item_type="table")
        keep = repo.create("Keep", item_type="folder")

        deleted = repo.delete(root.id)

        assert len(deleted) == 3
        assert [item.id for item in repo.list_items()] == [keep.id]

    def test_delete_missing_item(self, repo):
        with pytest.raises(NotFoundError):
            repo.delete(123)


class TestBuildTree:
    def test_nests_children_in_input_order(self):
        flat = [
            {"id": 1, "parent_id": None, "name": "Tables"},
            {"id": 4, "parent_id": None, "name": "Archive"},
            {"id": 2, "parent_id": 1, "name": "Customers"},
            {"id": 3, "parent_id": 1, "name": "Orders"},
            {"id": 5, "parent_id": 2, "name": "Deep"},
        ]

        forest = build_tree(flat)

        assert [node["id"] for node in forest] == [1, 4]
        assert [child["id"] for child in forest[0]["children"]] == [2, 3]
        assert forest[0]["children"][0]["children"][0]["name"] == "Deep"
        assert forest[1]["children"] == []

    def test_orphans_become_roots(self):
        flat = [
            {"id": 1, "parent_id": None},
            {"id": 2, "parent_id": 99},
            {"id": 3, "parent_id": 2},
        ]

        forest = build_tree(flat)

        assert [node["id"] for node in forest] == [1, 2]
        assert forest[1]["children"][0]["id"] == 3

    def test_node_count_matches_input(self):
        flat = [{"id": i, "parent_id": (i - 1 if i % 3 else None)} for i in range(1, 10)]

        def count(nodes):
            return sum(1 + count(node["children"]) for node in nodes)

        assert count(build_tree(flat)) == len(flat)

    def test_does_not_mutate_input(self):
        flat = [{"id": 1, "parent_id": None}]
        build_tree(flat)
        assert "children" not in flat[0]

    def test_empty(self):
        assert build_tree([]) == []
