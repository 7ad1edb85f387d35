# tests/services/test_tree_guard.py
import pytest

from app.core.exceptions import ValidationError
from app.services.tree_guard import ParentRejection


async def chain(service, *names, type="post"):
    """root -> ... -> leaf, returns the created rows in order"""
    rows, parent_id = [], None
    for name in names:
        row = await service.create({"name": name, "parent_id": parent_id, "type": type})
        rows.append(row)
        parent_id = row.id
    return rows


@pytest.mark.asyncio
class TestDescendants:

    async def test_collects_every_level(self, categories):
        root, a, b, c = await chain(categories, "Root", "Alpha", "Beta", "Gamma")
        side = await categories.create({"name": "Side", "parent_id": a.id})

        descendants = await categories.guard.get_descendants(a.id)

        assert descendants == {b.id, c.id, side.id}

    async def test_never_contains_the_node_itself(self, categories):
        rows = await chain(categories, "One", "Two", "Three")

        for row in rows:
            assert row.id not in await categories.guard.get_descendants(row.id)

    async def test_leaf_has_none(self, categories):
        *_, leaf = await chain(categories, "Top", "Leaf")

        assert await categories.guard.get_descendants(leaf.id) == set()


@pytest.mark.asyncio
class TestParentAssignment:

    async def test_self_parent(self, categories):
        (root,) = await chain(categories, "Root")

        assert await categories.guard.check_parent_assignment(root.id, root.id) is ParentRejection.SELF_PARENT

    async def test_descendant_as_parent(self, categories):
        root, child, grandchild = await chain(categories, "Root", "Child", "Grandchild")

        rejection = await categories.guard.check_parent_assignment(root.id, grandchild.id)

        assert rejection is ParentRejection.DESCENDANT_AS_PARENT

    async def test_missing_parent(self, categories):
        (root,) = await chain(categories, "Root")

        assert await categories.guard.check_parent_assignment(root.id, 999) is ParentRejection.PARENT_NOT_FOUND
        assert await categories.guard.check_parent_assignment(None, 999) is ParentRejection.PARENT_NOT_FOUND

    async def test_type_mismatch(self, categories):
        (post_root,) = await chain(categories, "Posts", type="post")

        rejection = await categories.guard.check_parent_assignment(None, post_root.id, expected_type="product")

        assert rejection is ParentRejection.TYPE_MISMATCH

    async def test_valid_moves(self, categories):
        a, b = await chain(categories, "Aaa", "Bbb")
        (other,) = await chain(categories, "Other")

        assert await categories.guard.check_parent_assignment(b.id, other.id, "post") is None
        assert await categories.guard.check_parent_assignment(b.id, None) is None

    async def test_validate_raises_with_reason(self, categories):
        (root,) = await chain(categories, "Root")

        with pytest.raises(ValidationError) as excinfo:
            await categories.guard.validate_parent_assignment(root.id, root.id)

        assert excinfo.value.reason == "self-parent"
        assert "own parent" in excinfo.value.message


@pytest.mark.asyncio
class TestPath:

    async def test_breadcrumb_runs_root_to_node(self, categories):
        rows = await chain(categories, "News", "Tech", "AI")

        path = await categories.get_path(rows[-1].id)

        assert [p.name for p in path] == ["News", "Tech", "AI"]
