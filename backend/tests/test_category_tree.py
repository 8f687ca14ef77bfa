import pytest

from ecommerce.core.exceptions import CategoryCycleError
from ecommerce.db.models.category_model import Category
from ecommerce.services.category_tree import (
    build_category_tree,
    collect_subtree_ids,
    group_by_parent,
    resolve_descendant_ids,
)


def make_category(category_id, name, parent_id=None, display_order=0):
    """Transient Category row, never attached to a session."""
    return Category(
        category_id=category_id,
        name=name,
        slug=name.lower(),
        parent_id=parent_id,
        display_order=display_order,
        is_active=True,
    )


def ids(nodes):
    return [node.category_id for node in nodes]


def flatten(nodes):
    result = []
    for node in nodes:
        result.append(node.category_id)
        result.extend(flatten(node.children))
    return result


@pytest.fixture
def simple_records():
    return [
        make_category(1, "A"),
        make_category(2, "B", parent_id=1, display_order=0),
        make_category(3, "C", parent_id=1, display_order=1),
    ]


@pytest.fixture
def rich_records():
    return [
        make_category(10, "Tools", display_order=2),
        make_category(20, "Garden", display_order=1),
        make_category(11, "Hammers", parent_id=10, display_order=1),
        make_category(12, "Drills", parent_id=10, display_order=1),
        make_category(13, "Saws", parent_id=10, display_order=0),
        make_category(111, "Claw hammers", parent_id=11),
        make_category(1111, "Steel claw hammers", parent_id=111),
        make_category(21, "Hoses", parent_id=20),
    ]


class TestBuildCategoryTree:
    """Tests for build_category_tree."""

    def test_single_root_with_ordered_children(self, simple_records):
        """Test a root with two children ordered by display_order."""
        tree = build_category_tree(simple_records)

        assert ids(tree) == [1]
        assert [child.name for child in tree[0].children] == ["B", "C"]

    def test_empty_input(self):
        """Test that an empty list produces an empty tree."""
        assert build_category_tree([]) == []

    def test_no_matching_root(self, simple_records):
        """Test that a root_parent_id without children produces an empty tree."""
        assert build_category_tree(simple_records, root_parent_id=3) == []

    def test_subtree_from_root_parent_id(self, rich_records):
        """Test building only the branch below a given parent."""
        tree = build_category_tree(rich_records, root_parent_id=10)

        assert ids(tree) == [13, 12, 11]
        assert ids(tree[2].children) == [111]

    def test_siblings_ordered_by_display_order_then_name(self, rich_records):
        """Test ordering at every level: display_order first, then name."""
        tree = build_category_tree(rich_records)

        assert ids(tree) == [20, 10]
        tools = tree[1]
        # Drills y Hammers empatan en display_order: decide el nombre
        assert [child.name for child in tools.children] == ["Saws", "Drills", "Hammers"]

    def test_ordering_property_holds_at_every_level(self, rich_records):
        """Test siblings are non-decreasing in (display_order, name)."""
        def check(nodes):
            keys = [(node.display_order, node.name) for node in nodes]
            assert keys == sorted(keys)
            for node in nodes:
                check(node.children)

        check(build_category_tree(rich_records))

    def test_ties_keep_input_order(self):
        """Test that identical sort keys keep their input order."""
        records = [make_category(7, "Same"), make_category(3, "Same")]

        assert ids(build_category_tree(records)) == [7, 3]

    def test_presorted_keeps_input_order(self):
        """Test that presorted input keeps the database's name collation."""
        # Orden de una collation sin distinción de mayúsculas: apple antes que Zebra
        records = [make_category(1, "apple"), make_category(2, "Zebra")]

        assert ids(build_category_tree(records)) == [2, 1]
        assert ids(build_category_tree(records, presorted=True)) == [1, 2]

    def test_presorted_children_keep_input_order(self):
        """Test that nested siblings also keep the presorted order."""
        records = [
            make_category(1, "Root"),
            make_category(3, "bolts", parent_id=1),
            make_category(2, "Clamps", parent_id=1),
        ]

        tree = build_category_tree(records, presorted=True)

        assert ids(tree[0].children) == [3, 2]

    def test_deterministic(self, rich_records):
        """Test that two builds over the same input are identical."""
        first = build_category_tree(rich_records)
        second = build_category_tree(rich_records)

        assert [n.model_dump() for n in first] == [n.model_dump() for n in second]

    def test_complete_without_duplicates(self, rich_records):
        """Test that every reachable record appears exactly once."""
        flat = flatten(build_category_tree(rich_records))

        assert sorted(flat) == sorted(r.category_id for r in rich_records)
        assert len(flat) == len(set(flat))

    def test_unlimited_depth(self, rich_records):
        """Test that grandchildren and deeper levels are built."""
        tree = build_category_tree(rich_records)
        hammers = tree[1].children[2]

        assert hammers.children[0].category_id == 111
        assert hammers.children[0].children[0].category_id == 1111

    def test_dangling_parent_is_excluded(self, simple_records):
        """Test that a record whose parent does not exist is silently left out."""
        records = simple_records + [make_category(5, "Orphan", parent_id=999)]

        tree = build_category_tree(records)

        assert 5 not in flatten(tree)
        assert flatten(tree) == [1, 2, 3]

    def test_node_fields(self, simple_records):
        """Test that nodes carry the display fields of the record."""
        node = build_category_tree(simple_records)[0]

        assert node.slug == "a"
        assert node.description is None
        assert node.image_url is None
        assert node.display_order == 0

    def test_cycle_through_root_parent_raises(self):
        """Test that walking into a parent loop raises CategoryCycleError."""
        records = [make_category(1, "One", parent_id=2), make_category(2, "Two", parent_id=1)]

        with pytest.raises(CategoryCycleError) as exc_info:
            build_category_tree(records, root_parent_id=1)

        assert exc_info.value.category_id == 1

    def test_self_parent_raises(self):
        """Test that a category that is its own parent is a cycle."""
        records = [make_category(4, "Loop", parent_id=4)]

        with pytest.raises(CategoryCycleError):
            build_category_tree(records, root_parent_id=4)

    def test_detached_cycle_is_unreachable(self, simple_records):
        """Test that a loop not hanging from any root does not break the tree."""
        records = simple_records + [
            make_category(8, "Eight", parent_id=9),
            make_category(9, "Nine", parent_id=8),
        ]

        assert flatten(build_category_tree(records)) == [1, 2, 3]

    def test_max_depth_exceeded(self):
        """Test that a chain deeper than max_depth raises CategoryCycleError."""
        records = [make_category(1, "L1")] + [
            make_category(i, f"L{i}", parent_id=i - 1) for i in range(2, 7)
        ]

        with pytest.raises(CategoryCycleError):
            build_category_tree(records, max_depth=3)

        assert len(flatten(build_category_tree(records, max_depth=6))) == 6

    def test_invalid_id_fails_fast(self):
        """Test that a non-positive id is rejected."""
        with pytest.raises(AssertionError):
            build_category_tree([make_category(0, "Zero")])


class TestResolveDescendantIds:
    """Tests for resolve_descendant_ids."""

    def test_root_and_direct_children(self, simple_records):
        """Test that the root comes first followed by its children."""
        result = resolve_descendant_ids(simple_records, 1)

        assert result[0] == 1
        assert sorted(result) == [1, 2, 3]

    def test_leaf_returns_only_itself(self, simple_records):
        """Test a category without children."""
        assert resolve_descendant_ids(simple_records, 2) == [2]

    def test_grandchildren_not_included(self, rich_records):
        """Test that only one parent hop is followed."""
        result = resolve_descendant_ids(rich_records, 10)

        assert sorted(result) == [10, 11, 12, 13]
        assert 111 not in result
        assert 1111 not in result

    def test_children_in_input_order(self, rich_records):
        """Test that children keep the order of the input list."""
        assert resolve_descendant_ids(rich_records, 10) == [10, 11, 12, 13]

    def test_unknown_root(self, simple_records):
        """Test that an unknown root resolves to itself."""
        assert resolve_descendant_ids(simple_records, 42) == [42]

    def test_empty_input(self):
        """Test resolution over an empty snapshot."""
        assert resolve_descendant_ids([], 1) == [1]


class TestCollectSubtreeIds:
    """Tests for collect_subtree_ids and group_by_parent."""

    def test_all_levels_without_root(self, rich_records):
        """Test that every descendant is collected and the root is not."""
        result = collect_subtree_ids(rich_records, 10)

        assert sorted(result) == [11, 12, 13, 111, 1111]

    def test_leaf_has_no_descendants(self, rich_records):
        """Test a leaf category."""
        assert collect_subtree_ids(rich_records, 1111) == []

    def test_group_by_parent_keeps_order(self, rich_records):
        """Test the parent index used by the tree walk."""
        groups = group_by_parent(rich_records)

        assert [r.category_id for r in groups[None]] == [10, 20]
        assert [r.category_id for r in groups[10]] == [11, 12, 13]
