"""Unit tests for structural intersection reduction."""

import pytest

from schemashape.models import (
    BOOLEAN,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayOf,
    EnumOf,
    Intersection,
    Literal,
    ObjectOf,
    UnionExclusive,
    UnionInclusive,
)
from schemashape.reducer import exclusive_union, overlap, reduce_models


class TestOverlap:
    """Test pairwise overlap rules."""

    def test_equal_models(self):
        """Test equal models."""
        assert overlap(STRING, STRING) == STRING
        assert overlap(Literal(3), Literal(3)) == Literal(3)

    def test_unknown_is_identity(self):
        """Test unknown is identity."""
        assert overlap(UNKNOWN, NUMBER) == NUMBER
        assert overlap(ArrayOf(STRING), UNKNOWN) == ArrayOf(STRING)

    def test_never_absorbs(self):
        """Test never absorbs."""
        assert overlap(NEVER, STRING) == NEVER
        assert overlap(STRING, NEVER) == NEVER

    def test_incompatible_primitives(self):
        """Test incompatible primitives."""
        assert overlap(STRING, BOOLEAN) == NEVER
        assert overlap(NULL, NUMBER) == NEVER

    def test_disjoint_literals(self):
        """Test disjoint literals."""
        assert overlap(Literal(1), Literal(2)) == NEVER
        assert overlap(Literal(True), Literal(1)) == NEVER

    def test_literal_against_kind(self):
        """Test literal against kind."""
        assert overlap(Literal("a"), STRING) == Literal("a")
        assert overlap(NUMBER, Literal(5)) == Literal(5)
        assert overlap(Literal("a"), NUMBER) == NEVER

    def test_literal_against_enum(self):
        """Test literal against enum."""
        assert overlap(Literal(1), EnumOf((1, 2))) == Literal(1)
        assert overlap(EnumOf((1, 2)), Literal(3)) == NEVER

    def test_enum_against_enum(self):
        """Test enum against enum."""
        assert overlap(EnumOf(("a", "b", "c")), EnumOf(("b", "c", "d"))) == EnumOf(("b", "c"))
        assert overlap(EnumOf(("a", "b")), EnumOf(("b", "z"))) == Literal("b")
        assert overlap(EnumOf(("a",)), EnumOf(("z",))) == NEVER

    def test_enum_against_kind(self):
        """Test enum against kind."""
        assert overlap(EnumOf(("a", 1, "b")), STRING) == EnumOf(("a", "b"))

    def test_arrays(self):
        """Test array item overlap."""
        assert overlap(ArrayOf(UNKNOWN), ArrayOf(STRING)) == ArrayOf(STRING)
        assert overlap(ArrayOf(STRING), ArrayOf(NUMBER)) == ArrayOf(NEVER)

    def test_objects_merge_properties(self):
        """Test objects merge properties."""
        a = ObjectOf({"a": STRING}, {"a"})
        b = ObjectOf({"b": NUMBER}, {"b"})
        assert overlap(a, b) == ObjectOf({"a": STRING, "b": NUMBER}, {"a", "b"}, True)

    def test_objects_overlap_shared_keys(self):
        """Test objects overlap shared keys."""
        a = ObjectOf({"x": UNKNOWN}, set())
        b = ObjectOf({"x": Literal(1)}, {"x"})
        assert overlap(a, b) == ObjectOf({"x": Literal(1)}, {"x"})

    def test_closed_object_drops_foreign_optional_key(self):
        """Test closed object drops foreign optional key."""
        closed = ObjectOf({"a": STRING}, {"a"}, False)
        open_ = ObjectOf({"b": NUMBER}, set())
        assert overlap(closed, open_) == ObjectOf({"a": STRING}, {"a"}, False)

    def test_closed_object_with_foreign_required_key(self):
        """Test closed object with foreign required key."""
        closed = ObjectOf({"a": STRING}, set(), False)
        other = ObjectOf({"b": NUMBER}, {"b"})
        assert overlap(closed, other) == NEVER

    def test_required_key_with_disjoint_models(self):
        """Test required key with disjoint models."""
        a = ObjectOf({"a": STRING}, {"a"})
        b = ObjectOf({"a": NUMBER}, set())
        assert overlap(a, b) == NEVER

    def test_optional_key_with_disjoint_models_stays_as_never(self):
        """Test optional key with disjoint models stays as never."""
        a = ObjectOf({"a": STRING}, set())
        b = ObjectOf({"a": NUMBER}, set())
        assert overlap(a, b) == ObjectOf({"a": NEVER}, set())

    def test_inclusive_union_distributes(self):
        """Test inclusive union distributes."""
        union = UnionInclusive((STRING, NUMBER, BOOLEAN))
        assert overlap(union, UnionInclusive((NUMBER, BOOLEAN))) == UnionInclusive((NUMBER, BOOLEAN))
        assert overlap(union, STRING) == STRING
        assert overlap(union, NULL) == NEVER

    def test_exclusive_union_distributes_over_plain_model(self):
        """Test exclusive union distributes over plain model."""
        union = UnionExclusive((ArrayOf(STRING), ArrayOf(NUMBER), STRING))
        result = overlap(union, ArrayOf(UNKNOWN))
        assert result == exclusive_union((ArrayOf(STRING), ArrayOf(NUMBER)))
        assert result.shared == ArrayOf(NEVER)

    def test_enum_narrowed_by_exclusive_union(self):
        """2 matches two branches of the oneOf, so only 3 survives."""
        union = UnionExclusive((EnumOf((1, 2)), NUMBER, STRING))
        assert overlap(union, EnumOf((2, 3))) == Literal(3)

    def test_two_exclusive_unions_intersect(self):
        """Test two exclusive unions intersect."""
        first = UnionExclusive((STRING, NUMBER))
        second = UnionExclusive((NUMBER, BOOLEAN))
        assert overlap(first, second) == Intersection((first, second))

    def test_intersection_flattens(self):
        """Test intersection flattens."""
        first = UnionExclusive((STRING, NUMBER))
        second = UnionExclusive((NUMBER, BOOLEAN))
        combined = overlap(Intersection((first, second)), ArrayOf(STRING))
        assert combined == Intersection((first, second, ArrayOf(STRING)))


class TestReduceModels:
    """Test the left fold across sequences."""

    def test_empty_sequence(self):
        """Test that an empty sequence is rejected."""
        with pytest.raises(ValueError):
            reduce_models([])

    def test_singleton_unchanged(self):
        """Test that a single model is returned unchanged."""
        model = ObjectOf({"a": STRING}, {"a"})
        assert reduce_models([model]) is model

    def test_folds_across_all_inputs(self):
        """Test folds across all inputs."""
        assert reduce_models([UNKNOWN, NUMBER, Literal(4)]) == Literal(4)
        assert reduce_models([EnumOf((1, 2, 3)), EnumOf((2, 3)), EnumOf((3, 4))]) == Literal(3)

    def test_incompatible_member_collapses_to_never(self):
        """Test incompatible member collapses to never."""
        assert reduce_models([STRING, Literal("a"), NUMBER]) == NEVER

    def test_left_to_right_order_is_kept(self):
        """The fold is order sensitive: intersection members follow input order."""
        a = UnionExclusive((STRING, NUMBER))
        b = UnionExclusive((NUMBER, BOOLEAN))
        c = UnionExclusive((BOOLEAN, STRING))

        forward = reduce_models([a, b, c])
        backward = reduce_models([c, b, a])

        assert forward == Intersection((a, b, c))
        assert backward == Intersection((c, b, a))
        assert forward != backward

    def test_distributed_union_keeps_left_operand_order(self):
        """Test distributed union keeps left operand order."""
        left = UnionInclusive((STRING, NUMBER))
        right = UnionInclusive((NUMBER, STRING))
        assert reduce_models([left, right]) == UnionInclusive((STRING, NUMBER))
        assert reduce_models([right, left]) == UnionInclusive((NUMBER, STRING))


class TestExclusiveUnion:
    """Test oneOf model construction."""

    def test_shared_overlap_of_all_branches(self):
        """Test shared overlap of all branches."""
        model = exclusive_union([Literal(1), EnumOf((1, 2))])
        assert model.shared == Literal(1)

    def test_disjoint_branches_share_nothing(self):
        """Test disjoint branches share nothing."""
        assert exclusive_union([STRING, NUMBER]).shared == NEVER
