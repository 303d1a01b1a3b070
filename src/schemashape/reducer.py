"""Structural intersection of type models.

``overlap`` combines two models into the model of the values satisfying both
of them; ``reduce_models`` left-folds ``overlap`` across a sequence. The fold
is not associative for heterogeneous inputs: distributed union branches and
intersection members keep the left-to-right order of the operands.
"""

import logging
from collections.abc import Iterable

from .models import (
    NEVER,
    ArrayOf,
    EnumOf,
    Intersection,
    Literal,
    Never,
    ObjectOf,
    TypeModel,
    UnionExclusive,
    UnionInclusive,
    Unknown,
)
from .validator import accepts

logger = logging.getLogger(__name__)


def reduce_models(models: Iterable[TypeModel]) -> TypeModel:
    """Fold a non-empty sequence of models into their structural intersection.

    Args:
        models: Models to combine, in order

    Returns:
        The single model satisfied by values that satisfy every input

    Raises:
        ValueError: If the sequence is empty
    """
    models = list(models)
    if not models:
        raise ValueError("Cannot reduce an empty sequence of type models")

    result = models[0]
    for model in models[1:]:
        result = overlap(result, model)
    return result


def exclusive_union(branches: Iterable[TypeModel]) -> UnionExclusive:
    """Build a ``oneOf`` model and compute the overlap shared by all branches."""
    model = UnionExclusive(tuple(branches))
    logger.debug(f"oneOf over {len(model.branches)} branches shares {model.shared.describe()}")
    return model


def overlap(a: TypeModel, b: TypeModel) -> TypeModel:
    """Combine two models into the model of values satisfying both."""
    if a == b:
        return a
    if isinstance(a, Unknown):
        return b
    if isinstance(b, Unknown):
        return a
    if isinstance(a, Never) or isinstance(b, Never):
        return NEVER

    if isinstance(a, Literal):
        return a if accepts(b, a.value) else NEVER
    if isinstance(b, Literal):
        return b if accepts(a, b.value) else NEVER
    if isinstance(a, EnumOf):
        return _narrow_enum(a, b)
    if isinstance(b, EnumOf):
        return _narrow_enum(b, a)

    if isinstance(a, UnionInclusive):
        return _inclusive([overlap(branch, b) for branch in a.branches])
    if isinstance(b, UnionInclusive):
        return _inclusive([overlap(a, branch) for branch in b.branches])

    if isinstance(a, Intersection) or isinstance(b, Intersection):
        return Intersection(_members(a) + _members(b))

    if isinstance(a, UnionExclusive) and isinstance(b, UnionExclusive):
        # Exactly-one semantics does not distribute over another oneOf
        return Intersection((a, b))
    if isinstance(a, UnionExclusive):
        return _exclusive([overlap(branch, b) for branch in a.branches])
    if isinstance(b, UnionExclusive):
        return _exclusive([overlap(a, branch) for branch in b.branches])

    if isinstance(a, ArrayOf) and isinstance(b, ArrayOf):
        return ArrayOf(overlap(a.items, b.items))
    if isinstance(a, ObjectOf) and isinstance(b, ObjectOf):
        return _merge_objects(a, b)

    logger.debug(f"No overlap between {a.describe()} and {b.describe()}")
    return NEVER


def _members(model: TypeModel) -> tuple[TypeModel, ...]:
    if isinstance(model, Intersection):
        return model.branches
    return (model,)


def _narrow_enum(enum: EnumOf, other: TypeModel) -> TypeModel:
    values = [value for value in enum.values if accepts(other, value)]
    if not values:
        return NEVER
    if len(values) == 1:
        return Literal(values[0])
    return EnumOf(tuple(values))


def _inclusive(parts: list[TypeModel]) -> TypeModel:
    parts = [part for part in parts if not isinstance(part, Never)]
    if not parts:
        return NEVER
    if len(parts) == 1:
        return parts[0]
    return UnionInclusive(tuple(parts))


def _exclusive(parts: list[TypeModel]) -> TypeModel:
    # A Never branch never matches, so dropping it keeps the match count intact
    parts = [part for part in parts if not isinstance(part, Never)]
    if not parts:
        return NEVER
    if len(parts) == 1:
        return parts[0]
    # shared is left to be derived on access; reducing here repeats for every nested oneOf
    return UnionExclusive(tuple(parts))


def _merge_objects(a: ObjectOf, b: ObjectOf) -> TypeModel:
    left, right = a.property_map, b.property_map
    required = a.required | b.required
    names = list(left) + [name for name in right if name not in left]

    merged: dict[str, TypeModel] = {}
    for name in names:
        if name in left and name in right:
            model = overlap(left[name], right[name])
        elif name in left:
            # A closed object forbids keys it does not declare
            model = left[name] if b.additional_allowed else None
        else:
            model = right[name] if a.additional_allowed else None

        if model is None:
            if name in required:
                return NEVER
            continue
        if isinstance(model, Never) and name in required:
            return NEVER
        merged[name] = model

    return ObjectOf(merged, required, a.additional_allowed and b.additional_allowed)
