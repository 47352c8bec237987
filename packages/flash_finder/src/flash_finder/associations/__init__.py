from __future__ import annotations

from typing import TYPE_CHECKING

from flash_finder.exceptions import AssociationError

from .base import (
    Association,
    AssociationKind,
    InnerAssociation,
    Relation,
    SortableAssociation,
)
from .belongs_to import BelongsTo, BelongsToAssociation
from .has_many import HasMany, HasManyAssociation
from .has_one import HasOne, HasOneAssociation
from .many_to_many import ManyToMany, ManyToManyAssociation

if TYPE_CHECKING:
    from flash_finder.models import Model


def _split_fields(fields: tuple[str, ...]) -> dict[str, list[str]]:
    """
    Group dotted eager fields by their first segment.

    >>> _split_fields(("books.writers", "books.publisher", "profile"))
    {'books': ['writers', 'publisher'], 'profile': []}
    """
    grouped: dict[str, list[str]] = {}
    for raw in fields:
        name, _, rest = raw.strip().partition(".")
        if not name:
            continue
        inner = grouped.setdefault(name, [])
        if rest and rest not in inner:
            inner.append(rest)
    return grouped


def for_model(record: Model, *fields: str) -> list[Association]:
    """
    Discover the associations of ``record``.

    Without ``fields`` every declared association is returned; otherwise only
    the named ones, each carrying the nested paths requested below it.
    Associations come back in declaration order.

    Raises:
        AssociationError: If a requested field is not a declared association.

    Example:
        >>> for_model(user, "books.writers")
        [HasManyAssociation(owner=<User>, relation=HasMany('Book', ...),
                            inner=[InnerAssociation('books', 'writers')])]
    """
    model = type(record)
    declared = model.relations()
    requested = _split_fields(fields)

    for name in requested:
        if name not in declared:
            msg = f"Field '{name}' is not an association of model {model.__name__}"
            raise AssociationError(msg)

    associations: list[Association] = []
    for name, relation in declared.items():
        if requested and name not in requested:
            continue
        inner = [InnerAssociation(name, path) for path in requested.get(name, [])]
        associations.append(relation.bind(record, inner))
    return associations


__all__ = [
    "Association",
    "AssociationKind",
    "BelongsTo",
    "BelongsToAssociation",
    "HasMany",
    "HasManyAssociation",
    "HasOne",
    "HasOneAssociation",
    "InnerAssociation",
    "ManyToMany",
    "ManyToManyAssociation",
    "Relation",
    "SortableAssociation",
    "for_model",
]
