from __future__ import annotations

from dataclasses import dataclass

from .base import AssociationKind, Relation, SortableAssociation
from .has_one import HasOneAssociation


@dataclass
class HasManyAssociation(SortableAssociation, HasOneAssociation):
    """Same constraint as has-one, populating a collection."""

    kind = AssociationKind.HAS_MANY


class HasMany(Relation):
    """
    Example:
        >>> class User(Model):
        ...     books = HasMany("Book", order_by="title asc")
        # SELECT ... FROM books WHERE user_id = ? ORDER BY title asc
    """

    kind = AssociationKind.HAS_MANY
    association_class = HasManyAssociation
