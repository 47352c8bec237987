from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import Association, AssociationKind, Relation, foreign_key_name


@dataclass
class BelongsToAssociation(Association):
    """
    The owner holds the foreign key pointing at the target.
    """

    kind = AssociationKind.BELONGS_TO

    @property
    def owner_column(self) -> str:
        return self.relation.fk_id or foreign_key_name(self.target)

    @property
    def foreign_key_value(self) -> Any:
        return getattr(self.owner, self.owner_column)

    @property
    def skipped(self) -> bool:
        # Nothing to load for a null reference.
        return self.foreign_key_value is None

    def constraint(self) -> tuple[str, list[Any]]:
        return f"{self.target.primary_key_name()} = ?", [self.foreign_key_value]


class BelongsTo(Relation):
    """
    Example:
        >>> class Book(Model):
        ...     user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
        ...     user = BelongsTo("User")
        # SELECT ... FROM users WHERE id = ? LIMIT 1
    """

    kind = AssociationKind.BELONGS_TO
    association_class = BelongsToAssociation
