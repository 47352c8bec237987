from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import Association, AssociationKind, Relation, foreign_key_name


@dataclass
class HasOneAssociation(Association):
    """
    The target table holds a foreign key back to the owner.
    """

    kind = AssociationKind.HAS_ONE

    @property
    def skipped(self) -> bool:
        return self.owner.primary_key_value is None

    def constraint(self) -> tuple[str, list[Any]]:
        column = self.relation.fk_id or foreign_key_name(type(self.owner))
        return f"{column} = ?", [self.owner.primary_key_value]


class HasOne(Relation):
    """
    Example:
        >>> class User(Model):
        ...     profile = HasOne("Profile")
        # SELECT ... FROM profiles WHERE user_id = ? LIMIT 1
    """

    kind = AssociationKind.HAS_ONE
    association_class = HasOneAssociation
