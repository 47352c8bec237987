from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .base import (
    Association,
    AssociationKind,
    Relation,
    SortableAssociation,
    foreign_key_name,
)

if TYPE_CHECKING:
    from flash_finder.models import Model


@dataclass
class ManyToManyAssociation(SortableAssociation, Association):
    """
    Owner and target are linked through a join table.
    """

    kind = AssociationKind.MANY_TO_MANY
    relation: ManyToMany

    @property
    def skipped(self) -> bool:
        return self.owner.primary_key_value is None

    def constraint(self) -> tuple[str, list[Any]]:
        owner_model = type(self.owner)
        owner_column = self.relation.fk_id or foreign_key_name(owner_model)
        target_column = self.relation.target_fk or foreign_key_name(self.target)
        through = self.relation.through or (
            f"{owner_model.table_name()}_{self.target.table_name()}"
        )
        condition = (
            f"{self.target.primary_key_name()} in "
            f"(select {target_column} from {through} where {owner_column} = ?)"
        )
        return condition, [self.owner.primary_key_value]


class ManyToMany(Relation):
    """
    Args:
        through: Join table name, defaults to ``<owner_table>_<target_table>``.
        target_fk: Join table column pointing at the target.

    Example:
        >>> class User(Model):
        ...     songs = ManyToMany("Song", through="users_songs")
        # SELECT ... FROM songs
        # WHERE id in (select song_id from users_songs where user_id = ?)
    """

    kind = AssociationKind.MANY_TO_MANY
    association_class = ManyToManyAssociation

    def __init__(
        self,
        target: type[Model] | str,
        *,
        through: str | None = None,
        target_fk: str | None = None,
        fk_id: str | None = None,
        order_by: str | None = None,
    ):
        super().__init__(target, fk_id=fk_id, order_by=order_by)
        self.through = through
        self.target_fk = target_fk
