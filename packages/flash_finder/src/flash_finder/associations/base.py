from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from flash_finder.models import resolve_model

if TYPE_CHECKING:
    from flash_finder.models import Model

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def underscore(name: str) -> str:
    """
    Convert a class name into its snake_case form.

    >>> underscore("BookWriter")
    'book_writer'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def foreign_key_name(model: type[Model]) -> str:
    """Conventional foreign key column pointing at ``model``."""
    return f"{underscore(model.__name__)}_id"


class AssociationKind(enum.Enum):
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"
    MANY_TO_MANY = "many_to_many"

    @property
    def multi(self) -> bool:
        """True for kinds that populate a collection."""
        return self in (AssociationKind.HAS_MANY, AssociationKind.MANY_TO_MANY)


@dataclass(frozen=True)
class InnerAssociation:
    """
    A nested eager-loading request.

    ``name`` is the field on the owner that holds the loaded association and
    ``fields`` the dotted path still to be resolved below it.
    """

    name: str
    fields: str


class Relation:
    """
    Declares an association on a model class.

    Relations are plain descriptors: reading the attribute returns whatever
    the loader assigned, or an empty default (``None`` or ``[]``) before it
    ran.

    Args:
        target: The related model class or its class name.
        fk_id: Overrides the conventional foreign key column.
        order_by: ORDER BY fragment for collection kinds.
    """

    kind: ClassVar[AssociationKind]
    association_class: ClassVar[type[Association]]

    def __init__(
        self,
        target: type[Model] | str,
        *,
        fk_id: str | None = None,
        order_by: str | None = None,
    ):
        self._target = target
        self.fk_id = fk_id
        self.order_by = order_by
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if self.name not in instance.__dict__:
            return [] if self.kind.multi else None
        return instance.__dict__[self.name]

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.name] = value

    @property
    def target(self) -> type[Model]:
        return resolve_model(self._target)

    def bind(self, owner: Model, inner: list[InnerAssociation]) -> Association:
        """Produce the association descriptor for one owner record."""
        return self.association_class(owner=owner, relation=self, inner=inner)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._target!r}, name={self.name!r})"


@dataclass
class Association:
    """
    One declared association bound to one owner record.

    Subclasses implement ``skipped`` and ``constraint`` for their kind.
    """

    kind: ClassVar[AssociationKind]

    owner: Model
    relation: Relation
    inner: list[InnerAssociation] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.relation.name

    @property
    def target(self) -> type[Model]:
        return self.relation.target

    @property
    def multi(self) -> bool:
        return self.kind.multi

    @property
    def skipped(self) -> bool:
        raise NotImplementedError

    def constraint(self) -> tuple[str, list[Any]]:
        """Return the WHERE condition and its arguments for the target query."""
        raise NotImplementedError

    def assign(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


class SortableAssociation:
    """Capability of associations that can order the rows they load."""

    relation: Relation

    def order_clause(self) -> str:
        return self.relation.order_by or ""
