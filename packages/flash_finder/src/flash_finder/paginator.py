from typing import Annotated, Any, Mapping, Self

from pydantic import BaseModel, Field, model_validator

from .config import finder_settings


class Paginator(BaseModel):
    """
    Page request attached to a query, filled in with totals after ``all``.

    Examples
    --------
    Offset calculation::

        >>> Paginator(page=3, per_page=10).offset
        20

    Totals after a fetch::

        >>> p = Paginator(page=1, per_page=10)
        >>> p.update_totals(total=23, current=10)
        >>> p.total_pages
        3
    """

    page: Annotated[int, Field(default=1, description="1-indexed page number")]
    per_page: Annotated[
        int,
        Field(
            default_factory=lambda: finder_settings.DEFAULT_PER_PAGE,
            description="Items per page",
        ),
    ]
    offset: Annotated[int, Field(default=0, description="Rows skipped")]

    total_entries_size: int = 0
    current_entries_size: int = 0
    total_pages: int = 0

    @model_validator(mode="after")
    def _validate_bounds(self) -> Self:
        """
        Clamps page and page size, then derives the offset.

        >>> Paginator(page=0, per_page=-5).per_page == finder_settings.DEFAULT_PER_PAGE
        True
        """
        if self.page < 1:
            self.page = 1
        if self.per_page < 1:
            self.per_page = finder_settings.DEFAULT_PER_PAGE
        self.per_page = min(self.per_page, finder_settings.MAX_PER_PAGE)
        self.offset = (self.page - 1) * self.per_page
        return self

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "Paginator":
        """
        Build a paginator from request parameters (``page``, ``per_page``).

        Missing or malformed values fall back to the defaults.

        >>> Paginator.from_params({"page": "2", "per_page": "15"}).offset
        15
        """
        return cls(
            page=_as_int(params.get("page"), 1),
            per_page=_as_int(
                params.get("per_page"), finder_settings.DEFAULT_PER_PAGE
            ),
        )

    def update_totals(self, total: int, current: int) -> None:
        """Record the matching row count and derive the page count."""
        self.total_entries_size = total
        self.current_entries_size = current
        self.total_pages = total // self.per_page
        if total % self.per_page > 0:
            self.total_pages += 1


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
