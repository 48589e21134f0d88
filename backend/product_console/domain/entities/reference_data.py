"""Domain entities for read-only lookup data used by the product editor."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class ReferenceItem:
    """A selectable option (category, warehouse location or supplier)."""

    id: str
    name: str


class LoadStatus(str, Enum):
    """Tri-state of a reference-data load."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


@dataclass
class ReferenceData:
    """Everything the edit screen needs to render its selection fields."""

    status: LoadStatus = LoadStatus.LOADING
    categories: list[ReferenceItem] = field(default_factory=list)
    locations: list[ReferenceItem] = field(default_factory=list)
    suppliers: list[ReferenceItem] = field(default_factory=list)
    error: str | None = None

    @property
    def is_blocking(self) -> bool:
        """The form cannot render selection fields without this data."""
        return self.status is LoadStatus.ERROR
