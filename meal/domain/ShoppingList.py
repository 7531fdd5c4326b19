"""ShoppingEntry: one aggregated line of the shopping list (name, summed amount, unit)."""
from typing import Optional


class ShoppingEntry:
    def __init__(self, name: str, amount: float, unit: str, key: Optional[str] = None):
        self.name = name
        self.amount = amount
        self.unit = unit
        # storage key of the grouping key, set by the list builder
        self.key = key

    def __eq__(self, other):
        if not isinstance(other, ShoppingEntry):
            return NotImplemented
        return (self.name, self.amount, self.unit) == (other.name, other.amount, other.unit)

    def __hash__(self):
        return hash((self.name, self.amount, self.unit))

    def __str__(self) -> str:
        return f"{self.name}: {self.amount} {self.unit}"

    def __repr__(self) -> str:
        return f"ShoppingEntry(name={self.name!r}, amount={self.amount!r}, unit={self.unit!r})"

    def to_dict(self):
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "key": self.key,
        }


class ExportResult:
    """Outcome of a shopping list export.

    ``filename`` is None when there was nothing to export.
    """

    def __init__(self, filename=None, items: int = 0, cleared_selection: bool = False):
        self.filename = filename
        self.items = items
        self.cleared_selection = cleared_selection

    @property
    def exported(self) -> bool:
        return self.filename is not None

    def __repr__(self) -> str:
        return (f"ExportResult(filename={self.filename!r}, items={self.items}, "
                f"cleared_selection={self.cleared_selection})")

    def to_dict(self):
        return {
            "status": "exported" if self.exported else "empty",
            "filename": self.filename,
            "items": self.items,
            "cleared_selection": self.cleared_selection,
        }
