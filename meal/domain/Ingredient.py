"""Ingredient value type: name, amount and unit of one line of a meal."""


class Ingredient:
    __slots__ = ("name", "amount", "unit")

    def __init__(self, name: str = "", amount: float = 0.0, unit: str = ""):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "amount", float(amount))
        object.__setattr__(self, "unit", unit)

    def __setattr__(self, key, value):
        raise AttributeError(f"Ingredient is immutable; cannot set '{key}'")

    def __eq__(self, other):
        if not isinstance(other, Ingredient):
            return NotImplemented
        return (self.name, self.amount, self.unit) == (other.name, other.amount, other.unit)

    def __hash__(self):
        return hash((self.name, self.amount, self.unit))

    def __str__(self) -> str:
        return f"{self.name} - {self.amount} {self.unit}"

    def __repr__(self) -> str:
        return f"Ingredient(name={self.name!r}, amount={self.amount!r}, unit={self.unit!r})"

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        amount = d.get("amount", d.get("quantity", 0))
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            amount = 0.0
        return Ingredient(str(d.get("name", "") or ""), amount, str(d.get("unit", "") or ""))

    def to_dict(self):
        '''Converts the Ingredient to a dictionary for JSON persistence.'''
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
        }
