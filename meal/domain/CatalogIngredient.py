"""Ingredient catalog entities: reusable ingredient definitions and their groups."""


class IngredientGroup:
    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name

    def __eq__(self, other):
        if not isinstance(other, IngredientGroup):
            return NotImplemented
        return (self.id, self.name) == (other.id, other.name)

    def __repr__(self) -> str:
        return f"IngredientGroup(id={self.id!r}, name={self.name!r})"

    @staticmethod
    def from_dict(data):
        return IngredientGroup(str(data.get("id", "")), str(data.get("name", "")))

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class CatalogIngredient:
    def __init__(self, id: int, name: str, unit: str, group_id: str):
        self.id = id
        self.name = name
        self.unit = unit
        self.group_id = group_id

    def __eq__(self, other):
        if not isinstance(other, CatalogIngredient):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"CatalogIngredient(id={self.id!r}, name={self.name!r}, unit={self.unit!r}, group_id={self.group_id!r})"

    @staticmethod
    def from_dict(data):
        return CatalogIngredient(
            int(data.get("id", 0)),
            str(data.get("name", "")),
            str(data.get("unit", "")),
            str(data.get("group_id", "")),
        )

    def to_dict(self):
        return {"id": self.id, "name": self.name, "unit": self.unit, "group_id": self.group_id}
