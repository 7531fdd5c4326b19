"""Domain exceptions raised by the planner service and the repositories."""


class MealPlannerError(Exception):
    """Base class for meal planner domain errors."""


class DuplicateMealError(MealPlannerError):
    def __init__(self, name: str):
        super().__init__(f"Meal '{name}' already exists")
        self.name = name


class MealNotFoundError(MealPlannerError):
    def __init__(self, name: str):
        super().__init__(f"Meal '{name}' not found")
        self.name = name


class DuplicateIngredientError(MealPlannerError):
    def __init__(self, name: str):
        super().__init__(f"Ingredient '{name}' already exists in the catalog")
        self.name = name


class InvalidImportError(MealPlannerError):
    """Raised when an import payload does not have the expected shape."""
