from typing import Final

DEFAULT_MEAL_GROUPS: Final[tuple[str, ...]] = ("Breakfast", "Snack", "Lunch", "Dinner", "Dessert")
UNCATEGORIZED_GROUP: Final[str] = "Uncategorized"

DEFAULT_INGREDIENT_GROUP_ID: Final[str] = "default-other-group"
DEFAULT_INGREDIENT_GROUP_NAME: Final[str] = "Other"

THEME_MODES: Final[tuple[str, ...]] = ("SYSTEM", "LIGHT", "DARK")
ACCENT_PALETTES: Final[tuple[str, ...]] = ("EMERALD", "OCEAN", "SUNSET", "LAVENDER")
DENSITY_MODES: Final[tuple[str, ...]] = ("NORMAL", "COMPACT")

SHOPPING_LIST_TITLE: Final[str] = "Shopping list"
SHOPPING_LIST_EMPTY_MESSAGE: Final[str] = "Shopping list is empty"
EXPORT_FILE_PREFIX: Final[str] = "shopping-list"
EXPORT_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S_%f"

DATA_EXPORT_VERSION: Final[str] = "1.0"
