from pathlib import Path

from meal.utilities.config import DATA_DIR as _CONFIG_DATA_DIR, EXPORT_DIR as _CONFIG_EXPORT_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIG_DATA_DIR).resolve()
EXPORT_DIR = Path(_CONFIG_EXPORT_DIR).resolve()
MEALS_FILE = DATA_DIR / 'meals.json'
SETTINGS_FILE = DATA_DIR / 'settings.json'
INGREDIENT_CATALOG_FILE = DATA_DIR / 'ingredient_catalog.json'

__all__ = ['DATA_DIR', 'EXPORT_DIR', 'MEALS_FILE', 'SETTINGS_FILE', 'INGREDIENT_CATALOG_FILE']
