"""
Input validation schemas using Pydantic for better data integrity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from meal.utilities.constants import ACCENT_PALETTES, DENSITY_MODES, THEME_MODES, UNCATEGORIZED_GROUP


class IngredientInput(BaseModel):
    """Schema for one meal ingredient."""
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=20)

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace; blank values are rejected."""
        v = v.strip()
        if not v:
            raise ValueError('Value cannot be blank')
        return v


class MealInput(BaseModel):
    """Schema for a new meal."""
    name: str = Field(..., min_length=1, max_length=200)
    group: str = Field(default=UNCATEGORIZED_GROUP, max_length=100)
    ingredients: List[IngredientInput]

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Meal name cannot be empty')
        return v.strip()

    @field_validator('group')
    @classmethod
    def default_group(cls, v):
        return v.strip() or UNCATEGORIZED_GROUP

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        """Ensure meal has at least one ingredient."""
        if not v:
            raise ValueError('Meal must have at least one ingredient')
        return v


class GroupMoveInput(BaseModel):
    group: str = Field(..., min_length=1, max_length=100)

    @field_validator('group')
    @classmethod
    def strip_group(cls, v):
        if not v.strip():
            raise ValueError('Group cannot be blank')
        return v.strip()


class SelectionToggleInput(BaseModel):
    name: str = Field(..., min_length=1)


class PurchasedInput(BaseModel):
    """Purchase mark for a shopping list entry key ("name|unit")."""
    key: str = Field(..., min_length=1)
    purchased: bool = True


class SettingsUpdateInput(BaseModel):
    """Partial settings update; omitted fields stay unchanged."""
    persist_data_between_launches: Optional[bool] = None
    clear_shopping_after_export: Optional[bool] = None
    theme_mode: Optional[str] = None
    accent_palette: Optional[str] = None
    density_mode: Optional[str] = None

    @field_validator('theme_mode')
    @classmethod
    def validate_theme(cls, v):
        if v is not None and v not in THEME_MODES:
            raise ValueError(f'theme_mode must be one of {", ".join(THEME_MODES)}')
        return v

    @field_validator('accent_palette')
    @classmethod
    def validate_palette(cls, v):
        if v is not None and v not in ACCENT_PALETTES:
            raise ValueError(f'accent_palette must be one of {", ".join(ACCENT_PALETTES)}')
        return v

    @field_validator('density_mode')
    @classmethod
    def validate_density(cls, v):
        if v is not None and v not in DENSITY_MODES:
            raise ValueError(f'density_mode must be one of {", ".join(DENSITY_MODES)}')
        return v


class CatalogIngredientInput(BaseModel):
    """Schema for a reusable catalog ingredient."""
    name: str = Field(..., min_length=1, max_length=100)
    unit: str = Field(..., min_length=1, max_length=20)
    group_id: Optional[str] = None

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Value cannot be blank')
        return v


class CatalogGroupInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class MealGroupInput(BaseModel):
    """Name for a new meal group, or the new name of a renamed one."""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if not v.strip():
            raise ValueError('Group name cannot be blank')
        return v.strip()


class DuplicateMealInput(BaseModel):
    group: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=200)

    @field_validator('group')
    @classmethod
    def strip_group(cls, v):
        if not v.strip():
            raise ValueError('Group cannot be blank')
        return v.strip()

    @field_validator('name')
    @classmethod
    def blank_name_means_default(cls, v):
        if v is None:
            return v
        return v.strip() or None


class ShoppingKeyInput(BaseModel):
    """Shopping list entry key ("name|unit")."""
    key: str = Field(..., min_length=1)
