"""Settings value: persistence and export policy flags plus stored appearance choices."""
from meal.utilities.constants import ACCENT_PALETTES, DENSITY_MODES, THEME_MODES


def _choice(value, allowed, default):
    if isinstance(value, str) and value.upper() in allowed:
        return value.upper()
    return default


class Settings:
    def __init__(self, persist_data_between_launches: bool = True, clear_shopping_after_export: bool = False,
                 theme_mode: str = "SYSTEM", accent_palette: str = "EMERALD", density_mode: str = "NORMAL"):
        self.persist_data_between_launches = bool(persist_data_between_launches)
        self.clear_shopping_after_export = bool(clear_shopping_after_export)
        self.theme_mode = _choice(theme_mode, THEME_MODES, "SYSTEM")
        self.accent_palette = _choice(accent_palette, ACCENT_PALETTES, "EMERALD")
        self.density_mode = _choice(density_mode, DENSITY_MODES, "NORMAL")

    def replace(self, **changes) -> "Settings":
        '''Returns a copy with the given fields changed.'''
        values = self.to_dict()
        values.update(changes)
        return Settings(**values)

    def __eq__(self, other):
        if not isinstance(other, Settings):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Settings({self.to_dict()!r})"

    @staticmethod
    def from_dict(data):
        '''Builds Settings from stored JSON; missing keys and unknown enum values fall back to defaults.'''
        d = dict(data) if isinstance(data, dict) else {}
        defaults = Settings()
        return Settings(
            persist_data_between_launches=d.get("persist_data_between_launches", defaults.persist_data_between_launches),
            clear_shopping_after_export=d.get("clear_shopping_after_export", defaults.clear_shopping_after_export),
            theme_mode=d.get("theme_mode", defaults.theme_mode),
            accent_palette=d.get("accent_palette", defaults.accent_palette),
            density_mode=d.get("density_mode", defaults.density_mode),
        )

    def to_dict(self):
        return {
            "persist_data_between_launches": self.persist_data_between_launches,
            "clear_shopping_after_export": self.clear_shopping_after_export,
            "theme_mode": self.theme_mode,
            "accent_palette": self.accent_palette,
            "density_mode": self.density_mode,
        }
