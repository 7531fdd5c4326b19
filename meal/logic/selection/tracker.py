"""Selection tracker: the set of meal names chosen for the shopping list."""
from typing import Iterable, List, Set


class SelectionTracker:
    """Permissive set of selected meal names.

    Any string is accepted, including names without a saved meal; such stale
    names simply match nothing during aggregation. The tracker does no
    locking of its own, the planner service owns it and serializes access.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: Set[str] = set(names)

    def toggle(self, name: str) -> bool:
        '''Flips membership of name and returns True when it is now selected.'''
        if name in self._names:
            self._names.remove(name)
            return False
        self._names.add(name)
        return True

    def discard(self, name: str) -> None:
        self._names.discard(name)

    def clear(self) -> None:
        self._names.clear()

    def names(self) -> List[str]:
        return sorted(self._names)

    def as_set(self) -> frozenset:
        return frozenset(self._names)

    def __contains__(self, name) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"SelectionTracker({self.names()!r})"
