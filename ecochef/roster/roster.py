"""In-memory ingredient roster for the current session.

All edits are synchronous. Unknown ids and blank names are no-ops rather than
errors, and duplicate names are allowed: only ids are unique.
"""

import uuid
from typing import Iterable, Iterator, Optional

from ecochef.models.models import Ingredient
from ecochef.utils.logger import logger


def _token() -> str:
    return uuid.uuid4().hex[:8]


def capitalize_first(name: str) -> str:
    """Uppercase the leading character only ('queso azul' -> 'Queso azul')."""
    return name[:1].upper() + name[1:]


class IngredientRoster:
    """Ordered collection of ingredients; insertion order is display order."""

    def __init__(self, ingredients: Optional[Iterable[Ingredient]] = None) -> None:
        self._items: list[Ingredient] = list(ingredients or [])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Ingredient]:
        return iter(list(self._items))

    def __bool__(self) -> bool:
        return bool(self._items)

    @property
    def items(self) -> list[Ingredient]:
        return list(self._items)

    def get(self, ingredient_id: str) -> Optional[Ingredient]:
        return next((item for item in self._items if item.id == ingredient_id), None)

    def names(self) -> list[str]:
        return [item.name for item in self._items]

    def priority_names(self) -> list[str]:
        return [item.name for item in self._items if item.is_priority]

    def add_manual(self, name: str) -> Optional[Ingredient]:
        """Append a user-typed ingredient. Blank names are ignored.

        Returns:
            The new Ingredient, or None when nothing was added.
        """
        name = (name or "").strip()
        if not name:
            return None
        ingredient = Ingredient(id=f"manual-{_token()}", name=name, is_priority=False)
        self._items.append(ingredient)
        logger.debug(f"Added ingredient manually: {name}")
        return ingredient

    def remove(self, ingredient_id: str) -> bool:
        """Remove the entry with this id. Returns False if there was none."""
        for index, item in enumerate(self._items):
            if item.id == ingredient_id:
                del self._items[index]
                logger.debug(f"Removed ingredient {item.name} ({ingredient_id})")
                return True
        return False

    def toggle_priority(self, ingredient_id: str) -> bool:
        """Flip the priority flag of the entry with this id. Returns False if absent."""
        for index, item in enumerate(self._items):
            if item.id == ingredient_id:
                self._items[index] = item.model_copy(update={"is_priority": not item.is_priority})
                return True
        return False

    def merge_detected(self, names: Iterable[str]) -> list[Ingredient]:
        """Append one new ingredient per detected name.

        Existing entries are never removed or renamed, and names already on
        the roster are not deduplicated.

        Returns:
            The ingredients that were appended, in detection order.
        """
        batch = _token()
        added = []
        for index, name in enumerate(names):
            name = (name or "").strip()
            if not name:
                continue
            ingredient = Ingredient(id=f"ing-{batch}-{index}", name=capitalize_first(name))
            self._items.append(ingredient)
            added.append(ingredient)
        logger.info(f"Added {len(added)} detected ingredient(s) to the roster ({len(self._items)} total)")
        return added
