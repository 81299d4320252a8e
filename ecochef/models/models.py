"""Data models and schemas for EcoChef.

Defines Pydantic models for the ingredient roster, recipe batches and provider
responses. Wire names are camelCase (``isPriority``, ``ingredientsUsed``) and
are accepted alongside the snake_case attribute names.
"""

import unicodedata
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DietaryPreference(str, Enum):
    """Dietary constraint applied to recipe suggestions (localized labels)."""

    NONE = "Ninguna"
    VEGETARIAN = "Vegetariano"
    VEGAN = "Vegano"


class Difficulty(str, Enum):
    """Closed difficulty scale for recipes (localized labels)."""

    EASY = "Fácil"
    MEDIUM = "Media"
    HARD = "Difícil"


class ViewState(str, Enum):
    """Screens of the application. Exactly one is active at a time."""

    HOME = "HOME"
    CAMERA = "CAMERA"
    INGREDIENTS = "INGREDIENTS"
    RECIPES = "RECIPES"
    RECIPE_DETAIL = "RECIPE_DETAIL"


def _fold(text: str) -> str:
    """Lowercase and strip accents so 'Fácil', 'facil' and 'FACIL' compare equal."""
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_DIFFICULTY_ALIASES = {
    "facil": Difficulty.EASY,
    "easy": Difficulty.EASY,
    "media": Difficulty.MEDIUM,
    "medio": Difficulty.MEDIUM,
    "medium": Difficulty.MEDIUM,
    "dificil": Difficulty.HARD,
    "hard": Difficulty.HARD,
}


class _WireModel(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Ingredient(_WireModel):
    """One entry of the user's ingredient roster."""

    id: Annotated[str, Field(min_length=1, description="Opaque unique identifier, never reused")]
    name: Annotated[str, Field(min_length=1, max_length=200, description="Display name")]
    is_priority: Annotated[
        bool, Field(False, description="Flagged by the user as 'use before it expires'")
    ]


class Recipe(_WireModel):
    """A recipe suggested by the provider for the current roster.

    ``id`` is assigned by the gateway; provider payloads never set it.
    """

    id: Annotated[str, Field(min_length=1, description="Provider-tagged, batch-indexed identifier")]
    title: Annotated[str, Field(min_length=1, max_length=200)]
    description: Annotated[str, Field("", max_length=2000)]
    ingredients_used: Annotated[List[str], Field(default_factory=list)]
    missing_ingredients: Annotated[List[str], Field(default_factory=list)]
    steps: Annotated[List[str], Field(default_factory=list)]
    difficulty: Difficulty
    time: Annotated[str, Field(min_length=1, max_length=100, description="Free-text duration, e.g. '15 min'")]

    @field_validator("difficulty", mode="before")
    @classmethod
    def coerce_difficulty(cls, value):
        """Map provider labels onto the closed difficulty scale."""
        if isinstance(value, Difficulty):
            return value
        if isinstance(value, str):
            folded = _fold(value)
            if folded in _DIFFICULTY_ALIASES:
                return _DIFFICULTY_ALIASES[folded]
        raise ValueError(f"Unknown difficulty: {value!r}")

    @field_validator("time", mode="before")
    @classmethod
    def coerce_time(cls, value):
        """Accept bare numbers from providers as minutes."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g} min"
        return value

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, value):
        return "" if value is None else value

    @field_validator("ingredients_used", "missing_ingredients", "steps", mode="before")
    @classmethod
    def coerce_string_list(cls, value):
        """Treat null as empty and drop blank entries."""
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item).strip() for item in value if item is not None and str(item).strip()]
        return value

    @property
    def is_fully_satisfiable(self) -> bool:
        """True when the provider reports no missing ingredients."""
        return not self.missing_ingredients

    @property
    def numbered_steps(self) -> list[tuple[int, str]]:
        """Steps paired with their 1-based display index."""
        return list(enumerate(self.steps, start=1))


class IngredientDetectionOutput(BaseModel):
    """Structured result of an ingredient detection request.

    A missing or null ``ingredients`` field is an empty detection, not an error.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    ingredients: Annotated[List[str], Field(default_factory=list, description="Detected ingredient names")]

    @field_validator("ingredients", mode="before")
    @classmethod
    def coerce_ingredients(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("ingredients must be a list")
        names = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError("ingredient names must be strings")
            if item.strip():
                names.append(item.strip())
        return names


class Outcome(BaseModel):
    """Explicit result of a user-triggered operation.

    ``message`` is the user-visible text (localized) shown for failures and
    validation problems; it is None on plain success.
    """

    ok: bool
    message: Optional[str] = None

    @classmethod
    def success(cls, message: Optional[str] = None) -> "Outcome":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> "Outcome":
        return cls(ok=False, message=message)
