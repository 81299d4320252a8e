"""Prompts and request briefs for the ingredient detection and recipe suggestion calls.

The display locale is Spanish: ingredient names come back in Spanish and the
recipe brief is written in Spanish so the model answers in kind.
"""

from typing import Iterable

from ecochef.models.models import DietaryPreference, Ingredient


PANTRY_STAPLES = ("sal", "aceite", "pimienta", "agua")

DETECTION_INSTRUCTION = (
    "Identifica todos los alimentos, ingredientes y productos de cocina visibles en estas imágenes. "
    "Si hay varias fotos, combina los resultados en una sola lista única sin duplicados. "
    "Sé específico pero genérico (ej: 'tomate' en vez de 'tomate rama'). "
    "Devuelve los nombres en español."
)

# OpenAI has no response schema in json_object mode, so the shape is spelled out.
DETECTION_JSON_SUFFIX = ' Devuelve SOLO un JSON con la estructura: { "ingredients": ["string"] }.'

RECIPE_SYSTEM_PROMPT = """Eres un asistente de cocina experto.
Tu tarea es sugerir recetas basadas en ingredientes.

Respuesta OBLIGATORIA en formato JSON con la siguiente estructura:
{
  "recipes": [
    {
      "title": "string",
      "description": "string (breve)",
      "ingredientsUsed": ["string"],
      "missingIngredients": ["string"],
      "steps": ["string"],
      "difficulty": "Fácil" | "Media" | "Difícil",
      "time": "string (ej: 15 min)"
    }
  ]
}"""


def detection_instruction(json_shape: bool = False) -> str:
    """Return the detection instruction, optionally with the explicit JSON shape."""
    return DETECTION_INSTRUCTION + (DETECTION_JSON_SUFFIX if json_shape else "")


def build_recipe_brief(
    ingredients: Iterable[Ingredient],
    preference: DietaryPreference,
    count: int = 4,
) -> str:
    """Build the natural-language brief sent to the recipe provider.

    Args:
        ingredients: Current roster. Every name is listed; priority names are
            called out again as near-expiry ingredients that must be used.
        preference: Dietary preference. Anything but NONE becomes a strict
            constraint clause.
        count: Number of recipes to request.

    Returns:
        The brief as a single string.
    """
    roster = list(ingredients)
    names = ", ".join(item.name for item in roster)
    priority = ", ".join(item.name for item in roster if item.is_priority)

    parts = [f"Tengo estos ingredientes disponibles: {names}."]

    if priority:
        parts.append(
            f"IMPORTANTE: Debes usar estos ingredientes prioritarios que van a caducar: {priority}."
        )

    if preference != DietaryPreference.NONE:
        parts.append(f"Restricción dietética estricta: {preference.value}.")

    staples = ", ".join(PANTRY_STAPLES)
    parts.append(
        f"Sugiere {count} recetas sencillas y creativas que maximicen el uso de mis ingredientes disponibles."
    )
    parts.append(
        f"Se permite asumir ingredientes básicos de despensa ({staples}) sin listarlos como faltantes."
    )
    parts.append("Prioriza recetas donde 'missingIngredients' sea una lista vacía o muy corta.")

    return " ".join(parts)
