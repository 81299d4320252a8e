"""Gemini provider (default) built on the google-genai SDK."""

import asyncio
import base64
from typing import Optional, Sequence

from google import genai
from google.genai import types

from ecochef.models.models import Difficulty
from ecochef.prompts.prompts import detection_instruction
from ecochef.providers.base import IMAGE_MIME_TYPE, RecipeProvider
from ecochef.utils.logger import logger


INGREDIENT_LIST_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "ingredients": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="Lista de ingredientes de comida identificados en las imágenes.",
        ),
    },
    required=["ingredients"],
)

_STRING_LIST = types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING))

RECIPE_LIST_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING),
            "description": types.Schema(type=types.Type.STRING),
            "ingredientsUsed": _STRING_LIST,
            "missingIngredients": _STRING_LIST,
            "steps": _STRING_LIST,
            "difficulty": types.Schema(
                type=types.Type.STRING,
                enum=[level.value for level in Difficulty],
            ),
            "time": types.Schema(type=types.Type.STRING),
        },
        required=["title", "ingredientsUsed", "missingIngredients", "steps", "difficulty", "time"],
    ),
)


class GeminiProvider(RecipeProvider):
    """Calls Gemini with JSON response schemas for both operations.

    The SDK client is synchronous, so calls run in a worker thread to keep the
    event loop free.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        detection_temperature: float = 0.4,
        recipe_temperature: float = 0.7,
        client: Optional[genai.Client] = None,
    ) -> None:
        self.model = model
        self.detection_temperature = detection_temperature
        self.recipe_temperature = recipe_temperature
        self._client = client or genai.Client(api_key=api_key)

    @property
    def name(self) -> str:
        return "gemini"

    async def detect_ingredients(self, images: Sequence[str]) -> str:
        image_parts = [
            types.Part.from_bytes(data=base64.b64decode(image), mime_type=IMAGE_MIME_TYPE)
            for image in images
        ]
        logger.info(f"Using Gemini for vision ({self.model}, {len(image_parts)} image(s))")

        response = await asyncio.to_thread(
            self._client.models.generate_content,
            model=self.model,
            contents=[*image_parts, detection_instruction()],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=INGREDIENT_LIST_SCHEMA,
                temperature=self.detection_temperature,
            ),
        )
        return response.text or '{"ingredients": []}'

    async def suggest_recipes(self, brief: str, count: int) -> str:
        logger.info(f"Using Gemini for recipes ({self.model}, count={count})")

        response = await asyncio.to_thread(
            self._client.models.generate_content,
            model=self.model,
            contents=brief + " Devuelve la respuesta en formato JSON.",
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RECIPE_LIST_SCHEMA,
                temperature=self.recipe_temperature,
            ),
        )
        return response.text or "[]"
