"""OpenAI provider (alternate), selected when OPENAI_API_KEY is configured."""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

from openai import OpenAI

from ecochef.prompts.prompts import RECIPE_SYSTEM_PROMPT, detection_instruction
from ecochef.providers.base import IMAGE_MIME_TYPE, RecipeProvider
from ecochef.utils.logger import logger


class OpenAIProvider(RecipeProvider):
    """Thin wrapper around the Chat Completions API in JSON-object mode."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        detection_temperature: float = 0.4,
        recipe_temperature: float = 0.7,
        vision_max_tokens: int = 500,
        image_detail: str = "low",
        client: Optional[OpenAI] = None,
    ) -> None:
        self.model = model
        self.detection_temperature = detection_temperature
        self.recipe_temperature = recipe_temperature
        self.vision_max_tokens = vision_max_tokens
        self.image_detail = image_detail
        self._client = client or OpenAI(api_key=api_key)

    @property
    def name(self) -> str:
        return "openai"

    def _image_part(self, image: str) -> dict[str, Any]:
        return {
            "type": "image_url",
            "image_url": {
                "url": f"data:{IMAGE_MIME_TYPE};base64,{image}",
                "detail": self.image_detail,
            },
        }

    async def detect_ingredients(self, images: Sequence[str]) -> str:
        content: list[dict[str, Any]] = [
            {"type": "text", "text": detection_instruction(json_shape=True)},
        ]
        content.extend(self._image_part(image) for image in images)
        logger.info(f"Using OpenAI for vision ({self.model}, {len(images)} image(s))")

        response = await asyncio.to_thread(
            self._client.chat.completions.create,
            model=self.model,
            messages=[{"role": "user", "content": content}],
            response_format={"type": "json_object"},
            temperature=self.detection_temperature,
            max_tokens=self.vision_max_tokens,
        )
        return response.choices[0].message.content or ""

    async def suggest_recipes(self, brief: str, count: int) -> str:
        logger.info(f"Using OpenAI for recipes ({self.model}, count={count})")

        response = await asyncio.to_thread(
            self._client.chat.completions.create,
            model=self.model,
            messages=[
                {"role": "system", "content": RECIPE_SYSTEM_PROMPT},
                {"role": "user", "content": brief},
            ],
            response_format={"type": "json_object"},
            temperature=self.recipe_temperature,
        )
        return response.choices[0].message.content or ""
