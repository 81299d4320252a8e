"""Provider gateway: the single boundary between EcoChef and the language models.

Core Functions:
- parse_json_response(): Lenient JSON parsing (direct, then regex extraction)
- is_transient_error(): Classify provider failures as retryable or permanent
- ProviderGateway.detect_ingredients(): Operation A, images -> ingredient names
- ProviderGateway.suggest_recipes(): Operation B, roster + preference -> recipes

Whatever the backing provider raises (SDK errors, transport errors, malformed
JSON, validation failures) leaves this module as exactly one of two normalized
errors: DetectionError or RecipeGenerationError. The raw error is logged and
chained, never shown to the user.
"""

import asyncio
import json
import re
import uuid
from typing import Any, Awaitable, Callable, Iterable, Sequence

import httpx
import openai
from google.genai import errors as genai_errors
from pydantic import ValidationError

from ecochef.models.models import DietaryPreference, Ingredient, IngredientDetectionOutput, Recipe
from ecochef.prompts.prompts import build_recipe_brief
from ecochef.providers.base import RecipeProvider
from ecochef.utils.errors import DetectionError, RecipeGenerationError
from ecochef.utils.logger import logger


TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}
TRANSIENT_PHRASES = ("timeout", "timed out", "temporarily unavailable", "retryable")
TRANSIENT_CODE_PATTERN = re.compile(r"\b(408|429|500|502|503|504)\b")
# Local failures are never retried, whatever their message says
PERMANENT_TYPES = (ValueError, TypeError, KeyError, ValidationError)


class MalformedResponseError(ValueError):
    """Provider output could not be read as the expected JSON shape."""


# ============================================================================
# Helpers
# ============================================================================


def parse_json_response(response_text: str) -> Any:
    """Parse provider output leniently.

    Tries a direct ``json.loads`` first, then falls back to extracting the
    outermost JSON object or array from surrounding text (markdown fences,
    chatty preambles).

    Raises:
        MalformedResponseError: If no JSON value can be recovered.
    """
    if not response_text or not response_text.strip():
        raise MalformedResponseError("Empty response from provider")

    try:
        return json.loads(response_text)
    except json.JSONDecodeError:
        logger.debug("Direct JSON parse failed, trying regex extraction")

    for pattern in (r"\{.*\}", r"\[.*\]"):
        match = re.search(pattern, response_text, re.DOTALL)
        if not match:
            continue
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            continue

    raise MalformedResponseError(f"Could not parse JSON from response: {response_text[:200]}")


def is_transient_error(exc: BaseException) -> bool:
    """Return True for failures worth retrying (timeouts, connection drops, 429/5xx)."""
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return True
    if isinstance(exc, (openai.APITimeoutError, openai.APIConnectionError)):
        return True
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code in TRANSIENT_STATUS_CODES
    if isinstance(exc, genai_errors.APIError):
        return exc.code in TRANSIENT_STATUS_CODES
    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True

    # Untyped SDK errors only carry the status in their message
    if isinstance(exc, PERMANENT_TYPES):
        return False
    error_str = str(exc).lower()
    if TRANSIENT_CODE_PATTERN.search(error_str):
        return True
    return any(phrase in error_str for phrase in TRANSIENT_PHRASES)


def _extract_recipe_list(data: Any) -> list:
    """Accept a bare array or an object wrapping one (``{"recipes": [...]}``)."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("recipes"), list):
            return data["recipes"]
        for value in data.values():
            if isinstance(value, list):
                return value
    raise MalformedResponseError(f"Expected a list of recipes, got {type(data).__name__}")


# ============================================================================
# Gateway
# ============================================================================


class ProviderGateway:
    """Provider-agnostic detection and suggestion with normalized failures.

    Args:
        provider: Backing provider, selected once at startup.
        recipe_count: Number of recipes requested per suggestion (a hint).
        max_retries: Total attempts for transient failures (1 = no retry).
        retry_delay: Initial backoff in seconds, doubled after each attempt.
    """

    def __init__(
        self,
        provider: RecipeProvider,
        recipe_count: int = 4,
        max_retries: int = 2,
        retry_delay: float = 1.0,
    ) -> None:
        self.provider = provider
        self.recipe_count = recipe_count
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

    @property
    def provider_name(self) -> str:
        return self.provider.name

    async def _call_with_retries(self, call: Callable[[], Awaitable[str]], operation_name: str) -> str:
        """Run a provider call with exponential backoff on transient errors.

        Permanent errors and the last transient error propagate unchanged.
        """
        delay = self.retry_delay
        attempt = 1
        while True:
            try:
                return await call()
            except Exception as e:
                if not is_transient_error(e) or attempt >= self.max_retries:
                    raise
                logger.warning(
                    f"{operation_name}: transient error, retrying "
                    f"(attempt {attempt + 1}/{self.max_retries}) after {delay}s: {e}",
                    extra={"provider": self.provider_name},
                )
                await asyncio.sleep(delay)
                delay *= 2
                attempt += 1

    async def detect_ingredients(self, images: Sequence[str]) -> list[str]:
        """Identify ingredients across all images in one batched request.

        Args:
            images: Non-empty, ordered base64 JPEG tokens.

        Returns:
            Ingredient names as returned by the provider; empty when the
            provider reports none (or omits the list).

        Raises:
            DetectionError: On any failure, including an empty image list.
        """
        images = list(images)
        if not images:
            raise DetectionError(details={"reason": "no images"})

        logger.info(
            f"Detecting ingredients in {len(images)} image(s)",
            extra={"provider": self.provider_name},
        )
        try:
            raw = await self._call_with_retries(
                lambda: self.provider.detect_ingredients(images), "Ingredient detection"
            )
            data = parse_json_response(raw)
            if isinstance(data, list):
                data = {"ingredients": data}
            if not isinstance(data, dict):
                raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
            output = IngredientDetectionOutput.model_validate(data)
        except (MalformedResponseError, ValidationError) as e:
            logger.error(f"Ingredient detection returned a malformed response: {e}", extra={"provider": self.provider_name})
            raise DetectionError(details={"reason": "malformed response"}) from e
        except Exception as e:
            logger.error(f"Ingredient detection failed: {type(e).__name__}: {e}", extra={"provider": self.provider_name})
            raise DetectionError(details={"reason": type(e).__name__}) from e

        logger.info(
            f"Detected {len(output.ingredients)} ingredient(s): {output.ingredients}",
            extra={"provider": self.provider_name},
        )
        return output.ingredients

    async def suggest_recipes(
        self,
        roster: Iterable[Ingredient],
        preference: DietaryPreference = DietaryPreference.NONE,
    ) -> list[Recipe]:
        """Request a fresh batch of recipes for the roster.

        Each recipe gets a new id ``recipe-<provider>-<batch>-<index>``; ids
        from earlier batches are never reused.

        Raises:
            RecipeGenerationError: On any failure.
        """
        roster = list(roster)
        brief = build_recipe_brief(roster, preference, count=self.recipe_count)
        logger.info(
            f"Requesting {self.recipe_count} recipes for {len(roster)} ingredient(s), "
            f"preference={preference.name}",
            extra={"provider": self.provider_name},
        )
        logger.debug(f"Recipe brief: {brief}")

        try:
            raw = await self._call_with_retries(
                lambda: self.provider.suggest_recipes(brief, self.recipe_count), "Recipe suggestion"
            )
            items = _extract_recipe_list(parse_json_response(raw))
            batch = uuid.uuid4().hex[:8]
            recipes = []
            for index, item in enumerate(items):
                if not isinstance(item, dict):
                    raise MalformedResponseError(f"Recipe #{index} is not an object")
                payload = {**item, "id": f"recipe-{self.provider_name}-{batch}-{index}"}
                recipes.append(Recipe.model_validate(payload))
        except (MalformedResponseError, ValidationError) as e:
            logger.error(f"Recipe suggestion returned a malformed response: {e}", extra={"provider": self.provider_name})
            raise RecipeGenerationError(details={"reason": "malformed response"}) from e
        except Exception as e:
            logger.error(f"Recipe suggestion failed: {type(e).__name__}: {e}", extra={"provider": self.provider_name})
            raise RecipeGenerationError(details={"reason": type(e).__name__}) from e

        logger.info(f"Received {len(recipes)} recipe(s)", extra={"provider": self.provider_name})
        return recipes
