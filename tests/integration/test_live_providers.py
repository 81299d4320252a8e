"""Integration tests against the live provider (Gemini by default, OpenAI if configured)."""

import base64

import cv2
import numpy as np
import pytest

from ecochef.models.models import DietaryPreference, Ingredient
from ecochef.providers.factory import select_provider
from ecochef.providers.gateway import ProviderGateway

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def gateway(live_config):
    return ProviderGateway(select_provider(live_config), recipe_count=2, max_retries=2, retry_delay=1.0)


def _solid_image_token() -> str:
    """A plain red square: a real JPEG the model can look at without crashing."""
    frame = np.zeros((64, 64, 3), dtype=np.uint8)
    frame[:, :] = (0, 0, 255)
    _, buffer = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), 80])
    return base64.b64encode(buffer.tobytes()).decode("utf-8")


class TestLiveDetection:
    async def test_detection_returns_a_list(self, gateway):
        names = await gateway.detect_ingredients([_solid_image_token()])
        assert isinstance(names, list)
        assert all(isinstance(name, str) for name in names)


class TestLiveSuggestion:
    async def test_suggestion_returns_valid_recipes(self, gateway):
        roster = [
            Ingredient(id="1", name="Huevo"),
            Ingredient(id="2", name="Patata", is_priority=True),
            Ingredient(id="3", name="Cebolla"),
        ]

        recipes = await gateway.suggest_recipes(roster, DietaryPreference.VEGETARIAN)

        assert len(recipes) >= 1
        for recipe in recipes:
            assert recipe.id.startswith(f"recipe-{gateway.provider_name}-")
            assert recipe.steps
