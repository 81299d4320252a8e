"""Shared pytest configuration and fixtures.

Unit tests never reach a real provider: a dummy Gemini key is seeded before
any ecochef module is imported, and OpenAI is switched off so the default
provider is selected.
"""

import os
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest


def pytest_configure(config):
    """Seed dummy credentials before test collection imports ecochef modules."""
    os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
    os.environ.setdefault("LOG_LEVEL", "WARNING")
    os.environ["OPENAI_API_KEY"] = ""
    os.environ["API_KEY_OPENAI"] = ""


class FakeDevice:
    """Stand-in for cv2.VideoCapture that serves fixed frames."""

    def __init__(self, frames: Optional[list] = None, opened: bool = True):
        self.frames = list(frames if frames is not None else [np.zeros((4, 6, 3), dtype=np.uint8)])
        self.opened = opened
        self.release_count = 0

    def isOpened(self):
        return self.opened

    def read(self):
        if not self.frames:
            return False, None
        frame = self.frames.pop(0) if len(self.frames) > 1 else self.frames[0]
        return True, frame

    def release(self):
        self.release_count += 1


@pytest.fixture
def fake_device():
    return FakeDevice()


@pytest.fixture
def device_opener(fake_device):
    """Opener returning the shared fake device, recording the requested index."""
    opener = MagicMock(return_value=fake_device)
    return opener


@pytest.fixture
def mock_gateway():
    """Gateway double with async detection and suggestion."""
    gateway = MagicMock()
    gateway.provider_name = "gemini"
    gateway.detect_ingredients = AsyncMock(return_value=[])
    gateway.suggest_recipes = AsyncMock(return_value=[])
    return gateway


def _recipe_payload(title: str = "Tortilla", **overrides) -> dict:
    payload = {
        "title": title,
        "description": "Rápida y sencilla",
        "ingredientsUsed": ["huevo", "patata"],
        "missingIngredients": [],
        "steps": ["Batir los huevos", "Freír las patatas", "Cuajar la tortilla"],
        "difficulty": "Fácil",
        "time": "20 min",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def recipe_payload():
    """Factory for provider-shaped recipe dicts (camelCase wire names)."""
    return _recipe_payload
