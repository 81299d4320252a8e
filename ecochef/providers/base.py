"""Base interface for the language-model providers behind the gateway.

A provider only shapes the request for its SDK and returns the model's raw
text. Parsing, validation, id assignment and error normalization happen once,
in ``ProviderGateway``, so both providers behave identically at that boundary.
"""

from abc import ABC, abstractmethod
from typing import Sequence


IMAGE_MIME_TYPE = "image/jpeg"


class RecipeProvider(ABC):
    """Abstract provider for ingredient detection and recipe suggestion."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider tag used in logs and recipe ids (e.g. 'gemini')."""
        ...

    @abstractmethod
    async def detect_ingredients(self, images: Sequence[str]) -> str:
        """Send all images in one request and return the raw JSON text.

        Args:
            images: Base64 JPEG tokens without a data-URI header, in capture order.

        Returns:
            Model output expected to hold ``{"ingredients": [...]}``.

        Raises:
            Exception: Any SDK, transport or authentication error, unchanged.
        """
        ...

    @abstractmethod
    async def suggest_recipes(self, brief: str, count: int) -> str:
        """Send the recipe brief and return the raw JSON text.

        Returns:
            Model output expected to hold a list of recipes, bare or wrapped
            in an object.
        """
        ...
