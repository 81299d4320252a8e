"""Factory for the provider gateway.

Provider selection happens once per process: an OpenAI credential selects
OpenAI for both operations, otherwise Gemini serves both.
"""

from functools import lru_cache
from typing import Optional

from ecochef.providers.base import RecipeProvider
from ecochef.providers.gateway import ProviderGateway
from ecochef.utils.config import Config, config
from ecochef.utils.logger import logger


def select_provider(cfg: Optional[Config] = None) -> RecipeProvider:
    """Instantiate the provider chosen by the configured credentials."""
    cfg = cfg or config

    if cfg.USE_OPENAI:
        from ecochef.providers.openai_provider import OpenAIProvider

        logger.info(f"Using OpenAI provider (model={cfg.OPENAI_MODEL})", extra={"provider": "openai"})
        return OpenAIProvider(
            api_key=cfg.OPENAI_API_KEY,
            model=cfg.OPENAI_MODEL,
            detection_temperature=cfg.DETECTION_TEMPERATURE,
            recipe_temperature=cfg.RECIPE_TEMPERATURE,
            vision_max_tokens=cfg.OPENAI_VISION_MAX_TOKENS,
            image_detail=cfg.OPENAI_IMAGE_DETAIL,
        )

    from ecochef.providers.gemini_provider import GeminiProvider

    logger.info(f"Using Gemini provider (model={cfg.GEMINI_MODEL})", extra={"provider": "gemini"})
    return GeminiProvider(
        api_key=cfg.GEMINI_API_KEY,
        model=cfg.GEMINI_MODEL,
        detection_temperature=cfg.DETECTION_TEMPERATURE,
        recipe_temperature=cfg.RECIPE_TEMPERATURE,
    )


@lru_cache(maxsize=1)
def build_gateway() -> ProviderGateway:
    """Validate configuration and build the process-wide gateway.

    Raises:
        ValueError: If configuration is invalid (e.g. no provider credential).
    """
    config.validate()
    return ProviderGateway(
        provider=select_provider(config),
        recipe_count=config.RECIPE_COUNT,
        max_retries=config.MAX_RETRIES,
        retry_delay=config.RETRY_DELAY_SECONDS,
    )


def clear_gateway_cache() -> None:
    """Clear the cached gateway (useful for testing)."""
    build_gateway.cache_clear()
