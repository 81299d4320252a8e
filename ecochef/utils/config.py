"""Configuration management for EcoChef.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _getenv_first(*names: str, default: str = "") -> str:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Default provider credential (Gemini). API_KEY is accepted for older .env files.
        self.GEMINI_API_KEY: str = _getenv_first("GEMINI_API_KEY", "API_KEY")
        # Alternate provider credential (OpenAI). Its presence selects OpenAI for
        # both detection and recipe suggestion.
        self.OPENAI_API_KEY: str = _getenv_first("OPENAI_API_KEY", "API_KEY_OPENAI")
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self.OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")
        # Sampling temperatures. Detection stays conservative, recipes get more room.
        self.DETECTION_TEMPERATURE: float = float(os.getenv("DETECTION_TEMPERATURE", "0.4"))
        self.RECIPE_TEMPERATURE: float = float(os.getenv("RECIPE_TEMPERATURE", "0.7"))
        # OpenAI vision request shaping
        self.OPENAI_VISION_MAX_TOKENS: int = int(os.getenv("OPENAI_VISION_MAX_TOKENS", "500"))
        self.OPENAI_IMAGE_DETAIL: str = os.getenv("OPENAI_IMAGE_DETAIL", "low")
        # Number of recipes requested per suggestion (a hint to the model, not enforced)
        self.RECIPE_COUNT: int = int(os.getenv("RECIPE_COUNT", "4"))
        # Retry policy for transient provider failures (timeouts, 429, 5xx)
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "2"))
        self.RETRY_DELAY_SECONDS: float = float(os.getenv("RETRY_DELAY_SECONDS", "1"))
        # Camera device index passed to OpenCV
        self.CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
        # Fixed JPEG quality for captured frames (80 == 0.8)
        self.CAPTURE_JPEG_QUALITY: int = int(os.getenv("CAPTURE_JPEG_QUALITY", "80"))
        # Maximum size (in MB) of an uploaded image file
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))

    @property
    def USE_OPENAI(self) -> bool:
        """True when the alternate provider credential is configured."""
        return bool(self.OPENAI_API_KEY)

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If no provider credential is set or values are out of range.
        """
        if not self.GEMINI_API_KEY and not self.OPENAI_API_KEY:
            raise ValueError(
                "GEMINI_API_KEY environment variable is required (or OPENAI_API_KEY to use OpenAI)"
            )
        for name in ("DETECTION_TEMPERATURE", "RECIPE_TEMPERATURE"):
            value = getattr(self, name)
            if not (0.0 <= value <= 2.0):
                raise ValueError(f"{name} must be between 0.0 and 2.0, got: {value}")
        if self.OPENAI_IMAGE_DETAIL not in ("low", "high", "auto"):
            raise ValueError(
                f"OPENAI_IMAGE_DETAIL must be 'low', 'high' or 'auto', got: {self.OPENAI_IMAGE_DETAIL}"
            )
        if self.RECIPE_COUNT < 1:
            raise ValueError(f"RECIPE_COUNT must be at least 1, got: {self.RECIPE_COUNT}")
        if self.MAX_RETRIES < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}")
        if self.RETRY_DELAY_SECONDS < 0:
            raise ValueError(
                f"RETRY_DELAY_SECONDS must not be negative, got: {self.RETRY_DELAY_SECONDS}"
            )
        if not (1 <= self.CAPTURE_JPEG_QUALITY <= 100):
            raise ValueError(
                f"CAPTURE_JPEG_QUALITY must be between 1 and 100, got: {self.CAPTURE_JPEG_QUALITY}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}")


# Module-level config instance. Validated at startup by the provider factory.
config = Config()
