"""Pytest configuration and fixtures for integration tests.

These tests call the real provider selected by the environment. They are
skipped unless a real key is available in the environment or in .env.
"""

import os
from pathlib import Path

import pytest
from dotenv import dotenv_values

DUMMY_KEYS = {"", "test-gemini-key"}


def _real_key(name: str) -> str:
    """Read a key from the process environment, falling back to the project .env."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    value = os.getenv(name) or ""
    if value in DUMMY_KEYS and env_path.exists():
        value = dotenv_values(env_path).get(name) or ""
    return "" if value in DUMMY_KEYS else value


@pytest.fixture(scope="session")
def live_config():
    """A Config bound to real credentials, or skip the module."""
    gemini_key = _real_key("GEMINI_API_KEY")
    openai_key = _real_key("OPENAI_API_KEY")

    if not gemini_key and not openai_key:
        pytest.skip(
            "Integration tests skipped. Missing API keys: GEMINI_API_KEY or OPENAI_API_KEY. "
            "Please set one in your .env file."
        )

    from ecochef.utils.config import Config

    cfg = Config()
    cfg.GEMINI_API_KEY = gemini_key
    cfg.OPENAI_API_KEY = openai_key
    cfg.validate()
    return cfg
