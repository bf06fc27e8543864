import os
import logging
from typing import Any, Dict, Optional
from enum import Enum

import requests

from sahayak.llm.gemini_client import DEFAULT_BASE_URL, GeminiClient, GeminiConfig

logger = logging.getLogger(__name__)

API_KEY_VARIABLES = ("GOOGLE_API_KEY", "GEMINI_API_KEY")


class LLMProvider(Enum):
    """
    Enumeration of supported LLM providers.
    """
    GOOGLE = "google"


class LLMFactory:
    """
    Factory class to create and configure text-generation clients.

    Centralizes the initialization logic so the UIs only deal with a
    ready-to-call client built from the `llm_settings` config section.
    """

    @staticmethod
    def create_client(
        config: Dict[str, Any],
        provider: str = "google",
        session: Optional[requests.Session] = None,
    ) -> GeminiClient:
        """
        Creates and returns a configured client.

        Args:
            config (Dict[str, Any]): A dictionary containing model settings
                                     (e.g., model_name, temperature).
            provider (str): The provider name (default: "google").
            session (requests.Session): Optional HTTP session (for testing).

        Returns:
            GeminiClient: An initialized client.

        Raises:
            ValueError: If the provider is not supported or API keys are missing.
        """
        try:
            # Normalize provider string to match Enum
            provider_enum = LLMProvider(provider.lower())
        except ValueError:
            valid_options = [p.value for p in LLMProvider]
            raise ValueError(f"Unsupported provider '{provider}'. Valid options: {valid_options}")

        model_hint = config.get("model_name") or config.get("model")
        logger.info(f"Initializing LLM with provider: {provider_enum.value} | Model: {model_hint}")

        if provider_enum == LLMProvider.GOOGLE:
            return LLMFactory._create_google_client(config, session)

        raise ValueError(f"Provider '{provider}' is technically valid but not implemented.")

    @staticmethod
    def _create_google_client(config: Dict[str, Any], session: Optional[requests.Session]) -> GeminiClient:
        """
        Internal helper to create a Gemini REST client.

        Args:
            config (Dict[str, Any]): Configuration dictionary with 'model_name', 'temperature', etc.

        Returns:
            GeminiClient: The configured Gemini client.
        """
        api_key = next((os.getenv(name) for name in API_KEY_VARIABLES if os.getenv(name)), None)
        if not api_key:
            logger.error("GOOGLE_API_KEY not found in environment variables.")
            raise ValueError("GOOGLE_API_KEY is missing. Please set it in your .env file.")

        # Extract parameters with safe defaults
        gemini_config = GeminiConfig(
            api_key=api_key,
            model_name=config.get("model_name") or config.get("model") or "gemini-1.5-pro",
            base_url=config.get("base_url", DEFAULT_BASE_URL),
            temperature=config.get("temperature", 0.7),
            max_output_tokens=config.get("max_output_tokens", 2048),
            timeout=config.get("timeout", 60),
        )
        return GeminiClient(gemini_config, session=session)
