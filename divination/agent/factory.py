"""Generation client factory for model-specific backends"""

import logging
from typing import Optional

from .generation import (
    AnthropicGenerationClient,
    GenerationClient,
    OpenAIGenerationClient,
)
from ..config import get_config, Config

logger = logging.getLogger(__name__)


class GenerationClientFactory:
    """Factory for creating the appropriate generation client based on model selection"""

    @staticmethod
    def _require_api_key(config: Config, model_type: str) -> str:
        api_key = config.get_api_key(model_type)
        if not api_key:
            env_name = getattr(config.model, model_type).api_key_env
            raise ValueError(
                f"{env_name} not found in environment variables"
            )
        return api_key

    @staticmethod
    def create(
        model_name: str,
        config: Optional[Config] = None,
    ) -> GenerationClient:
        """
        Create a generation client for the specified model.

        Args:
            model_name: Model identifier (e.g., "gpt-4o-mini", "claude", "deepseek-chat")
            config: Optional configuration object

        Returns:
            GenerationClient instance

        Raises:
            ValueError: If model_name is not supported or its API key is missing
        """
        if config is None:
            config = get_config()

        model_name_lower = model_name.lower()

        # OpenAI (gpt-4o, gpt-4.1, etc)
        if "gpt" in model_name_lower or "openai" in model_name_lower:
            settings = config.model.openai
            logger.info(f"Creating OpenAIGenerationClient for model: {model_name}")
            return OpenAIGenerationClient(
                api_key=GenerationClientFactory._require_api_key(config, "openai"),
                model=model_name if model_name.startswith("gpt") else settings.model,
                base_url=settings.base_url,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
            )

        # Claude
        elif "claude" in model_name_lower or "anthropic" in model_name_lower:
            settings = config.model.claude
            logger.info(f"Creating AnthropicGenerationClient for model: {model_name}")
            return AnthropicGenerationClient(
                api_key=GenerationClientFactory._require_api_key(config, "claude"),
                model=model_name if model_name.startswith("claude") else settings.model,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
            )

        # DeepSeek (OpenAI-compatible API)
        elif "deepseek" in model_name_lower:
            settings = config.model.deepseek
            logger.info(f"Creating OpenAIGenerationClient (DeepSeek) for model: {model_name}")
            return OpenAIGenerationClient(
                api_key=GenerationClientFactory._require_api_key(config, "deepseek"),
                model=model_name if model_name.startswith("deepseek-") else settings.model,
                base_url=settings.base_url,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
            )

        else:
            raise ValueError(
                f"Unsupported model: {model_name}. "
                f"Supported: openai (gpt-4o, gpt-4o-mini), claude, deepseek"
            )

    @staticmethod
    def create_primary(config: Optional[Config] = None) -> GenerationClient:
        """
        Create a generation client using the primary model from config.

        Args:
            config: Optional configuration object

        Returns:
            GenerationClient for the primary model
        """
        if config is None:
            config = get_config()

        logger.info(f"Creating primary generation client: {config.model.primary}")
        return GenerationClientFactory.create(config.model.primary, config)

    @staticmethod
    def create_fallback(config: Optional[Config] = None) -> GenerationClient:
        """
        Create a generation client using the fallback model from config.

        Args:
            config: Optional configuration object

        Returns:
            GenerationClient for the fallback model
        """
        if config is None:
            config = get_config()

        logger.info(f"Creating fallback generation client: {config.model.fallback}")
        return GenerationClientFactory.create(config.model.fallback, config)
