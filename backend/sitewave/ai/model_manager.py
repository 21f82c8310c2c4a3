import logging
from typing import Literal

from pydantic import BaseModel

from sitewave.ai.llm_client import LLMClient
from sitewave.core.config import settings

logger = logging.getLogger(__name__)

Provider = Literal["anthropic", "openai"]


class ModelConfig(BaseModel):
    provider: Provider
    max_tokens: int | None = None
    temperature: float | None = None
    capabilities: list[str]
    cost_per_1k_tokens: float | None = None
    cost_per_image: float | None = None

    @property
    def cost(self) -> float:
        return self.cost_per_1k_tokens or self.cost_per_image or 0.0


_TEXT_FULL = ["text", "reasoning", "analysis", "code"]
_TEXT_QUICK = ["text", "quick-responses"]

MODEL_CONFIG: dict[str, ModelConfig] = {
    "claude-sonnet-4-20250514": ModelConfig(
        provider="anthropic", max_tokens=8192, temperature=0.7,
        capabilities=_TEXT_FULL, cost_per_1k_tokens=0.003,
    ),
    "claude-3-5-sonnet-20241022": ModelConfig(
        provider="anthropic", max_tokens=8192, temperature=0.7,
        capabilities=_TEXT_FULL, cost_per_1k_tokens=0.003,
    ),
    "claude-3-haiku-20240307": ModelConfig(
        provider="anthropic", max_tokens=4096, temperature=0.7,
        capabilities=_TEXT_QUICK, cost_per_1k_tokens=0.00025,
    ),
    "gpt-4o": ModelConfig(
        provider="openai", max_tokens=4096, temperature=0.7,
        capabilities=_TEXT_FULL, cost_per_1k_tokens=0.005,
    ),
    "gpt-4.1": ModelConfig(
        provider="openai", max_tokens=4096, temperature=0.7,
        capabilities=_TEXT_FULL, cost_per_1k_tokens=0.002,
    ),
    "gpt-4.1-mini": ModelConfig(
        provider="openai", max_tokens=4096, temperature=0.7,
        capabilities=_TEXT_QUICK, cost_per_1k_tokens=0.0004,
    ),
    "dall-e-3": ModelConfig(
        provider="openai", capabilities=["image-generation"], cost_per_image=0.04
    ),
    "gpt-image-1": ModelConfig(
        provider="openai", capabilities=["image-generation"], cost_per_image=0.04
    ),
    "text-embedding-3-small": ModelConfig(
        provider="openai", capabilities=["embeddings"], cost_per_1k_tokens=0.00002
    ),
}


class ModelManager:
    """Resolves model names to configured clients for their provider."""

    def __init__(self, default_model: str | None = None, fallback_model: str | None = None):
        self.default_model = default_model or settings.AI_DEFAULT_MODEL
        self.fallback_model = fallback_model or settings.AI_FALLBACK_MODEL

    @staticmethod
    def _provider_credentials(provider: Provider) -> tuple[str | None, str | None]:
        if provider == "anthropic":
            return settings.ANTHROPIC_BASE_URL, settings.ANTHROPIC_API_KEY
        return settings.OPENAI_BASE_URL, settings.OPENAI_API_KEY

    def get_client(self, model_name: str | None = None) -> LLMClient:
        return self._resolve_client(model_name or self.default_model, attempted=set())

    def _resolve_client(self, model: str, attempted: set[str]) -> LLMClient:
        if model in attempted:
            raise ValueError(f"Failed to initialize any model. Last attempted: {model}")
        attempted.add(model)
        config = MODEL_CONFIG.get(model)
        if config is None:
            logger.warning(
                "Unknown model: %s, falling back to default: %s", model, self.default_model
            )
            if model == self.default_model:
                raise ValueError(f"Configuration not found for model: {model}")
            return self._resolve_client(self.default_model, attempted)

        base_url, api_key = self._provider_credentials(config.provider)
        if not api_key:
            if model != self.fallback_model:
                logger.info(
                    "No API key for %s provider of %s, falling back to: %s",
                    config.provider,
                    model,
                    self.fallback_model,
                )
                return self._resolve_client(self.fallback_model, attempted)
            raise ValueError(f"Failed to initialize any model. Last attempted: {model}")
        return LLMClient(model_name=model, base_url=base_url, api_key=api_key)

    def get_model_config(self, model_name: str | None = None) -> ModelConfig:
        model = model_name or self.default_model
        config = MODEL_CONFIG.get(model)
        if config is None:
            raise ValueError(f"Configuration not found for model: {model}")
        return config

    def has_capability(self, capability: str, model_name: str | None = None) -> bool:
        return capability in self.get_model_config(model_name).capabilities

    def get_models_by_provider(self, provider: Provider) -> list[str]:
        return [name for name, config in MODEL_CONFIG.items() if config.provider == provider]

    def get_models_by_capability(self, capability: str) -> list[str]:
        return [
            name for name, config in MODEL_CONFIG.items() if capability in config.capabilities
        ]

    def get_cheapest_model(self, capability: str) -> str:
        models = self.get_models_by_capability(capability)
        if not models:
            raise ValueError(f"No models found with capability: {capability}")
        return min(models, key=lambda name: MODEL_CONFIG[name].cost)

    def validate_environment(self) -> dict:
        missing = [
            key
            for key, value in (
                ("ANTHROPIC_API_KEY", settings.ANTHROPIC_API_KEY),
                ("OPENAI_API_KEY", settings.OPENAI_API_KEY),
            )
            if not value
        ]
        return {"valid": not missing, "missing": missing}
