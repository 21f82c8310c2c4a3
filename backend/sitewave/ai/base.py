from sitewave.ai.errors import AIServiceError
from sitewave.ai.llm_client import LLMClient
from sitewave.ai.model_manager import ModelManager


class AIService:
    """Base class for the content and image services."""

    default_model: str | None = None

    def __init__(self, model_name: str | None = None, model_manager: ModelManager | None = None):
        self.model_manager = model_manager or ModelManager()
        try:
            self.llm: LLMClient = self.model_manager.get_client(model_name or self.default_model)
        except ValueError as exc:
            raise AIServiceError(str(exc), status_code=503) from exc

    @property
    def model_name(self) -> str:
        return self.llm.model_name
