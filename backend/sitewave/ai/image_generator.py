import asyncio
import logging
from typing import Any

from sitewave.ai.artifacts import GeneratedImage, ImageGenerationParams
from sitewave.ai.base import AIService
from sitewave.ai.errors import AIServiceError
from sitewave.ai.llm_client import LLMClient
from sitewave.ai.prompts.image import extract_xml_tag, is_xml_prompt

logger = logging.getLogger(__name__)

API_MODELS = {"dalle-3": "dall-e-3", "gpt-image-1": "gpt-image-1"}

VALID_PARAMS = {
    "dalle-3": {
        "sizes": ("1024x1024", "1792x1024", "1024x1792"),
        "qualities": ("standard", "hd"),
    },
    "gpt-image-1": {
        "sizes": ("1024x1024", "1536x1024", "1024x1536"),
        "qualities": ("low", "medium", "high"),
    },
}

COST_PER_IMAGE = {
    "dalle-3": {"standard": 0.04, "hd": 0.08},
    "gpt-image-1": {"low": 0.02, "medium": 0.04, "high": 0.08},
}

STYLE_GUIDES = {
    "photorealistic": "Create a highly realistic, professional photograph",
    "digital_art": "Create a modern digital artwork with clean lines and vivid colors",
    "illustration": "Create a detailed illustration with artistic flair",
    "minimalist": "Create a clean, minimalist design with simple elements",
    "abstract": "Create an abstract artistic interpretation",
    "corporate": "Create a professional, business-appropriate image",
    "modern": "Create a contemporary, stylish image with modern aesthetics",
    "artistic": "Create an expressive, creative artistic piece",
    "natural": "Create a natural, organic-looking image",
}

FEATURED_IMAGE_SUFFIX = (
    "Ensure the image is suitable for use as a blog post featured image, "
    "with no text or typography overlays."
)
DEFAULT_STYLE_SUFFIX = (
    "Create a professional image suitable for use as a blog post featured image, "
    "with no text or typography overlays."
)
XML_SECTIONS = (
    ("goal", ""),
    ("description", ""),
    ("vibe", "Style: "),
    ("mood", "Mood: "),
    ("medium", "Medium: "),
    ("colorPalette", "Colors: "),
    ("layout", "Layout: "),
    ("focus", "Focus: "),
    ("avoid", "Avoid: "),
)
MAX_BATCH = 10


class ImageGenerator(AIService):
    """Featured image generation against the OpenAI image endpoint."""

    default_model = "dall-e-3"

    def _client(self, model: str) -> LLMClient:
        return self.model_manager.get_client(API_MODELS[model])

    @staticmethod
    def validate_params(params: ImageGenerationParams) -> None:
        valid = VALID_PARAMS[params.model]
        if params.size not in valid["sizes"] or params.quality not in valid["qualities"]:
            raise ValueError(
                f"Invalid parameters for model {params.model}. "
                f"Valid sizes: {', '.join(valid['sizes'])}. "
                f"Valid qualities: {', '.join(valid['qualities'])}"
            )
        if params.seed is not None and params.seed < 0:
            raise ValueError("Seed must be a non-negative integer")

    @staticmethod
    def is_xml_prompt(prompt: str) -> bool:
        return is_xml_prompt(prompt)

    @staticmethod
    def process_xml_prompt(xml_prompt: str) -> str:
        parts = []
        for tag, label in XML_SECTIONS:
            value = extract_xml_tag(xml_prompt, tag)
            if value:
                parts.append(f"{label}{value}")
        return ". ".join(parts) + ". Ensure no text or typography overlays in the image."

    def build_styled_prompt(self, base_prompt: str, style: str | None = None) -> str:
        if self.is_xml_prompt(base_prompt):
            return self.process_xml_prompt(base_prompt)
        guide = STYLE_GUIDES.get(style or "")
        if not guide:
            return f"{base_prompt}. {DEFAULT_STYLE_SUFFIX}"
        return f"{guide}. {base_prompt}. {FEATURED_IMAGE_SUFFIX}"

    async def _request(self, prompt: str, params: ImageGenerationParams, n: int = 1) -> list[Any]:
        request: dict[str, Any] = {"size": params.size, "quality": params.quality, "n": n}
        if params.model == "dalle-3":
            request["n"] = 1
            request["response_format"] = "b64_json"
            if params.dalle_style:
                request["style"] = params.dalle_style
        data = await self._client(params.model).generate_images(prompt, **request)
        if not data:
            raise ValueError("No image data returned from OpenAI")
        return data

    @staticmethod
    def _to_image(
        item: Any, prompt: str, params: ImageGenerationParams, xml_prompt: str | None = None
    ) -> GeneratedImage:
        return GeneratedImage(
            url=getattr(item, "url", None) or "",
            base64=getattr(item, "b64_json", None) or "",
            size=params.size,
            quality=params.quality,
            model=params.model,
            prompt=prompt,
            revised_prompt=getattr(item, "revised_prompt", None) or prompt,
            seed=params.seed,
            xml_prompt=xml_prompt,
        )

    async def generate_image(self, prompt: str, params: ImageGenerationParams) -> GeneratedImage:
        try:
            self.validate_params(params)
            styled_prompt = self.build_styled_prompt(prompt, params.style)
            data = await self._request(styled_prompt, params)
            return self._to_image(data[0], styled_prompt, params)
        except Exception as exc:
            logger.error("Image generation failed for model %s: %s", params.model, exc)
            raise AIServiceError(f"Image generation failed: {exc}") from exc

    async def generate_image_from_xml(
        self, xml_prompt: str, params: ImageGenerationParams
    ) -> GeneratedImage:
        """Send an XML prompt as-is, keeping it on the result for reference."""
        if not self.is_xml_prompt(xml_prompt):
            logger.warning("Prompt is not XML-structured, using regular generation")
            return await self.generate_image(xml_prompt, params)
        try:
            self.validate_params(params)
            data = await self._request(xml_prompt, params)
            return self._to_image(data[0], xml_prompt, params, xml_prompt=xml_prompt)
        except Exception as exc:
            logger.error("XML image generation failed: %s", exc)
            raise AIServiceError(f"Image generation failed: {exc}") from exc

    async def generate_multiple_images(
        self, prompt: str, params: ImageGenerationParams, count: int
    ) -> list[GeneratedImage]:
        if params.model == "gpt-image-1" and count <= MAX_BATCH:
            try:
                self.validate_params(params)
                styled_prompt = self.build_styled_prompt(prompt, params.style)
                data = await self._request(styled_prompt, params, n=count)
                return [self._to_image(item, styled_prompt, params) for item in data]
            except Exception as exc:
                logger.error("Batch image generation failed: %s", exc)
                raise AIServiceError(f"Image generation failed: {exc}") from exc
        return list(
            await asyncio.gather(*(self.generate_image(prompt, params) for _ in range(count)))
        )

    @staticmethod
    def get_estimated_cost(params: ImageGenerationParams, count: int = 1) -> float:
        per_image = COST_PER_IMAGE[params.model].get(params.quality, 0.04)
        return round(per_image * count, 4)
