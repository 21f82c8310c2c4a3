import asyncio
import logging

from sitewave.ai.artifacts import (
    BlogContent,
    ImagePromptSuggestion,
    PromptOptions,
    UserImageParameters,
)
from sitewave.ai.base import AIService
from sitewave.ai.errors import AIServiceError
from sitewave.ai.prompts.image import (
    IMAGE_PROMPT_SYSTEM_PROMPT,
    extract_xml_tag,
    is_xml_prompt,
    legacy_image_prompt,
    parameterized_image_prompt,
    refine_image_prompt,
)
from sitewave.ai.transport import execute_with_retry

logger = logging.getLogger(__name__)

DISPLAY_FALLBACK = "AI-generated image prompt"


def format_enum_value(value: str) -> str:
    """``realistic_photo`` -> ``Realistic Photo``"""
    return " ".join(word.capitalize() for word in value.split("_"))


def format_user_parameters(params: UserImageParameters) -> str:
    lines = [
        f"**Image Style:** {format_enum_value(params.image_style)}",
        f"**Mood/Tone:** {format_enum_value(params.mood)}",
        f"**Visual Aesthetic:** {format_enum_value(params.visual_aesthetic)}",
        f"**Color Palette:** {format_enum_value(params.color_palette)}",
        f"**Aspect Ratio:** {params.aspect_ratio}",
        f"**Focus Level:** {format_enum_value(params.focus_level)}",
    ]
    if params.scene_description:
        lines.append(f"**Scene Description:** {params.scene_description}")
    if params.main_objects:
        lines.append(f"**Main Objects:** {params.main_objects}")
    if params.text_overlay_area_needed:
        lines.append("**Text Overlay Area:** Required - leave space for text overlay")
    if params.lighting_style:
        lines.append(f"**Lighting Style:** {format_enum_value(params.lighting_style)}")
    if params.camera_angle:
        lines.append(f"**Camera Angle:** {format_enum_value(params.camera_angle)}")
    if params.artist_influence:
        lines.append(f"**Artist Influence:** {params.artist_influence}")
    if params.color_palette == "brand_specific" and params.brand_colors:
        lines.append(f"**Brand Colors:** {', '.join(params.brand_colors)}")
    return "\n".join(lines)


class ImagePromptGenerator(AIService):
    """Turns blog content into XML-structured featured image prompts."""

    default_model = "gpt-4.1-mini"

    async def _suggest(self, prompt: str, temperature: float = 0.7) -> ImagePromptSuggestion:
        try:
            return await execute_with_retry(
                lambda: self.llm.generate_structured(
                    IMAGE_PROMPT_SYSTEM_PROMPT,
                    prompt,
                    ImagePromptSuggestion,
                    temperature=temperature,
                ),
                context="image prompt",
            )
        except Exception as exc:
            raise AIServiceError(f"Failed to generate image prompt: {exc}") from exc

    async def generate_prompt(
        self,
        blog_content: BlogContent,
        user_parameters: UserImageParameters | None = None,
        options: PromptOptions | None = None,
        variation_index: int | None = None,
    ) -> ImagePromptSuggestion:
        params = user_parameters or UserImageParameters()
        options = options or PromptOptions()
        prompt = parameterized_image_prompt(
            title=blog_content.title,
            content=blog_content.content,
            parameters_description=format_user_parameters(params),
            excerpt=blog_content.excerpt,
            category=blog_content.category,
            tags=blog_content.tags,
            target_audience=options.target_audience,
            brand_guidelines=options.brand_guidelines,
            variation_index=variation_index,
        )
        suggestion = await self._suggest(prompt)
        logger.info(
            "Generated image prompt for '%s' (style=%s, mood=%s)",
            blog_content.title,
            suggestion.style,
            suggestion.mood,
        )
        return suggestion

    async def generate_prompt_variations(
        self,
        blog_content: BlogContent,
        user_parameters: UserImageParameters | None = None,
        count: int = 3,
        options: PromptOptions | None = None,
    ) -> list[ImagePromptSuggestion]:
        return list(
            await asyncio.gather(
                *(
                    self.generate_prompt(blog_content, user_parameters, options, index)
                    for index in range(count)
                )
            )
        )

    async def generate_prompt_legacy(
        self, blog_content: BlogContent, options: PromptOptions | None = None
    ) -> ImagePromptSuggestion:
        """Prompt without user parameters, written by ``gpt-4o``."""
        options = options or PromptOptions()
        prompt = legacy_image_prompt(
            title=blog_content.title,
            content=blog_content.content,
            excerpt=blog_content.excerpt,
            category=blog_content.category,
            tags=blog_content.tags,
            preferred_style=options.preferred_style,
            target_audience=options.target_audience,
            brand_guidelines=options.brand_guidelines,
        )
        legacy = ImagePromptGenerator(model_name="gpt-4o", model_manager=self.model_manager)
        return await legacy._suggest(prompt)

    async def refine_prompt(
        self, original_prompt: str, blog_content: BlogContent, feedback: str
    ) -> str:
        prompt = refine_image_prompt(
            original_prompt, blog_content.title, blog_content.content, feedback
        )
        suggestion = await self._suggest(prompt, temperature=0.6)
        return suggestion.prompt

    @staticmethod
    def extract_display_prompt(xml_prompt: str) -> str:
        """Short human-readable summary of an XML prompt."""
        if not xml_prompt.strip().startswith("<promptTemplate>"):
            return xml_prompt
        sections = []
        for tag, label in (
            ("goal", ""),
            ("description", ""),
            ("vibe", "Style: "),
            ("mood", "Mood: "),
            ("colorPalette", "Colors: "),
        ):
            value = extract_xml_tag(xml_prompt, tag)
            if value:
                sections.append(f"{label}{value}")
        return ". ".join(sections) or DISPLAY_FALLBACK

    @staticmethod
    def is_xml_prompt(prompt: str) -> bool:
        return is_xml_prompt(prompt)
