import logging

from sitewave.ai.artifacts import ContentAnalysis, RefinementOptions, RefinementResult
from sitewave.ai.base import AIService
from sitewave.ai.errors import AIServiceError
from sitewave.ai.prompts.refinement import (
    ANALYSIS_SYSTEM_PROMPT,
    REFINEMENT_SYSTEM_PROMPT,
    content_analysis_prompt,
    content_improvement_prompt,
    readability_enhancement_prompt,
    seo_optimization_prompt,
)
from sitewave.ai.transport import execute_with_retry

logger = logging.getLogger(__name__)


class ContentRefiner(AIService):
    """Improves, optimizes and audits existing content."""

    async def _rewrite(self, prompt: str, context: str, temperature: float = 0.7) -> str:
        try:
            return await execute_with_retry(
                lambda: self.llm.generate_text(
                    REFINEMENT_SYSTEM_PROMPT, prompt, temperature=temperature
                ),
                context=context,
            )
        except Exception as exc:
            raise AIServiceError(f"Failed to {context}: {exc}") from exc

    async def improve_content(
        self,
        content: str,
        improvements: list[str],
        tone: str | None = None,
        target_audience: str | None = None,
        maintain_structure: bool = False,
    ) -> str:
        prompt = content_improvement_prompt(
            content, improvements, tone, target_audience, maintain_structure
        )
        return await self._rewrite(prompt, "improve content")

    async def optimize_for_seo(
        self,
        content: str,
        target_keywords: list[str],
        meta_description_required: bool = False,
        target_audience: str | None = None,
        competitor_keywords: list[str] | None = None,
    ) -> str:
        prompt = seo_optimization_prompt(
            content,
            target_keywords,
            primary_keyword=target_keywords[0] if target_keywords else None,
            meta_description_required=meta_description_required,
            heading_optimization=True,
            target_audience=target_audience,
            competitor_keywords=competitor_keywords,
        )
        return await self._rewrite(prompt, "optimize content for SEO", temperature=0.5)

    async def enhance_readability(
        self,
        content: str,
        target_reading_level: str = "high-school",
        target_audience: str | None = None,
    ) -> str:
        prompt = readability_enhancement_prompt(
            content, target_reading_level, target_audience, maintain_technical_terms=True
        )
        return await self._rewrite(prompt, "enhance readability", temperature=0.5)

    async def refine_content(
        self, original_content: str, options: RefinementOptions
    ) -> RefinementResult:
        """Run improvement, then SEO, then readability, skipping unrequested steps."""
        content = original_content
        steps: list[str] = []

        if options.improvements:
            content = await self.improve_content(
                content,
                options.improvements,
                options.tone,
                options.target_audience,
                options.maintain_structure,
            )
            steps.append("Content improvement")

        if options.seo_keywords:
            content = await self.optimize_for_seo(
                content,
                options.seo_keywords,
                options.include_meta_description,
                options.target_audience,
            )
            steps.append("SEO optimization")

        if options.readability_level:
            content = await self.enhance_readability(
                content, options.readability_level, options.target_audience
            )
            steps.append("Readability enhancement")

        logger.info("Refined content with %s step(s): %s", len(steps), ", ".join(steps) or "none")
        return RefinementResult(final_content=content, refinement_steps=steps)

    async def analyze_content(
        self,
        content: str,
        target_audience: str | None = None,
        target_keywords: list[str] | None = None,
        desired_reading_level: str | None = None,
    ) -> ContentAnalysis:
        prompt = content_analysis_prompt(
            content, target_audience, target_keywords, desired_reading_level
        )
        try:
            return await execute_with_retry(
                lambda: self.llm.generate_structured(
                    ANALYSIS_SYSTEM_PROMPT, prompt, ContentAnalysis, temperature=0.3
                ),
                context="analyze content",
            )
        except Exception as exc:
            raise AIServiceError(f"Failed to analyze content: {exc}") from exc
