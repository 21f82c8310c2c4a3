import logging
import re
import time

from sitewave.ai.artifacts import (
    ContentGenerationRequest,
    ContentGenerationResult,
    EmailTemplate,
    GeneratedBlogPost,
    GeneratedService,
    ServiceDetails,
)
from sitewave.ai.base import AIService
from sitewave.ai.errors import AIServiceError
from sitewave.ai.prompts.content import (
    CONTENT_SYSTEM_PROMPT,
    blog_post_prompt,
    email_template_prompt,
    marketing_copy_prompt,
    page_content_prompt,
    service_description_prompt,
    service_prompt,
)
from sitewave.ai.transport import execute_with_retry
from sitewave.utils import count_words, slugify

logger = logging.getLogger(__name__)

SUBJECT_RE = re.compile(r"^\s*Subject:\s*(.+)$", re.IGNORECASE | re.MULTILINE)


def generate_slug(title: str) -> str:
    return slugify(title, max_length=50)


def parse_email_template(text: str) -> EmailTemplate:
    """Split a leading ``Subject:`` line off the generated email."""
    match = SUBJECT_RE.search(text)
    if not match:
        return EmailTemplate(body=text.strip())
    body = (text[: match.start()] + text[match.end() :]).strip()
    return EmailTemplate(subject=match.group(1).strip(), body=body)


class ContentCreator(AIService):
    """Generates blog posts, service copy, pages, emails and marketing copy."""

    async def _structured(self, prompt: str, schema, context: str, temperature: float = 0.7):
        try:
            return await execute_with_retry(
                lambda: self.llm.generate_structured(
                    CONTENT_SYSTEM_PROMPT, prompt, schema, temperature=temperature
                ),
                context=context,
            )
        except Exception as exc:
            raise AIServiceError(f"Failed to generate {context}: {exc}") from exc

    async def _text(self, prompt: str, context: str, temperature: float = 0.7) -> str:
        try:
            return await execute_with_retry(
                lambda: self.llm.generate_text(
                    CONTENT_SYSTEM_PROMPT, prompt, temperature=temperature
                ),
                context=context,
            )
        except Exception as exc:
            raise AIServiceError(f"Failed to generate {context}: {exc}") from exc

    async def generate_blog_post(
        self,
        topic: str,
        keywords: list[str],
        tone: str = "professional",
        length: str = "medium",
        audience: str | None = None,
    ) -> GeneratedBlogPost:
        prompt = blog_post_prompt(topic, keywords, tone, length, audience)
        post = await self._structured(prompt, GeneratedBlogPost, "blog post")
        if not post.slug:
            post.slug = generate_slug(post.title)
        return post

    async def generate_service_description(
        self,
        service: ServiceDetails,
        tone: str = "professional",
        length: str = "medium",
        include_call_to_action: bool = False,
    ) -> str:
        prompt = service_description_prompt(
            name=service.name,
            features=service.features,
            benefits=service.benefits,
            target_audience=service.target_audience,
            tone=tone,
            length=length,
            industry=service.industry,
            competitive_advantage=service.competitive_advantage,
            include_call_to_action=include_call_to_action,
        )
        return await self._text(prompt, "service description")

    async def generate_service(
        self,
        service: ServiceDetails,
        tone: str = "professional",
        length: str = "medium",
        include_call_to_action: bool = False,
        include_pricing_tiers: bool = True,
        include_process_steps: bool = True,
        include_faq: bool = True,
        include_testimonials: bool = False,
    ) -> GeneratedService:
        prompt = service_prompt(
            name=service.name,
            features=service.features,
            benefits=service.benefits,
            target_audience=service.target_audience,
            tone=tone,
            length=length,
            industry=service.industry,
            competitive_advantage=service.competitive_advantage,
            include_call_to_action=include_call_to_action,
            include_pricing_tiers=include_pricing_tiers,
            include_process_steps=include_process_steps,
            include_faq=include_faq,
            include_testimonials=include_testimonials,
        )
        generated = await self._structured(prompt, GeneratedService, "service")
        if not generated.slug:
            generated.slug = generate_slug(generated.title)
        return generated

    async def generate_page_content(
        self,
        page_type: str,
        topic: str,
        keywords: list[str],
        tone: str = "professional",
        custom_instructions: str | None = None,
    ) -> str:
        prompt = page_content_prompt(page_type, topic, keywords, tone, custom_instructions)
        return await self._text(prompt, "page content")

    async def generate_email_template(
        self, purpose: str, audience: str, tone: str = "professional", include_subject: bool = True
    ) -> EmailTemplate:
        prompt = email_template_prompt(purpose, audience, tone, include_subject)
        return parse_email_template(await self._text(prompt, "email template"))

    async def generate_marketing_copy(
        self,
        product_or_service: str,
        copy_type: str,
        target_audience: str,
        tone: str = "persuasive",
        key_benefits: list[str] | None = None,
    ) -> str:
        prompt = marketing_copy_prompt(
            product_or_service, copy_type, target_audience, tone, key_benefits
        )
        return await self._text(prompt, "marketing copy", temperature=0.8)

    async def generate_content(self, request: ContentGenerationRequest) -> ContentGenerationResult:
        """
        Dispatch ``request`` to the generator for its type and report word
        count, elapsed milliseconds and token usage alongside the content.
        """
        started = time.perf_counter()
        audience = request.audience or "general audience"

        if request.type == "blog-post":
            post = await self.generate_blog_post(
                request.topic, request.keywords, request.tone, request.length, request.audience
            )
            content: GeneratedBlogPost | str = post
            word_count = count_words(post.content)
        else:
            if request.type == "service-description":
                if request.service is None:
                    raise AIServiceError(
                        "Service details are required for service descriptions", status_code=400
                    )
                text = await self.generate_service_description(
                    request.service, request.tone, request.length, request.include_call_to_action
                )
            elif request.type == "page-content":
                text = await self.generate_page_content(
                    request.page_type,
                    request.topic,
                    request.keywords,
                    request.tone,
                    request.custom_instructions,
                )
            elif request.type == "email-template":
                email = await self.generate_email_template(
                    request.topic, audience, request.tone, request.include_subject
                )
                text = f"Subject: {email.subject}\n\n{email.body}" if email.subject else email.body
            else:
                text = await self.generate_marketing_copy(
                    request.topic, request.copy_type, audience, request.tone, request.key_benefits
                )
            content = text
            word_count = count_words(text)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Generated %s with %s in %sms (%s words)",
            request.type,
            self.model_name,
            elapsed_ms,
            word_count,
        )
        return ContentGenerationResult(
            content=content,
            word_count=word_count,
            generation_time=elapsed_ms,
            model=self.model_name,
            tokens_used=self.llm.tokens_used,
        )
