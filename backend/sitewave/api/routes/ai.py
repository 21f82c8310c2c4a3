import asyncio
import json
import logging
import time
import uuid
from typing import Any, Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from sse_starlette.sse import EventSourceResponse

from sitewave import crud
from sitewave.ai.artifacts import (
    BlogContent,
    ContentAnalysis,
    ContentGenerationRequest,
    ContentGenerationResult,
    GeneratedImage,
    ImageGenerationParams,
    ImagePromptSuggestion,
    PromptOptions,
    ReadingLevel,
    RefinementOptions,
    RefinementResult,
    UserImageParameters,
)
from sitewave.ai.content_creator import ContentCreator
from sitewave.ai.content_refiner import ContentRefiner
from sitewave.ai.errors import AIServiceError
from sitewave.ai.image_generator import ImageGenerator
from sitewave.ai.image_prompt_generator import ImagePromptGenerator
from sitewave.ai.model_manager import MODEL_CONFIG, ModelConfig, ModelManager
from sitewave.ai.prompts.content import (
    CONTENT_SYSTEM_PROMPT,
    email_template_prompt,
    marketing_copy_prompt,
    page_content_prompt,
    service_description_prompt,
)
from sitewave.api.deps import EditorUser, SessionDep
from sitewave.models import (
    ApiResponse,
    Author,
    Category,
    PostStatus,
    ServiceCategory,
    ServiceCreate,
    ServiceFAQ,
    ServicePricingTier,
    ServiceProcessStep,
    ServiceTestimonial,
)

router = APIRouter()
image_router = APIRouter()
logger = logging.getLogger(__name__)

MAX_CONCURRENT_VARIANTS = 3


# Request and response bodies


class RefineRequest(BaseModel):
    content: str = Field(min_length=1)
    action: Literal["refine", "analyze"] = "refine"
    options: RefinementOptions = Field(default_factory=RefinementOptions)
    target_audience: str | None = None
    target_keywords: list[str] = []
    desired_reading_level: ReadingLevel | None = None


class BlogPostSaveRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    excerpt: str
    tags: list[str] = []
    meta_description: str
    meta_title: str | None = None
    meta_keywords: str | None = None
    slug: str | None = None
    category: str | None = None
    author_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    status: PostStatus = PostStatus.draft
    featured_image: str | None = None


class ServiceSaveRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str | None = None
    short_description: str = Field(min_length=1)
    full_description: str = Field(min_length=1)
    timeline: str = Field(min_length=1, max_length=100)
    category: ServiceCategory
    featured_image: str = ""
    features: list[str] = []
    benefits: list[str] = []
    deliverables: list[str] = []
    technologies: list[str] = []
    process: list[ServiceProcessStep] = []
    pricing: list[ServicePricingTier] = []
    faq: list[ServiceFAQ] = []
    testimonials: list[ServiceTestimonial] = []


class SavedContent(BaseModel):
    id: uuid.UUID
    slug: str


class ModelsOverview(BaseModel):
    default_model: str
    fallback_model: str
    models: dict[str, ModelConfig]
    environment: dict[str, Any]


class ImagePromptRequest(BaseModel):
    blog_content: BlogContent
    user_parameters: UserImageParameters | None = None
    options: PromptOptions | None = None


class ImageGenerationRequest(BaseModel):
    prompt: str | None = None
    xml_prompt: str | None = None
    params: ImageGenerationParams = Field(default_factory=ImageGenerationParams)


class ImageGenerationResponse(BaseModel):
    image: GeneratedImage
    estimated_cost: float
    processing_time_ms: int


class ImageVariantsRequest(BaseModel):
    blog_content: BlogContent
    count: int = 3


class ImageVariant(BaseModel):
    id: str
    style: str
    style_label: str
    prompt: str = ""
    image: GeneratedImage | None = None
    error: str | None = None


class ImageVariantsResponse(BaseModel):
    variants: list[ImageVariant]
    total_generation_time: int
    success_count: int
    error_count: int


STYLE_VARIANTS: list[dict[str, Any]] = [
    {
        "id": "modern-professional",
        "style": "modern",
        "style_label": "Modern Professional",
        "params": UserImageParameters(
            image_style="realistic_photo",
            mood="professional",
            visual_aesthetic="modern_contemporary",
            color_palette="cool_colors",
            focus_level="medium_shot",
        ),
    },
    {
        "id": "creative-artistic",
        "style": "artistic",
        "style_label": "Creative Artistic",
        "params": UserImageParameters(
            image_style="flat_vector",
            mood="energetic",
            visual_aesthetic="futuristic",
            color_palette="warm_colors",
            focus_level="wide_scene",
        ),
    },
    {
        "id": "minimalist-clean",
        "style": "minimalist",
        "style_label": "Minimalist Clean",
        "params": UserImageParameters(
            image_style="minimalist_illustration",
            mood="calm",
            visual_aesthetic="minimalist",
            color_palette="pastel_tones",
            focus_level="single_subject",
        ),
    },
    {
        "id": "natural-warm",
        "style": "natural",
        "style_label": "Natural Warm",
        "params": UserImageParameters(
            image_style="watercolor_painting",
            mood="warm",
            visual_aesthetic="organic_hand_drawn",
            color_palette="earth_tones",
            focus_level="medium_shot",
        ),
    },
]


# Content


@router.post("/content/generate", response_model=ApiResponse[ContentGenerationResult])
async def generate_content(
    request: ContentGenerationRequest, current_user: EditorUser
) -> Any:
    result = await ContentCreator(model_name=request.model).generate_content(request)
    return ApiResponse(data=result, message="Content generated successfully")


@router.post(
    "/content/refine", response_model=ApiResponse[RefinementResult | ContentAnalysis]
)
async def refine_content(request: RefineRequest, current_user: EditorUser) -> Any:
    refiner = ContentRefiner()
    if request.action == "analyze":
        analysis = await refiner.analyze_content(
            request.content,
            request.target_audience,
            request.target_keywords,
            request.desired_reading_level,
        )
        return ApiResponse(data=analysis, message="Content analyzed successfully")

    options = request.options
    if not (options.improvements or options.seo_keywords or options.readability_level):
        raise HTTPException(
            status_code=400,
            detail="At least one of improvements, seo_keywords or readability_level is required",
        )
    result = await refiner.refine_content(request.content, options)
    return ApiResponse(data=result, message="Content refined successfully")


def _stream_prompt(request: ContentGenerationRequest) -> str:
    audience = request.audience or "general audience"
    if request.type == "service-description":
        if request.service is None:
            raise HTTPException(
                status_code=400,
                detail="Service information is required for service description",
            )
        service = request.service
        return service_description_prompt(
            name=service.name,
            features=service.features,
            benefits=service.benefits,
            target_audience=service.target_audience,
            tone=request.tone,
            length=request.length,
            industry=service.industry,
            competitive_advantage=service.competitive_advantage,
            include_call_to_action=request.include_call_to_action,
        )
    if request.type == "page-content":
        return page_content_prompt(
            request.page_type,
            request.topic,
            request.keywords,
            request.tone,
            request.custom_instructions,
        )
    if request.type == "email-template":
        return email_template_prompt(request.topic, audience, request.tone, request.include_subject)
    if request.type == "marketing-copy":
        return marketing_copy_prompt(
            request.topic, request.copy_type, audience, request.tone, request.key_benefits
        )
    raise HTTPException(
        status_code=400, detail="Streaming is only available for non-blog content types"
    )


@router.post("/content/stream-text")
async def stream_text(request: ContentGenerationRequest, current_user: EditorUser):
    """Stream generated text for non-blog content as server-sent events."""
    prompt = _stream_prompt(request)
    temperature = 0.8 if request.type == "marketing-copy" else 0.7
    llm = ContentCreator(model_name=request.model).llm

    async def event_stream():
        try:
            async for delta in llm.stream_text(
                CONTENT_SYSTEM_PROMPT, prompt, temperature=temperature
            ):
                yield json.dumps({"type": "delta", "content": delta})
            yield json.dumps({"type": "done"})
        except Exception as exc:
            logger.error("Stream text generation failed: %s", exc)
            yield json.dumps({"type": "error", "message": str(exc)})

    return EventSourceResponse(event_stream())


@router.post("/content/stream-object")
async def stream_object(request: ContentGenerationRequest, current_user: EditorUser):
    """Generate a structured blog post or service and send it as server-sent events."""
    if request.type not in ("blog-post", "service-description"):
        raise HTTPException(
            status_code=400,
            detail="Structured generation supports only blog-post and service-description",
        )
    if request.type == "service-description" and request.service is None:
        raise HTTPException(
            status_code=400, detail="Service details are required for service generation"
        )
    creator = ContentCreator(model_name=request.model)

    async def event_stream():
        try:
            if request.type == "blog-post":
                generated = await creator.generate_blog_post(
                    request.topic, request.keywords, request.tone, request.length, request.audience
                )
            else:
                generated = await creator.generate_service(
                    request.service,
                    request.tone,
                    request.length,
                    include_call_to_action=request.include_call_to_action,
                    include_pricing_tiers=request.include_pricing_tiers,
                    include_process_steps=request.include_process_steps,
                    include_faq=request.include_faq,
                    include_testimonials=request.include_testimonials,
                )
            yield json.dumps({"type": "object", "object": generated.model_dump(mode="json")})
            yield json.dumps({"type": "done"})
        except Exception as exc:
            logger.error("Stream object generation failed: %s", exc)
            yield json.dumps({"type": "error", "message": str(exc)})

    return EventSourceResponse(event_stream())


@router.post("/content/save-blog-post", response_model=ApiResponse[SavedContent], status_code=201)
def save_blog_post(
    session: SessionDep, current_user: EditorUser, post_in: BlogPostSaveRequest
) -> Any:
    if post_in.author_id and not session.get(Author, post_in.author_id):
        raise HTTPException(status_code=400, detail="Author not found")
    category_id = post_in.category_id
    if category_id and not session.get(Category, category_id):
        raise HTTPException(status_code=400, detail="Category not found")
    if category_id is None and post_in.category:
        category_id = crud.find_or_create_category(session=session, name=post_in.category).id

    tags = crud.find_or_create_tags(session=session, names=post_in.tags)
    post_data = post_in.model_dump(exclude={"tags", "category", "category_id", "slug"})
    post_data["category_id"] = category_id
    post_data["slug"] = crud.generate_unique_slug(
        session=session, title=post_in.title, slug=post_in.slug
    )
    post = crud.create_blog_post(session=session, post_data=post_data, tags=tags)
    logger.info("Saved generated blog post %s as %s", post.slug, post.status.value)
    return ApiResponse(
        data=SavedContent(id=post.id, slug=post.slug), message="Blog post saved successfully"
    )


@router.post("/content/save-service", response_model=ApiResponse[SavedContent], status_code=201)
def save_service(
    session: SessionDep, current_user: EditorUser, service_in: ServiceSaveRequest
) -> Any:
    slug = crud.generate_unique_service_slug(
        session=session, title=service_in.title, slug=service_in.slug
    )
    if not slug:
        raise HTTPException(status_code=400, detail="Could not derive a slug from the title")

    # Only one testimonial is kept per service
    service_data = service_in.model_dump(exclude={"slug", "testimonials"})
    service_data["slug"] = slug
    service_data["status"] = PostStatus.draft
    if service_in.testimonials:
        service_data["testimonial"] = service_in.testimonials[0].model_dump()
    service = crud.create_service(
        session=session, service_in=ServiceCreate.model_validate(service_data)
    )
    logger.info("Saved generated service %s as draft", service.slug)
    return ApiResponse(
        data=SavedContent(id=service.id, slug=service.slug), message="Service saved successfully"
    )


@router.get("/models", response_model=ApiResponse[ModelsOverview])
def read_models(current_user: EditorUser) -> Any:
    manager = ModelManager()
    return ApiResponse(
        data=ModelsOverview(
            default_model=manager.default_model,
            fallback_model=manager.fallback_model,
            models=MODEL_CONFIG,
            environment=manager.validate_environment(),
        )
    )


# Featured images


@image_router.post("/generate-image-prompt", response_model=ApiResponse[ImagePromptSuggestion])
async def generate_image_prompt(request: ImagePromptRequest, current_user: EditorUser) -> Any:
    if not request.blog_content.title.strip() or not request.blog_content.content.strip():
        raise HTTPException(status_code=400, detail="Title and content are required")
    generator = ImagePromptGenerator()
    if request.user_parameters is not None:
        suggestion = await generator.generate_prompt(
            request.blog_content, request.user_parameters, request.options
        )
        return ApiResponse(data=suggestion, message="Enhanced image prompt generated successfully")
    suggestion = await generator.generate_prompt_legacy(request.blog_content, request.options)
    return ApiResponse(
        data=suggestion, message="Image prompt generated successfully (legacy mode)"
    )


@image_router.post("/generate-image", response_model=ApiResponse[ImageGenerationResponse])
async def generate_image(request: ImageGenerationRequest, current_user: EditorUser) -> Any:
    prompt = (request.xml_prompt or request.prompt or "").strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="A prompt or xml_prompt is required")
    try:
        ImageGenerator.validate_params(request.params)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    started = time.perf_counter()
    generator = ImageGenerator()
    if generator.is_xml_prompt(prompt):
        image = await generator.generate_image_from_xml(prompt, request.params)
    else:
        image = await generator.generate_image(prompt, request.params)
    return ApiResponse(
        data=ImageGenerationResponse(
            image=image,
            estimated_cost=generator.get_estimated_cost(request.params),
            processing_time_ms=int((time.perf_counter() - started) * 1000),
        ),
        message="Image generated successfully",
    )


@image_router.post(
    "/generate-image-variants", response_model=ApiResponse[ImageVariantsResponse]
)
async def generate_image_variants(
    request: ImageVariantsRequest, current_user: EditorUser
) -> Any:
    if request.count < 1 or request.count > len(STYLE_VARIANTS):
        raise HTTPException(
            status_code=400, detail=f"Count must be between 1 and {len(STYLE_VARIANTS)}"
        )
    if not request.blog_content.title.strip() or not request.blog_content.content.strip():
        raise HTTPException(status_code=400, detail="Title and content are required")

    started = time.perf_counter()
    prompt_generator = ImagePromptGenerator()
    image_generator = ImageGenerator()
    semaphore = asyncio.Semaphore(MAX_CONCURRENT_VARIANTS)

    async def build_variant(variant: dict[str, Any]) -> ImageVariant:
        result = ImageVariant(
            id=variant["id"], style=variant["style"], style_label=variant["style_label"]
        )
        async with semaphore:
            try:
                suggestion = await prompt_generator.generate_prompt(
                    request.blog_content, variant["params"]
                )
                result.prompt = suggestion.xml_prompt or suggestion.prompt
                params = ImageGenerationParams(
                    model="gpt-image-1",
                    style=variant["style"],
                    size="1536x1024",
                    quality="high",
                )
                result.image = await image_generator.generate_image_from_xml(
                    result.prompt, params
                )
            except AIServiceError as exc:
                logger.error("Failed to generate variant %s: %s", variant["id"], exc)
                result.error = str(exc)
        return result

    variants = await asyncio.gather(
        *(build_variant(variant) for variant in STYLE_VARIANTS[: request.count])
    )
    success_count = sum(1 for v in variants if v.image is not None and not v.error)
    return ApiResponse(
        data=ImageVariantsResponse(
            variants=list(variants),
            total_generation_time=int((time.perf_counter() - started) * 1000),
            success_count=success_count,
            error_count=sum(1 for v in variants if v.error),
        ),
        message=f"Generated {success_count} image variants successfully",
    )
