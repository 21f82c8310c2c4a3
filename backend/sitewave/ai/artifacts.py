from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from sitewave.models import (
    ServiceCategory,
    ServiceFAQ,
    ServicePricingTier,
    ServiceProcessStep,
    ServiceTestimonial,
    get_datetime_utc,
)

GenerationType = Literal[
    "blog-post", "service-description", "page-content", "email-template", "marketing-copy"
]
ContentTone = Literal[
    "professional", "casual", "technical", "friendly", "persuasive", "authoritative"
]
ContentLength = Literal["short", "medium", "long"]
CopyType = Literal["headline", "social-post", "ad-copy", "landing-page"]
ReadingLevel = Literal["elementary", "middle-school", "high-school", "college", "professional"]
PageType = Literal["homepage", "about", "contact", "landing", "product", "general"]


# Content generation


class GeneratedBlogPost(BaseModel):
    """Structured blog post returned by the content model."""

    title: str = Field(description="Main blog post title")
    content: str = Field(description="Full blog post body in markdown")
    excerpt: str = Field(description="Compelling introduction or summary")
    tags: list[str] = Field(description="5-8 relevant tags")
    meta_description: str = Field(description="SEO meta description, 150-160 characters")
    meta_title: str | None = Field(default=None, description="SEO meta title, 50-60 characters")
    meta_keywords: str | None = Field(
        default=None, description="8-12 comma-separated SEO keywords"
    )
    slug: str | None = Field(default=None, description="URL-friendly slug")
    category: str | None = Field(default=None, description="Suggested category name")


class GeneratedService(BaseModel):
    """Structured service offering returned by the content model."""

    title: str
    short_description: str = Field(description="Elevator pitch under 160 characters")
    full_description: str
    timeline: str = Field(description="Overall project timeline, e.g. '2-4 weeks'")
    category: ServiceCategory
    slug: str | None = None
    features: list[str]
    benefits: list[str]
    deliverables: list[str]
    technologies: list[str] = []
    process: list[ServiceProcessStep] = []
    pricing: list[ServicePricingTier] = []
    faq: list[ServiceFAQ] = []
    testimonials: list[ServiceTestimonial] = []
    target_audience: str
    competitive_advantage: str | None = None
    call_to_action: str | None = None
    meta_description: str | None = None
    meta_title: str | None = None
    related_services: list[str] = []


class ServiceDetails(BaseModel):
    name: str
    features: list[str] = []
    benefits: list[str] = []
    target_audience: str
    industry: str | None = None
    competitive_advantage: str | None = None


class ContentGenerationRequest(BaseModel):
    type: GenerationType
    topic: str = Field(min_length=1)
    keywords: list[str] = []
    tone: ContentTone = "professional"
    length: ContentLength = "medium"
    audience: str | None = None
    custom_instructions: str | None = None
    model: str | None = None

    service: ServiceDetails | None = None
    include_call_to_action: bool = False
    include_pricing_tiers: bool = True
    include_process_steps: bool = True
    include_faq: bool = True
    include_testimonials: bool = False

    page_type: PageType = "general"
    include_subject: bool = True
    copy_type: CopyType = "landing-page"
    key_benefits: list[str] = []


class ContentGenerationResult(BaseModel):
    content: GeneratedBlogPost | str
    word_count: int
    generation_time: int = Field(description="Milliseconds spent generating")
    model: str
    tokens_used: int = 0


class EmailTemplate(BaseModel):
    subject: str | None = None
    body: str


# Refinement


class RefinementOptions(BaseModel):
    improvements: list[str] = []
    seo_keywords: list[str] = []
    readability_level: ReadingLevel | None = None
    tone: str | None = None
    target_audience: str | None = None
    maintain_structure: bool = False
    include_meta_description: bool = False


class RefinementResult(BaseModel):
    final_content: str
    refinement_steps: list[str]


class ContentAnalysis(BaseModel):
    suggestions: list[str] = Field(description="5-10 specific, actionable improvement suggestions")
    estimated_reading_level: str = Field(
        description="Current reading level, e.g. 'High School', 'College', 'Professional'"
    )
    keyword_density: dict[str, float] | None = Field(
        default=None, description="Keyword density percentages for the target keywords"
    )
    improvement_priority: list[Literal["readability", "seo", "engagement", "structure"]] = Field(
        description="Areas to improve, most important first"
    )
    overall_score: float = Field(ge=0, le=100)
    readability_score: float = Field(ge=0, le=100)
    seo_score: float = Field(ge=0, le=100)
    engagement_score: float = Field(ge=0, le=100)


# Images

ImageModel = Literal["dalle-3", "gpt-image-1"]
ImageStyle = Literal[
    "photorealistic",
    "digital_art",
    "illustration",
    "minimalist",
    "abstract",
    "corporate",
    "modern",
    "artistic",
    "natural",
]


class BlogContent(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    excerpt: str | None = None
    tags: list[str] = []
    category: str | None = None


class UserImageParameters(BaseModel):
    image_style: Literal[
        "realistic_photo",
        "flat_vector",
        "3d_render",
        "watercolor_painting",
        "cartoon_comic",
        "minimalist_illustration",
        "abstract_conceptual",
        "hand_drawn_sketch",
    ] = "realistic_photo"
    mood: Literal[
        "professional",
        "playful",
        "calm",
        "energetic",
        "serious",
        "warm",
        "mysterious",
        "inspirational",
    ] = "professional"
    visual_aesthetic: Literal[
        "modern_contemporary",
        "futuristic",
        "retro",
        "vintage",
        "minimalist",
        "brutalist",
        "cyberpunk",
        "synthwave_vaporwave",
        "y2k",
        "organic_hand_drawn",
    ] = "modern_contemporary"
    color_palette: Literal[
        "pastel_tones",
        "bold_contrast",
        "earth_tones",
        "monochrome",
        "warm_colors",
        "cool_colors",
        "brand_specific",
    ] = "pastel_tones"
    aspect_ratio: Literal["1:1", "16:9", "4:5", "9:16"] = "16:9"
    focus_level: Literal["single_subject", "wide_scene", "medium_shot"] = "medium_shot"
    scene_description: str | None = None
    main_objects: str | None = None
    text_overlay_area_needed: bool = False
    lighting_style: Literal[
        "natural_light",
        "studio_light",
        "sunset_golden_hour",
        "nighttime",
        "soft_ambient",
        "harsh_contrast",
    ] | None = None
    camera_angle: Literal[
        "eye_level", "top_down_flat_lay", "close_up", "wide_angle", "isometric"
    ] | None = None
    artist_influence: str | None = None
    brand_colors: list[str] = Field(default_factory=list, description="Hex codes")


class PromptOptions(BaseModel):
    target_audience: str | None = None
    brand_guidelines: str | None = None
    preferred_style: ImageStyle | None = None


class ImagePromptSuggestion(BaseModel):
    prompt: str = Field(description="Detailed prompt usable directly with an image model")
    xml_prompt: str = Field(description="The complete <promptTemplate> XML prompt")
    style: str = Field(description="Closest of the supported image styles")
    mood: str = Field(description="Emotional tone of the image")
    elements: list[str] = Field(description="Key visual elements to include")
    reasoning: str = Field(description="How the blog content and parameters shaped the prompt")


class ImageGenerationParams(BaseModel):
    model: ImageModel = "dalle-3"
    size: str = "1024x1024"
    quality: str = "standard"
    style: ImageStyle | None = None
    dalle_style: Literal["natural", "vivid"] | None = None
    seed: int | None = None


class GeneratedImage(BaseModel):
    url: str = ""
    base64: str = ""
    size: str
    quality: str
    model: ImageModel
    prompt: str
    revised_prompt: str | None = None
    seed: int | None = None
    generated_at: datetime = Field(default_factory=get_datetime_utc)
    xml_prompt: str | None = None
