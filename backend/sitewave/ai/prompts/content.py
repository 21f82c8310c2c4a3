CONTENT_SYSTEM_PROMPT = """
You are the in-house content writer for a web development and digital services agency.
You write clear, accurate, search-friendly copy for the agency's website: blog posts,
service pages, landing pages, emails and marketing material.
Follow the requested tone and length closely and never invent statistics you cannot support.
"""

TONES = ("professional", "casual", "technical", "friendly", "persuasive", "authoritative")

BLOG_LENGTHS = {
    "short": "600-800 words",
    "medium": "1000-1500 words",
    "long": "1500-2500 words",
}

SERVICE_DESCRIPTION_LENGTHS = {
    "short": "200-400 words",
    "medium": "400-600 words",
    "long": "600-1000 words",
}

SERVICE_LENGTHS = {
    "short": "300-500 words for full description",
    "medium": "500-800 words for full description",
    "long": "800-1200 words for full description",
}

COPY_TYPES = {
    "headline": {
        "description": "Create 3-5 compelling headlines",
        "requirements": "10-60 characters each, highly clickable and engaging",
        "format": "Multiple headline options with A/B testing potential",
        "details": (
            "#### Headlines\n"
            "- Create 3-5 different headline options of 10-60 characters\n"
            "- Test different angles (benefit, curiosity, urgency)\n"
            "- Include the primary keyword naturally"
        ),
    },
    "social-post": {
        "description": "Create social media post content",
        "requirements": "150-280 characters, platform-optimized",
        "format": "Ready-to-post social media content with hashtags",
        "details": (
            "#### Social Media Post\n"
            "- Keep within 150-280 characters\n"
            "- Include 3-5 relevant hashtags\n"
            "- End with a clear call-to-action"
        ),
    },
    "ad-copy": {
        "description": "Create advertisement copy",
        "requirements": "Headline + description, conversion-focused",
        "format": "Headline (30 chars) + Description (90 chars) + CTA",
        "details": (
            "#### Advertisement Copy\n"
            "- **Headline**: 30 characters max\n"
            "- **Description**: 90 characters max, benefit-focused\n"
            "- **Call-to-Action**: short button text"
        ),
    },
    "landing-page": {
        "description": "Create landing page copy",
        "requirements": "Headline, subheading, and body text",
        "format": "Complete landing page copy structure",
        "details": (
            "#### Landing Page Copy\n"
            "- **Headline**: primary value proposition (50-60 chars)\n"
            "- **Subheading**: supporting detail (100-150 chars)\n"
            "- **Body Text**: benefits and social proof (200-400 words)\n"
            "- **CTAs**: one primary and one secondary action"
        ),
    },
}


def _optional_line(label: str, value: str | None) -> str:
    return f"- **{label}**: {value}" if value else ""


def blog_post_prompt(
    topic: str,
    keywords: list[str],
    tone: str,
    length: str = "medium",
    audience: str | None = None,
) -> str:
    return f"""# Blog Post Generation Request

## Topic
{topic}

## Requirements
- **Keywords to include**: {", ".join(keywords)}
- **Tone**: {tone}
- **Target length**: {BLOG_LENGTHS[length]}
{_optional_line("Target audience", audience)}

## Content Structure
1. An SEO-optimized title under 60 characters that includes the primary keyword.
2. An excerpt of 150-200 words that hooks the reader and previews the value.
3. Well-structured markdown content with H2/H3 headings, short paragraphs and lists.
4. All keywords used naturally (1-2% density) together with related terms.
5. Actionable insights, concrete examples and practical solutions.
6. A conclusion that summarizes the key takeaways and ends with a call-to-action.

## SEO Elements
- 5-8 relevant tags
- A meta description of 150-160 characters
- A meta title of 50-60 characters
- Meta keywords: 8-12 comma-separated keywords
- A suggested category name

## Output Format
Return the fields title, content (markdown), excerpt, tags, meta_description,
meta_title, meta_keywords, category and optionally slug."""


def service_description_prompt(
    name: str,
    features: list[str],
    benefits: list[str],
    target_audience: str,
    tone: str,
    length: str = "medium",
    industry: str | None = None,
    competitive_advantage: str | None = None,
    include_call_to_action: bool = False,
) -> str:
    cta = (
        "\n### Call-to-Action\nEnd with a clear, compelling next step for the prospect.\n"
        if include_call_to_action
        else ""
    )
    return f"""# Service Description Generation Request

## Service Details
- **Service Name**: {name}
- **Features**: {", ".join(features)}
- **Benefits**: {", ".join(benefits)}
- **Target Audience**: {target_audience}
{_optional_line("Industry", industry)}
{_optional_line("Competitive Advantage", competitive_advantage)}

## Content Requirements
- **Tone**: {tone}
- **Length**: {SERVICE_DESCRIPTION_LENGTHS[length]}
- **Focus**: Benefits over features
- **Goal**: Convert potential customers

## Writing Guidelines
- Lead with the primary outcome and the main pain point the service solves.
- Turn each feature into a concrete benefit for the client.
- Build credibility with specific details, without heavy jargon.
- Explain what sets this service apart from alternatives.
{cta}
Return only the finished description."""


def page_content_prompt(
    page_type: str,
    topic: str,
    keywords: list[str],
    tone: str,
    custom_instructions: str | None = None,
) -> str:
    return f"""# Page Content Generation Request

## Page Details
- **Page Type**: {page_type}
- **Topic**: {topic}
- **Keywords**: {", ".join(keywords)}
- **Tone**: {tone}
{_optional_line("Custom Instructions", custom_instructions)}

## Content Requirements
- Content a visitor expects on a **{page_type}** page, with a clear value proposition.
- Natural use of every keyword and a proper heading hierarchy (H1, H2, H3).
- Scannable sections: short paragraphs, bullet points, descriptive headings.
- Trust signals and relevant calls-to-action.
- An introduction, the main content, supporting sections and a closing that guides the next step.
- A consistent {tone} tone throughout.

Return the page content in markdown."""


def email_template_prompt(
    purpose: str, audience: str, tone: str, include_subject: bool = True
) -> str:
    subject_section = (
        "\n#### Subject Line\n"
        "- States the purpose clearly, under 50 characters, with no spam triggers\n"
        if include_subject
        else ""
    )
    output_format = (
        "Subject: [subject line]\n\n[email body]" if include_subject else "[email body]"
    )
    return f"""# Email Template Generation Request

## Email Details
- **Purpose**: {purpose}
- **Target Audience**: {audience}
- **Tone**: {tone}
- **Include Subject Line**: {"Yes" if include_subject else "No"}

## Requirements
{subject_section}
#### Email Body
- Open by establishing the purpose and context.
- Keep paragraphs short and the layout mobile friendly.
- Use placeholders such as {{{{name}}}} and {{{{company}}}} where personalization helps.
- Make the expected next step obvious and end with an appropriate sign-off.
- Keep a {tone} tone suited to {audience}.

## Output Format
{output_format}"""


def marketing_copy_prompt(
    product_or_service: str,
    copy_type: str,
    target_audience: str,
    tone: str,
    key_benefits: list[str] | None = None,
) -> str:
    guidance = COPY_TYPES[copy_type]
    benefits = (
        f"- **Key Benefits**: {', '.join(key_benefits)}" if key_benefits else ""
    )
    return f"""# Marketing Copy Generation Request

## Campaign Details
- **Product/Service**: {product_or_service}
- **Copy Type**: {copy_type}
- **Target Audience**: {target_audience}
- **Tone**: {tone}
{benefits}

## Copy Type Specifications
- **Objective**: {guidance["description"]}
- **Requirements**: {guidance["requirements"]}
- **Format**: {guidance["format"]}

## Guidelines
- Hook the reader in the first few words and lead with the biggest benefit.
- Speak to the specific pain points of {target_audience}.
- Back claims with credibility indicators and concrete outcomes.
- Finish with a clear, low-friction call-to-action.

{guidance["details"]}

Return only the copy."""


def service_prompt(
    name: str,
    features: list[str],
    benefits: list[str],
    target_audience: str,
    tone: str,
    length: str = "medium",
    industry: str | None = None,
    competitive_advantage: str | None = None,
    include_call_to_action: bool = False,
    include_pricing_tiers: bool = True,
    include_process_steps: bool = True,
    include_faq: bool = True,
    include_testimonials: bool = False,
) -> str:
    """Prompt for a complete structured service offering."""
    sections = []
    if include_process_steps:
        sections.append(
            "### Process Steps (4-6 steps)\n"
            "Each with a step number, title, 2-3 sentence description and optional duration."
        )
    if include_pricing_tiers:
        sections.append(
            "### Pricing Tiers (2-3 tiers)\n"
            "Each with a name, price or price range, short description, 3-5 features, "
            "and exactly one tier marked popular."
        )
    if include_faq:
        sections.append(
            "### FAQ (4-6 questions)\nEach with a common client question and a 2-3 sentence answer."
        )
    if include_testimonials:
        sections.append(
            "### Testimonial\nA realistic quote with an author name and company."
        )
    feature_lines = "\n".join(f"- {feature}" for feature in features)
    benefit_lines = "\n".join(f"- {benefit}" for benefit in benefits)
    advantage = (
        f"## Competitive Advantage\n{competitive_advantage}\n" if competitive_advantage else ""
    )
    cta = "- **Include a compelling call-to-action**" if include_call_to_action else ""

    return f"""# Comprehensive Service Generation Request

## Service Information
- **Service Name**: {name}
- **Target Audience**: {target_audience}
{_optional_line("Industry", industry)}

## Key Features
{feature_lines}

## Key Benefits
{benefit_lines}

{advantage}
## Requirements
- **Tone**: {tone}
- **Target length**: {SERVICE_LENGTHS[length]}
{cta}

## Output Requirements
### Core Service Information
- **title**: SEO-friendly service title (50-60 characters)
- **short_description**: elevator pitch under 160 characters
- **full_description**: detailed description ({SERVICE_LENGTHS[length]})
- **timeline**: realistic project timeline such as "2-4 weeks"
- **category**: one of Development, Design, Consulting, Marketing, Support
- **target_audience** and **competitive_advantage**

### Structured Lists
- **features**: 5-8 key features building on the ones above
- **benefits**: 5-8 client benefits
- **deliverables**: 4-6 specific outcomes the client receives
- **technologies**: 3-6 relevant tools, if applicable

{chr(10).join(sections)}

### SEO Elements
- **meta_description** (150-160 characters) and **meta_title** (50-60 characters)

Process step durations should add up to the overall timeline and pricing should be
realistic for the market. Generate the complete service offering now."""
