import re
from datetime import date

IMAGE_PROMPT_SYSTEM_PROMPT = """
You are an expert at writing detailed, XML-structured prompts for AI image generation.
You read blog posts and turn them into featured-image prompts that are specific,
publication ready and free of any text or typography in the image.
"""

XML_TEMPLATE = """<promptTemplate>
  <title>[Blog post inspired title for the image]</title>

  <instructions>
    <goal>[Clear, high-level goal for the image]</goal>
    <constraints>
      <format>[Specific format requirements]</format>
      <style>[Style specifications]</style>
    </constraints>
  </instructions>

  <content>
    <description>[Specific subject, tone, contrast details]</description>
    <audience>[Target audience from blog context]</audience>
  </content>

  <visual>
    <style>
      <vibe>[Emotional tone]</vibe>
      <colorPalette>[Color specifications]</colorPalette>
      <mood>[Mood setting]</mood>
      <medium>[Art medium or style]</medium>
    </style>
    <composition>
      <layout>[Composition layout description]</layout>
      <focus>[What should be highlighted]</focus>
      <aspectRatio>[Aspect ratio]</aspectRatio>
    </composition>
  </visual>

  <notes>
    <avoid>[Things to avoid in the image]</avoid>
    <inspiration>[Style or reference inspirations]</inspiration>
  </notes>

  <postProcessing>
    <feedbackRequest>Generate a detailed featured image based on this template.</feedbackRequest>
  </postProcessing>
</promptTemplate>"""

STYLE_OPTIONS = (
    "photorealistic, digital_art, illustration, minimalist, abstract, "
    "corporate, modern, artistic, natural"
)

CONTENT_PREVIEW_CHARS = 1000


def content_preview(content: str, limit: int = CONTENT_PREVIEW_CHARS) -> str:
    return content[:limit] + ("..." if len(content) > limit else "")


def _blog_details(title: str, content: str, excerpt=None, category=None, tags=None) -> str:
    lines = [f"**Title:** {title}"]
    if excerpt:
        lines.append(f"**Excerpt:** {excerpt}")
    if category:
        lines.append(f"**Category:** {category}")
    if tags:
        lines.append(f"**Tags:** {', '.join(tags)}")
    lines.append(f"**Content Preview:**\n{content_preview(content)}")
    return "\n\n".join(lines)


def _variation(index: int | None, suffix: str) -> str:
    if not index:
        return ""
    return (
        f"\n## Variation Requirement\nThis is variation #{index + 1}. "
        f"Create a different perspective or approach while {suffix}.\n"
    )


def parameterized_image_prompt(
    *,
    title: str,
    content: str,
    parameters_description: str,
    excerpt: str | None = None,
    category: str | None = None,
    tags: list[str] | None = None,
    target_audience: str | None = None,
    brand_guidelines: str | None = None,
    variation_index: int | None = None,
) -> str:
    extras = "\n".join(
        line
        for line in (
            f"**Target Audience:** {target_audience}" if target_audience else "",
            f"**Brand Guidelines:** {brand_guidelines}" if brand_guidelines else "",
        )
        if line
    )
    variation = _variation(
        variation_index, "maintaining relevance to the topic and user parameters"
    )
    return f"""# XML Image Prompt Generation for Blog Post

Analyze the blog post AND the user-defined image parameters below, then write a
tailored image prompt using the exact XML structure provided.

## Blog Post Details

{_blog_details(title, content, excerpt, category, tags)}

## User-Defined Image Parameters

{parameters_description}

## Required XML Structure

Use this exact XML structure for the xml_prompt field:

```xml
{XML_TEMPLATE}
```

{extras}
{variation}
## Output Requirements
- **prompt**: a detailed prompt suitable for direct use with image models
- **style**: the closest of: {STYLE_OPTIONS}
- **mood**: the emotional tone from the user parameters
- **elements**: key visual elements that will be included
- **reasoning**: how the blog content and user parameters shaped the prompt
- **xml_prompt**: the complete XML prompt with every section filled in

Fill every XML section with specific content, never placeholders. Keep text and
typography out of the image and do not change the XML tags."""


def legacy_image_prompt(
    *,
    title: str,
    content: str,
    excerpt: str | None = None,
    category: str | None = None,
    tags: list[str] | None = None,
    preferred_style: str | None = None,
    target_audience: str | None = None,
    brand_guidelines: str | None = None,
) -> str:
    style_lines = [
        f"- Preferred style: {preferred_style}"
        if preferred_style
        else "- Use modern, clean, and professional styles"
    ]
    if target_audience:
        style_lines.append(f"- Target audience: {target_audience}")
    if brand_guidelines:
        style_lines.append(f"- Brand guidelines: {brand_guidelines}")
    style_considerations = "\n".join(style_lines)
    metadata = (
        "  <metadata>\n"
        "    <model>gpt-4o-image</model>\n"
        "    <version>v1</version>\n"
        "    <author>SiteWave AI</author>\n"
        f"    <date>{date.today().isoformat()}</date>\n"
        "  </metadata>\n\n"
    )
    template = XML_TEMPLATE.replace("<promptTemplate>\n", "<promptTemplate>\n" + metadata, 1)
    return f"""# XML Image Prompt Generation for Blog Post (Legacy Mode)

Analyze the blog post and write a featured-image prompt using the standard XML structure.
Default the aspect ratio to 16:9.

## Blog Post Details

{_blog_details(title, content, excerpt, category, tags)}

## Required XML Structure

```xml
{template}
```

### Style Considerations
{style_considerations}

## Output Requirements
- **prompt**: a detailed, specific prompt for image generation
- **style**: the recommended style from: {STYLE_OPTIONS}
- **mood**: the emotional tone the image should convey
- **elements**: key visual elements to include
- **reasoning**: why this prompt suits the blog post
- **xml_prompt**: the complete XML prompt

The image should make someone want to click and read the post."""


def refine_image_prompt(original_prompt: str, title: str, content: str, feedback: str) -> str:
    return f"""# Prompt Refinement Task

## Original Image Prompt
{original_prompt}

## Blog Post Context
**Title:** {title}
**Content Preview:** {content[:500]}...

## User Feedback
{feedback}

## Task
Refine the original prompt based on the feedback while keeping it relevant to the
blog post. Keep what works and change what the feedback asks for."""


def extract_xml_tag(xml_prompt: str, tag: str) -> str:
    match = re.search(rf"<{tag}>(.*?)</{tag}>", xml_prompt, re.DOTALL)
    return match.group(1).strip() if match else ""


def is_xml_prompt(prompt: str) -> bool:
    return prompt.strip().startswith("<promptTemplate>") and "</promptTemplate>" in prompt
