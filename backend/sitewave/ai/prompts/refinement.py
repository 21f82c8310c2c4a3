REFINEMENT_SYSTEM_PROMPT = """
You are a senior editor. You rewrite existing website content so it is clearer,
better structured and easier to find in search, while keeping its meaning and key messages.
Return only the revised content, never commentary about the changes.
"""

ANALYSIS_SYSTEM_PROMPT = """
You are a content strategist who audits website copy. You judge clarity, structure,
search optimization and engagement, and you give specific, achievable recommendations.
"""

READING_LEVELS = {
    "elementary": "5th-6th grade level (simple sentences, basic vocabulary)",
    "middle-school": "7th-8th grade level (moderate complexity, accessible language)",
    "high-school": "9th-12th grade level (varied sentence structure, appropriate vocabulary)",
    "college": "College level (complex ideas, sophisticated vocabulary)",
    "professional": "Professional level (industry terminology, advanced concepts)",
}


def _lines(*lines: str | None) -> str:
    return "\n".join(line for line in lines if line)


def content_improvement_prompt(
    original_content: str,
    improvements: list[str],
    tone: str | None = None,
    target_audience: str | None = None,
    maintain_structure: bool = False,
) -> str:
    requirements = _lines(*(f"- {item}" for item in improvements))
    context = _lines(
        f"## Tone Requirements\n- **Target Tone**: {tone}" if tone else None,
        f"## Target Audience\n- **Audience**: {target_audience}" if target_audience else None,
    )
    structure = (
        "- Keep the original structure and key points intact"
        if maintain_structure
        else "- Reorganize sections where it improves the flow"
    )
    return f"""# Content Improvement Request

## Original Content
{original_content}

## Improvement Requirements
{requirements}

{context}

## Guidelines
- Improve clarity, word choice and transitions; remove redundancy.
{structure}
- Break up long paragraphs and use lists where they help scanning.
- Prefer the active voice and replace vague statements with specifics.
- Fill obvious gaps in context without padding.

Provide only the improved content, keeping the original intent and core message."""


def seo_optimization_prompt(
    original_content: str,
    target_keywords: list[str],
    primary_keyword: str | None = None,
    meta_description_required: bool = False,
    heading_optimization: bool = False,
    target_audience: str | None = None,
    competitor_keywords: list[str] | None = None,
) -> str:
    requirements = _lines(
        f"- **Target Keywords**: {', '.join(target_keywords)}",
        f"- **Primary Keyword**: {primary_keyword}" if primary_keyword else None,
        "- **Meta Description**: Required (150-160 characters)"
        if meta_description_required
        else None,
        "- **Heading Optimization**: Optimize H1-H6 tags" if heading_optimization else None,
        f"- **Target Audience**: {target_audience}" if target_audience else None,
        f"- **Competitor Keywords**: {', '.join(competitor_keywords)}"
        if competitor_keywords
        else None,
    )
    headings = (
        "\n### Headings\n"
        "- Primary keyword in the H1, secondary keywords in H2 subheadings\n"
        "- Keep a logical heading hierarchy\n"
        if heading_optimization
        else ""
    )
    meta = (
        "\n### Meta Description\n"
        "Add a 150-160 character meta description containing the primary keyword "
        "and a call-to-action.\n"
        if meta_description_required
        else ""
    )
    return f"""# SEO Content Optimization Request

## Original Content
{original_content}

## SEO Requirements
{requirements}

## Guidelines
- Place keywords naturally, about 1-2% density for the primary keyword, with no stuffing.
- Use semantic variations and long-tail phrases.
- Open with a keyword-rich hook and close with a relevant call-to-action.
- Keep paragraphs to 2-3 sentences and structure sections to win featured snippets.
- Match the search intent of the audience.
{headings}{meta}
Provide only the optimized content, keeping its quality and readability."""


def readability_enhancement_prompt(
    original_content: str,
    target_reading_level: str = "high-school",
    target_audience: str | None = None,
    specific_improvements: list[str] | None = None,
    maintain_technical_terms: bool = False,
    include_readability_score: bool = False,
) -> str:
    level = target_reading_level if target_reading_level in READING_LEVELS else "high-school"
    requirements = _lines(
        f"- **Target Reading Level**: {level} - {READING_LEVELS[level]}",
        f"- **Target Audience**: {target_audience}" if target_audience else None,
        "- **Technical Terms**: Keep necessary terminology but explain it when needed"
        if maintain_technical_terms
        else None,
        "- **Readability Score**: Provide an estimated Flesch-Kincaid grade level"
        if include_readability_score
        else None,
    )
    specific = (
        "## Specific Improvements Requested\n"
        + _lines(*(f"- {item}" for item in specific_improvements))
        if specific_improvements
        else ""
    )
    return f"""# Readability Enhancement Request

## Original Content
{original_content}

## Enhancement Requirements
{requirements}

{specific}

## Guidelines
- Aim for an average sentence length of 15-20 words and vary it.
- Split overly complex sentences and prefer the active voice.
- Swap abstract or rare words for concrete, familiar ones.
- Use short paragraphs, descriptive subheadings and lists.
- Add transitions so each section leads into the next.

Provide only the enhanced content."""


def content_analysis_prompt(
    content: str,
    target_audience: str | None = None,
    target_keywords: list[str] | None = None,
    desired_reading_level: str | None = None,
) -> str:
    context = _lines(
        f"- **Target Audience**: {target_audience}" if target_audience else None,
        f"- **Target Keywords**: {', '.join(target_keywords)}" if target_keywords else None,
        f"- **Desired Reading Level**: {desired_reading_level}"
        if desired_reading_level
        else None,
    )
    keyword_task = (
        f"Calculate keyword density (percent) for: {', '.join(target_keywords)}"
        if target_keywords
        else "Describe the keyword usage patterns"
    )
    return f"""Analyze the following content and provide improvement recommendations.

## Content to Analyze
{content}

## Analysis Context
{context or "- None provided"}

## Analysis Requirements
1. 5-10 specific, actionable suggestions covering clarity, SEO, readability,
   engagement and structure.
2. The current reading level (Elementary, Middle School, High School, College or Professional).
3. {keyword_task}.
4. Improvement priorities ordered by importance, using only: readability, seo,
   engagement, structure.
5. Scores from 0 to 100 for overall quality, readability, SEO and engagement.

Focus on the highest-impact improvements first."""
