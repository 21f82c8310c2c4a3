import json

import pytest

from sitewave.ai.artifacts import BlogContent, PromptOptions, UserImageParameters
from sitewave.ai.errors import AIServiceError
from sitewave.ai.image_prompt_generator import (
    DISPLAY_FALLBACK,
    ImagePromptGenerator,
    format_enum_value,
    format_user_parameters,
)
from sitewave.tests.ai.helpers import chat_response

XML_PROMPT = (
    "<promptTemplate><instructions><goal>Hero shot of a laptop</goal></instructions>"
    "<visual><style><vibe>Focused</vibe><colorPalette>Teal and white</colorPalette>"
    "<mood>Calm</mood></style></visual></promptTemplate>"
)

SUGGESTION = {
    "prompt": "A laptop on a tidy desk",
    "xml_prompt": XML_PROMPT,
    "style": "photorealistic",
    "mood": "calm",
    "elements": ["laptop", "desk"],
    "reasoning": "The post is about productivity",
}

BLOG = BlogContent(
    title="Deep Work at Home",
    content="Set up a space that keeps you focused.",
    tags=["productivity"],
)


def test_format_user_parameters():
    params = UserImageParameters(
        image_style="3d_render",
        color_palette="brand_specific",
        brand_colors=["#0a84ff", "#ffffff"],
        text_overlay_area_needed=True,
        camera_angle="top_down_flat_lay",
    )
    description = format_user_parameters(params)
    assert "**Image Style:** 3d Render" in description
    assert "**Brand Colors:** #0a84ff, #ffffff" in description
    assert "**Text Overlay Area:** Required" in description
    assert "**Camera Angle:** Top Down Flat Lay" in description
    assert "Lighting Style" not in description

    plain = format_user_parameters(UserImageParameters(brand_colors=["#000000"]))
    assert "Brand Colors" not in plain


def test_format_enum_value():
    assert format_enum_value("sunset_golden_hour") == "Sunset Golden Hour"


@pytest.mark.asyncio
async def test_generate_prompt(mock_openai):
    mock_openai.chat.completions.create.return_value = chat_response(json.dumps(SUGGESTION))

    suggestion = await ImagePromptGenerator().generate_prompt(
        BLOG,
        UserImageParameters(mood="calm"),
        PromptOptions(target_audience="Remote workers"),
    )

    assert suggestion.xml_prompt == XML_PROMPT
    call = mock_openai.chat.completions.create.call_args.kwargs
    assert call["model"] == "gpt-4.1-mini"
    assert "**Mood/Tone:** Calm" in call["messages"][1]["content"]
    assert "**Target Audience:** Remote workers" in call["messages"][1]["content"]


@pytest.mark.asyncio
async def test_generate_prompt_variations(mock_openai):
    mock_openai.chat.completions.create.return_value = chat_response(json.dumps(SUGGESTION))

    suggestions = await ImagePromptGenerator().generate_prompt_variations(BLOG, count=3)

    assert len(suggestions) == 3
    prompts = [
        c.kwargs["messages"][1]["content"]
        for c in mock_openai.chat.completions.create.call_args_list
    ]
    assert sum("Variation Requirement" in p for p in prompts) == 2


@pytest.mark.asyncio
async def test_legacy_prompt_uses_gpt_4o(mock_openai):
    mock_openai.chat.completions.create.return_value = chat_response(json.dumps(SUGGESTION))

    await ImagePromptGenerator().generate_prompt_legacy(BLOG)

    call = mock_openai.chat.completions.create.call_args.kwargs
    assert call["model"] == "gpt-4o"
    assert "Legacy Mode" in call["messages"][1]["content"]


@pytest.mark.asyncio
async def test_refine_prompt(mock_openai):
    refined = {**SUGGESTION, "prompt": "A laptop at golden hour"}
    mock_openai.chat.completions.create.return_value = chat_response(json.dumps(refined))

    prompt = await ImagePromptGenerator().refine_prompt(
        "A laptop on a tidy desk", BLOG, "Warmer light please"
    )

    assert prompt == "A laptop at golden hour"
    call = mock_openai.chat.completions.create.call_args.kwargs
    assert call["temperature"] == 0.6
    assert "Warmer light please" in call["messages"][1]["content"]


@pytest.mark.asyncio
async def test_generate_prompt_failure(mock_openai):
    mock_openai.chat.completions.create.side_effect = RuntimeError("Quota exceeded")

    with pytest.raises(AIServiceError, match="Failed to generate image prompt"):
        await ImagePromptGenerator().generate_prompt(BLOG)


def test_extract_display_prompt():
    assert ImagePromptGenerator.extract_display_prompt(XML_PROMPT) == (
        "Hero shot of a laptop. Style: Focused. Mood: Calm. Colors: Teal and white"
    )
    assert ImagePromptGenerator.extract_display_prompt("plain prompt") == "plain prompt"
    assert (
        ImagePromptGenerator.extract_display_prompt("<promptTemplate></promptTemplate>")
        == DISPLAY_FALLBACK
    )
