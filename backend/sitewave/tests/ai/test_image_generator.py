import pytest

from sitewave.ai.artifacts import ImageGenerationParams
from sitewave.ai.errors import AIServiceError
from sitewave.ai.image_generator import (
    DEFAULT_STYLE_SUFFIX,
    FEATURED_IMAGE_SUFFIX,
    ImageGenerator,
)
from sitewave.tests.ai.helpers import image_item

XML_PROMPT = (
    "<promptTemplate><goal>Team meeting</goal><mood>Upbeat</mood>"
    "<avoid>Logos</avoid></promptTemplate>"
)


def test_validate_params():
    ImageGenerator.validate_params(ImageGenerationParams(model="gpt-image-1", quality="high"))

    with pytest.raises(ValueError, match="Valid sizes: 1024x1024, 1792x1024, 1024x1792"):
        ImageGenerator.validate_params(ImageGenerationParams(size="1536x1024"))
    with pytest.raises(ValueError, match="Seed must be a non-negative integer"):
        ImageGenerator.validate_params(ImageGenerationParams(seed=-1))


def test_build_styled_prompt(mock_openai):
    generator = ImageGenerator()
    assert generator.build_styled_prompt("A harbor", "minimalist") == (
        "Create a clean, minimalist design with simple elements. A harbor. "
        + FEATURED_IMAGE_SUFFIX
    )
    assert generator.build_styled_prompt("A harbor") == f"A harbor. {DEFAULT_STYLE_SUFFIX}"
    assert generator.build_styled_prompt(XML_PROMPT) == (
        "Team meeting. Mood: Upbeat. Avoid: Logos. "
        "Ensure no text or typography overlays in the image."
    )


@pytest.mark.asyncio
async def test_generate_image_with_dalle(mock_openai):
    mock_openai.images.generate.return_value.data = [image_item(revised_prompt="revised")]

    image = await ImageGenerator().generate_image(
        "A harbor", ImageGenerationParams(style="natural", dalle_style="vivid", seed=7)
    )

    assert image.base64 == "aGVsbG8="
    assert image.revised_prompt == "revised"
    assert image.seed == 7
    call = mock_openai.images.generate.call_args.kwargs
    assert call["model"] == "dall-e-3"
    assert call["n"] == 1
    assert call["response_format"] == "b64_json"
    assert call["style"] == "vivid"


@pytest.mark.asyncio
async def test_generate_image_from_xml_keeps_prompt(mock_openai):
    mock_openai.images.generate.return_value.data = [image_item()]
    params = ImageGenerationParams(model="gpt-image-1", size="1536x1024", quality="high")

    image = await ImageGenerator().generate_image_from_xml(XML_PROMPT, params)

    assert image.xml_prompt == XML_PROMPT
    assert image.prompt == XML_PROMPT
    call = mock_openai.images.generate.call_args.kwargs
    assert call["model"] == "gpt-image-1"
    assert call["prompt"] == XML_PROMPT
    assert "response_format" not in call


@pytest.mark.asyncio
async def test_generate_image_from_plain_text_falls_back(mock_openai):
    mock_openai.images.generate.return_value.data = [image_item()]

    image = await ImageGenerator().generate_image_from_xml("A harbor", ImageGenerationParams())

    assert image.xml_prompt is None
    assert image.prompt.startswith("A harbor. ")


@pytest.mark.asyncio
async def test_empty_image_response_raises(mock_openai):
    mock_openai.images.generate.return_value.data = []

    with pytest.raises(AIServiceError, match="No image data returned from OpenAI"):
        await ImageGenerator().generate_image("A harbor", ImageGenerationParams())


@pytest.mark.asyncio
async def test_generate_multiple_images_batches_gpt_image(mock_openai):
    mock_openai.images.generate.return_value.data = [image_item(), image_item(), image_item()]
    params = ImageGenerationParams(model="gpt-image-1", quality="low")

    images = await ImageGenerator().generate_multiple_images("A harbor", params, 3)

    assert len(images) == 3
    mock_openai.images.generate.assert_awaited_once()
    assert mock_openai.images.generate.call_args.kwargs["n"] == 3


@pytest.mark.asyncio
async def test_generate_multiple_images_one_call_each_for_dalle(mock_openai):
    mock_openai.images.generate.return_value.data = [image_item()]

    images = await ImageGenerator().generate_multiple_images(
        "A harbor", ImageGenerationParams(), 2
    )

    assert len(images) == 2
    assert mock_openai.images.generate.await_count == 2


def test_estimated_cost():
    assert ImageGenerator.get_estimated_cost(ImageGenerationParams(quality="hd"), 3) == 0.24
    params = ImageGenerationParams(model="gpt-image-1", quality="low")
    assert ImageGenerator.get_estimated_cost(params) == 0.02
