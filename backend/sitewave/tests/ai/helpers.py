from unittest.mock import MagicMock


def chat_response(content: str, total_tokens: int | None = None) -> MagicMock:
    """Mock shaped like an OpenAI chat completion."""
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    if total_tokens is None:
        mock_response.usage = None
    else:
        mock_response.usage = MagicMock(
            prompt_tokens=total_tokens // 2,
            completion_tokens=total_tokens - total_tokens // 2,
            total_tokens=total_tokens,
        )
    return mock_response


def image_item(b64_json: str = "aGVsbG8=", revised_prompt: str | None = None) -> MagicMock:
    item = MagicMock()
    item.url = None
    item.b64_json = b64_json
    item.revised_prompt = revised_prompt
    return item
