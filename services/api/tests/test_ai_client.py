import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from app.core.ai_client import AIClient, normalize_model_id


def gemini_client(generate_content):
    """AIClient in gemini mode with the SDK client swapped for a mock."""
    sdk = MagicMock()
    sdk.aio.models.generate_content = generate_content
    with patch("app.core.ai_client.settings") as mock_settings, \
            patch("app.core.ai_client.genai.Client", return_value=sdk):
        mock_settings.ai_mode = "gemini"
        mock_settings.gemini_api_key = "TEST_GEMINI_KEY"
        mock_settings.gemini_text_model = "gemini-2.5-flash"
        client = AIClient()
    return client


@pytest.mark.parametrize("raw, expected", [
    ('model="gemini-2.5-flash"', "gemini-2.5-flash"),
    ("  'gemini-2.5-pro' ", "gemini-2.5-pro"),
    ("gemini-2.5-flash", "gemini-2.5-flash"),
    ("", ""),
])
def test_normalize_model_id(raw, expected):
    assert normalize_model_id(raw) == expected


def test_mock_mode_is_unavailable():
    with patch("app.core.ai_client.settings") as mock_settings:
        mock_settings.ai_mode = "mock"
        mock_settings.gemini_api_key = "TEST_GEMINI_KEY"
        client = AIClient()
    assert client.is_available() is False


@pytest.mark.asyncio
async def test_generate_text_returns_reply():
    generate = AsyncMock(return_value=MagicMock(text='{"title": "Soup"}'))
    client = gemini_client(generate)

    reply = await client.generate_text("prompt", model='model="gemini-2.5-pro"', json_output=True)

    assert reply == '{"title": "Soup"}'
    kwargs = generate.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-pro"
    assert kwargs["config"].response_mime_type == "application/json"


@pytest.mark.asyncio
async def test_generate_text_failure_returns_none():
    client = gemini_client(AsyncMock(side_effect=RuntimeError("quota exceeded")))
    assert await client.generate_text("prompt") is None


@pytest.mark.asyncio
async def test_generate_text_empty_reply_returns_none():
    client = gemini_client(AsyncMock(return_value=MagicMock(text="")))
    assert await client.generate_text("prompt") is None
