"""Tests for the Claude vision client."""

from unittest.mock import patch

import httpx
import pytest

from illustration_ai.core.exceptions import APITimeoutError, InvalidInputError, ServiceError
from illustration_ai.core.vision_client import ClaudeVisionClient
from illustration_ai.schemas.illustration import PageImage


class TestClaudeVisionClient:
    """Request shape, first-text-block extraction and error translation."""

    @pytest.fixture
    def vision_client(self) -> ClaudeVisionClient:
        return ClaudeVisionClient(
            api_key="test-api-key",
            model="claude-sonnet-4-20250514",
            base_url="https://api.anthropic.com/v1/messages",
            api_version="2023-06-01",
            max_tokens=8000,
            timeout=30,
        )

    @pytest.fixture
    def pages(self):
        return [PageImage(data="AAAA"), PageImage(data="BBBB", media_type="image/png")]

    @pytest.mark.asyncio
    async def test_invoke_sends_images_then_instruction(
        self, vision_client, pages, mock_httpx_client, http_response
    ) -> None:
        mock_httpx_client.post.return_value = http_response(
            200,
            {
                "content": [
                    {"type": "text", "text": '{"carrier": "Symetra"}'},
                    {"type": "text", "text": "ignored"},
                ]
            },
        )

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            text = await vision_client.invoke(pages, "Identify the carrier")

        assert text == '{"carrier": "Symetra"}'
        mock_client_class.assert_called_once_with(timeout=30)

        call = mock_httpx_client.post.await_args
        assert call.args[0] == "https://api.anthropic.com/v1/messages"
        headers = call.kwargs["headers"]
        assert headers["x-api-key"] == "test-api-key"
        assert headers["anthropic-version"] == "2023-06-01"
        assert "Authorization" not in headers

        payload = call.kwargs["json"]
        assert payload["model"] == "claude-sonnet-4-20250514"
        assert payload["max_tokens"] == 8000
        content = payload["messages"][0]["content"]
        assert payload["messages"][0]["role"] == "user"
        assert content[0] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/jpeg", "data": "AAAA"},
        }
        assert content[1]["source"]["media_type"] == "image/png"
        assert content[-1] == {"type": "text", "text": "Identify the carrier"}

    @pytest.mark.asyncio
    async def test_service_error_uses_reported_message(
        self, vision_client, pages, mock_httpx_client, http_response
    ) -> None:
        mock_httpx_client.post.return_value = http_response(
            401,
            {"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}},
        )

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            with pytest.raises(ServiceError) as exc_info:
                await vision_client.invoke(pages, "Identify the carrier")

        assert str(exc_info.value) == "invalid x-api-key"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_service_error_without_message_uses_status(
        self, vision_client, pages, mock_httpx_client, http_response
    ) -> None:
        mock_httpx_client.post.return_value = http_response(502, ValueError("not json"), text="Bad Gateway")

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            with pytest.raises(ServiceError) as exc_info:
                await vision_client.invoke(pages, "Identify the carrier")

        assert str(exc_info.value) == "API error: 502"

    @pytest.mark.asyncio
    async def test_single_call_without_retry(
        self, vision_client, pages, mock_httpx_client, http_response
    ) -> None:
        mock_httpx_client.post.return_value = http_response(529, {"error": {"message": "Overloaded"}})

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            with pytest.raises(ServiceError):
                await vision_client.invoke(pages, "Identify the carrier")

        assert mock_httpx_client.post.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout(self, vision_client, pages, mock_httpx_client) -> None:
        mock_httpx_client.post.side_effect = httpx.ReadTimeout("timed out")

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            with pytest.raises(APITimeoutError):
                await vision_client.invoke(pages, "Identify the carrier")

    @pytest.mark.asyncio
    async def test_skips_non_text_blocks(
        self, vision_client, pages, mock_httpx_client, http_response
    ) -> None:
        mock_httpx_client.post.return_value = http_response(
            200,
            {
                "content": [
                    {"type": "thinking", "thinking": "Looking at the cover page..."},
                    {"type": "text", "text": '{"carrier": "Symetra"}'},
                ]
            },
        )

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            text = await vision_client.invoke(pages, "Identify the carrier")

        assert text == '{"carrier": "Symetra"}'

    @pytest.mark.asyncio
    async def test_reply_without_text_block(
        self, vision_client, pages, mock_httpx_client, http_response
    ) -> None:
        mock_httpx_client.post.return_value = http_response(200, {"content": []})

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            with pytest.raises(ServiceError):
                await vision_client.invoke(pages, "Identify the carrier")

    @pytest.mark.asyncio
    async def test_empty_images_rejected_before_call(self, vision_client, mock_httpx_client) -> None:
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = mock_httpx_client

            with pytest.raises(InvalidInputError):
                await vision_client.invoke([], "Identify the carrier")

        mock_httpx_client.post.assert_not_awaited()


class TestPageImage:

    def test_bare_base64_defaults_to_jpeg(self) -> None:
        image = PageImage.from_payload("/9j/4AAQ")

        assert image.data == "/9j/4AAQ"
        assert image.media_type == "image/jpeg"

    def test_data_url_keeps_media_type(self) -> None:
        image = PageImage.from_payload("data:image/png;base64,iVBORw0KGgo=")

        assert image.data == "iVBORw0KGgo="
        assert image.media_type == "image/png"

    def test_empty_payload_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            PageImage.from_payload("")
