"""Anthropic Messages API client for page-image extraction."""

from typing import Any, Dict, List, Sequence

from illustration_ai.core.base_llm_client import BaseLLMClient
from illustration_ai.core.exceptions import InvalidInputError, ServiceError
from illustration_ai.schemas.illustration import PageImage
from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ClaudeVisionClient(BaseLLMClient):
    """Sends page images plus one instruction to a multi-modal model.

    Only the first text block of the reply is returned; the rest of the
    reply is ignored.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str = "https://api.anthropic.com/v1/messages",
        api_version: str = "2023-06-01",
        max_tokens: int = 8000,
        timeout: int = 60,
    ):
        """Initialize the vision client.

        Args:
            api_key: Anthropic API key
            model: Model identifier
            base_url: Messages endpoint URL
            api_version: Value pinned in the ``anthropic-version`` header
            max_tokens: Completion token ceiling per call
            timeout: Request timeout in seconds
        """
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.api_version = api_version
        self.max_tokens = max_tokens

        LOGGER.info(f"Initialized Claude vision client with model {self.model}")

    def default_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

    def build_payload(self, images: Sequence[PageImage], instruction: str) -> Dict[str, Any]:
        content: List[Dict[str, Any]] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.data,
                },
            }
            for image in images
        ]
        content.append({"type": "text", "text": instruction})

        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": content}],
        }

    async def invoke(self, images: Sequence[PageImage], instruction: str) -> str:
        """Run one extraction request.

        Args:
            images: Page images to attach, in order
            instruction: Natural-language extraction instruction

        Returns:
            Text of the first content block in the model's reply

        Raises:
            InvalidInputError: If no images are given
            ServiceError: If the service call fails or the reply has no text
        """
        if not images:
            raise InvalidInputError("At least one page image is required")

        response = await self.call_api(payload=self.build_payload(images, instruction))

        content = response.get("content") if isinstance(response, dict) else None
        text = next(
            (
                block.get("text")
                for block in content or []
                if isinstance(block, dict) and block.get("type") == "text"
            ),
            None,
        )
        if not isinstance(text, str):
            LOGGER.error(f"Unexpected Anthropic response format: {str(response)[:500]}")
            raise ServiceError("Invalid response format from model service")
        return text
