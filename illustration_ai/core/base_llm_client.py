from typing import Dict, Any, Optional

import httpx
from httpx import TimeoutException

from illustration_ai.core.exceptions import APITimeoutError, ServiceError
from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseLLMClient:
    """Base client for LLM API interactions.

    Handles the HTTP exchange, timeout management and error translation.
    Calls are made exactly once; whether a failure is fatal is left to the
    caller.
    """

    def __init__(self, api_key: str, base_url: str, timeout: int = 60):
        """Initialize the LLM client.

        Args:
            api_key: API key for authentication
            base_url: Base URL for the API
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.logger = LOGGER

    def default_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def call_api(
        self,
        endpoint: str = "",
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded JSON reply.

        Args:
            endpoint: API endpoint (appended to base_url)
            payload: JSON payload
            headers: Additional headers

        Returns:
            Parsed JSON response

        Raises:
            ServiceError: If the service answers with a non-success status,
                the connection fails, or the reply is not JSON
            APITimeoutError: If the request times out
        """
        url = f"{self.base_url}{endpoint}" if endpoint else self.base_url

        request_headers = self.default_headers()
        if headers:
            request_headers.update(headers)

        self.logger.debug(f"Calling LLM API: {url}", extra={"timeout": self.timeout})

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(url, headers=request_headers, json=payload)
            except TimeoutException as e:
                self.logger.warning("API timeout", extra={"url": url})
                raise APITimeoutError(f"API timeout calling {url}", original_error=e) from e
            except httpx.HTTPError as e:
                self.logger.warning("API transport error", extra={"url": url, "error": str(e)})
                raise ServiceError(f"API request failed: {e}", original_error=e) from e

        if not response.is_success:
            message = self._error_message(response)
            self.logger.warning(
                "API HTTP error",
                extra={"url": url, "status_code": response.status_code, "error": message},
            )
            raise ServiceError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ServiceError("API returned a non-JSON response", original_error=e) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Prefer the service's own ``error.message``; fall back to the status."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return f"API error: {response.status_code}"
