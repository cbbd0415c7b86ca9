"""Template cache repository backed by Supabase's REST interface.

Template persistence is best-effort: every public method logs and swallows
datastore failures so a broken cache never fails an extraction.
"""

from typing import Any, Dict, Optional

import httpx

from illustration_ai.config import SupabaseSettings
from illustration_ai.core.exceptions import TemplateStoreError
from illustration_ai.schemas.illustration import Template
from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TemplateRepository:
    """Disabled template store. Every operation is a no-op.

    Used when the datastore is not configured; the pipeline checks
    ``enabled`` instead of testing for a missing collaborator.
    """

    enabled = False

    async def get_template(self, carrier: str, product: str) -> Optional[Template]:
        return None

    async def save_template(self, template: Template) -> bool:
        return False

    async def increment_usage(self, carrier: str, product: str) -> None:
        return None


class SupabaseTemplateRepository(TemplateRepository):
    """Template store over PostgREST row and RPC endpoints."""

    enabled = True

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "illustration_templates",
        usage_rpc: str = "increment_template_usage",
        timeout: int = 15,
    ):
        """Initialize the repository.

        Args:
            url: Supabase project URL
            key: Supabase API key, sent as both ``apikey`` and bearer token
            table: Template collection name
            usage_rpc: Name of the usage-counter procedure
            timeout: Request timeout in seconds
        """
        self.base_url = url.rstrip("/")
        self.key = key
        self.table = table
        self.usage_rpc = usage_rpc
        self.timeout = timeout
        self.logger = LOGGER

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    @property
    def rpc_url(self) -> str:
        return f"{self.base_url}/rest/v1/rpc/{self.usage_rpc}"

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(
                method, url, params=params, json=json, headers=self._headers(headers)
            )
        if not response.is_success:
            raise TemplateStoreError(
                f"Template store returned {response.status_code}: {response.text[:200]}"
            )
        return response

    async def get_template(self, carrier: str, product: str) -> Optional[Template]:
        """Exact-match lookup. Any failure is treated as a cache miss.

        Args:
            carrier: Carrier name from identification
            product: Product name from identification

        Returns:
            First matching template, or None
        """
        params = {
            "carrier": f"eq.{carrier}",
            "product": f"eq.{product}",
            "limit": "1",
        }
        try:
            response = await self._request("GET", self.table_url, params=params)
            rows = response.json()
        except (httpx.HTTPError, TemplateStoreError, ValueError) as e:
            self.logger.warning(
                "Template lookup failed",
                extra={"carrier": carrier, "product": product, "error": str(e)},
            )
            return None

        if not isinstance(rows, list) or not rows:
            return None

        try:
            return Template.model_validate(rows[0])
        except ValueError as e:
            self.logger.warning(
                "Template row has unexpected shape",
                extra={"carrier": carrier, "product": product, "error": str(e)},
            )
            return None

    async def save_template(self, template: Template) -> bool:
        """Upsert a template; rows conflicting on (carrier, product) are merged.

        Returns:
            True if the datastore accepted the write
        """
        try:
            await self._request(
                "POST",
                self.table_url,
                json=template.model_dump(),
                headers={"Prefer": "resolution=merge-duplicates"},
            )
        except (httpx.HTTPError, TemplateStoreError) as e:
            self.logger.error(
                "Failed to save template",
                extra={"carrier": template.carrier, "product": template.product, "error": str(e)},
            )
            return False

        self.logger.info(
            "Template saved",
            extra={"carrier": template.carrier, "product": template.product},
        )
        return True

    async def increment_usage(self, carrier: str, product: str) -> None:
        """Bump the usage counter. Fire-and-forget."""
        try:
            await self._request(
                "POST",
                self.rpc_url,
                json={"p_carrier": carrier, "p_product": product},
            )
        except (httpx.HTTPError, TemplateStoreError) as e:
            self.logger.warning(
                "Template usage increment failed",
                extra={"carrier": carrier, "product": product, "error": str(e)},
            )


def create_template_repository(supabase: SupabaseSettings) -> TemplateRepository:
    """Return the Supabase-backed store, or the disabled one when unconfigured."""
    if not supabase.configured:
        return TemplateRepository()
    return SupabaseTemplateRepository(
        url=supabase.url,
        key=supabase.key,
        table=supabase.template_table,
        usage_rpc=supabase.usage_rpc,
        timeout=supabase.timeout,
    )
