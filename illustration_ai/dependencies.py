"""Dependency injection for the FastAPI application.

Collaborators are built once per request from settings and handed to the
pipeline, so tests can swap any of them through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends

from illustration_ai.config import Settings, get_settings
from illustration_ai.core.exceptions import ConfigurationError
from illustration_ai.core.vision_client import ClaudeVisionClient
from illustration_ai.repositories.template_repository import (
    TemplateRepository,
    create_template_repository,
)
from illustration_ai.services.extraction.illustration_pipeline import IllustrationExtractionPipeline


def get_vision_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ClaudeVisionClient:
    """Build the vision client.

    Raises:
        ConfigurationError: If the Anthropic API key is not configured
    """
    anthropic = settings.anthropic
    if not anthropic.configured:
        raise ConfigurationError("Server not configured: missing Anthropic API key")

    return ClaudeVisionClient(
        api_key=anthropic.api_key,
        model=anthropic.model,
        base_url=anthropic.api_url,
        api_version=anthropic.api_version,
        max_tokens=anthropic.max_tokens,
        timeout=anthropic.timeout,
    )


def get_template_repository(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TemplateRepository:
    """Supabase-backed repository, or the disabled one when unconfigured."""
    return create_template_repository(settings.supabase)


def get_extraction_pipeline(
    settings: Annotated[Settings, Depends(get_settings)],
    vision_client: Annotated[ClaudeVisionClient, Depends(get_vision_client)],
    template_repository: Annotated[TemplateRepository, Depends(get_template_repository)],
) -> IllustrationExtractionPipeline:
    return IllustrationExtractionPipeline(
        vision_client=vision_client,
        template_repository=template_repository,
        parallel_stages=settings.extraction.parallel_stages,
        template_min_projections=settings.extraction.template_min_projections,
    )
