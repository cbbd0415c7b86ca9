"""Pydantic request models for illustration parsing."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParseIllustrationRequest(BaseModel):
    """Request model for the illustration parsing endpoint.

    Attributes:
        images: Base64 page images in document order; bare base64 is taken
            as JPEG, ``data:`` URLs carry their own media type
        pages_text: Optional per-page text layer, accepted for clients that
            send it but not used by the extraction stages
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "images": ["/9j/4AAQSkZJRgABAQAAAQABAAD..."],
                    "pagesText": ["Symetra Accumulator Ascent IUL ..."],
                }
            ]
        },
    )

    images: Optional[List[str]] = Field(
        default=None,
        description="Base64-encoded page images",
    )
    pages_text: Optional[List[str]] = Field(
        default=None,
        alias="pagesText",
        description="Optional text extracted from each page",
    )
