"""Pydantic response models for illustration parsing."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from illustration_ai.schemas.illustration import ExtractionResult


class ParseIllustrationResponse(BaseModel):
    """Successful extraction, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    carrier: str
    product: str
    policy_info: Dict[str, Any] = Field(default_factory=dict, alias="policyInfo")
    projections: List[Any] = Field(default_factory=list)
    expenses: List[Any] = Field(default_factory=list)
    template_used: bool = Field(default=False, alias="templateUsed")
    confidence: float

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ParseIllustrationResponse":
        return cls(**result.model_dump())


class ErrorResponse(BaseModel):
    """Single error object returned for every failed request."""

    success: bool = False
    error: str = Field(..., description="Human-readable failure message")


class HealthCheckResponse(BaseModel):
    status: str
    version: str
    service: str
    templates_enabled: bool
