"""Domain types for illustration extraction.

Row and policy records are kept as plain dicts shaped like the TypedDicts
below. The model's output is passed through as returned: rows are not
re-sorted and ``policyValue >= surrenderValue`` is not enforced.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from illustration_ai.core.exceptions import InvalidInputError

UNKNOWN = "Unknown"

_DATA_URL = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class PageImage:
    """One base64-encoded page raster plus its media type."""

    data: str
    media_type: str = "image/jpeg"

    @classmethod
    def from_payload(cls, payload: str) -> "PageImage":
        """Build from bare base64 or a ``data:<media>;base64,`` URL."""
        if not isinstance(payload, str) or not payload:
            raise InvalidInputError("Each image must be a non-empty base64 string")
        match = _DATA_URL.match(payload)
        if match:
            return cls(data=match.group("data"), media_type=match.group("media_type"))
        return cls(data=payload)


class PolicyInfo(TypedDict, total=False):
    insuredName: Optional[str]
    insuredAge: Optional[int]
    insuredAge2: Optional[int]
    insuredGender: Optional[str]
    riskClass: Optional[str]
    faceAmount: Optional[float]
    premium: Optional[float]
    premiumYear1: Optional[float]
    premiumYear2Plus: Optional[float]
    exchange1035: Optional[float]
    state: Optional[str]


class ProjectionRow(TypedDict, total=False):
    year: int
    age: int
    premium: float
    policyValue: float
    surrenderValue: float
    deathBenefit: float


class ExpenseRow(TypedDict, total=False):
    year: int
    premiumCharge: float
    coi: float
    adminCharge: float
    totalCharges: float


class DocumentStructure(BaseModel):
    """Carrier and product identified from the opening pages."""

    carrier: str = UNKNOWN
    product: str = UNKNOWN

    @classmethod
    def from_parsed(cls, parsed: Optional[Dict[str, Any]]) -> "DocumentStructure":
        if not parsed:
            return cls()
        carrier = parsed.get("carrier")
        product = parsed.get("product")
        return cls(
            carrier=str(carrier) if carrier else UNKNOWN,
            product=str(product) if product else UNKNOWN,
        )

    @property
    def is_known(self) -> bool:
        return self.carrier != UNKNOWN


class Template(BaseModel):
    """Cached extraction metadata for one (carrier, product) pair."""

    model_config = ConfigDict(extra="allow")

    carrier: str
    product: str
    page_signatures: Dict[str, Any] = Field(default_factory=dict)
    field_patterns: Dict[str, Any] = Field(default_factory=dict)
    table_patterns: Dict[str, Any] = Field(default_factory=dict)
    sample_extraction: Dict[str, Any] = Field(default_factory=dict)
    usage_count: int = 1

    @field_validator(
        "page_signatures", "field_patterns", "table_patterns", "sample_extraction", mode="before"
    )
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        # Stored rows may carry SQL nulls in the jsonb columns.
        return {} if value is None else value

    @field_validator("usage_count", mode="before")
    @classmethod
    def _null_usage(cls, value: Any) -> Any:
        return 1 if value is None else value


class ExtractionResult(BaseModel):
    """Aggregate returned to the caller for one pipeline run."""

    model_config = ConfigDict(populate_by_name=True)

    carrier: str
    product: str
    policy_info: Dict[str, Any] = Field(default_factory=dict, alias="policyInfo")
    projections: List[Any] = Field(default_factory=list)
    expenses: List[Any] = Field(default_factory=list)
    template_used: bool = Field(default=False, alias="templateUsed")
    confidence: float
