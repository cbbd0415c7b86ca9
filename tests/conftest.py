"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Callable, Dict, List
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from illustration_ai.core.vision_client import ClaudeVisionClient
from illustration_ai.main import app
from illustration_ai.prompts.illustration import (
    EXPENSES_PROMPT,
    IDENTIFY_PROMPT,
    POLICY_INFO_PROMPT,
    PROJECTIONS_PROMPT,
)
from illustration_ai.repositories.template_repository import SupabaseTemplateRepository
from illustration_ai.schemas.illustration import PageImage


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def make_pages() -> Callable[[int], List[PageImage]]:
    """Factory for distinguishable page images.

    Returns:
        Callable: Builds ``n`` pages whose data is ``page-<index>``
    """
    def _make(count: int) -> List[PageImage]:
        return [PageImage(data=f"page-{i}") for i in range(count)]

    return _make


def make_projection_rows(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "year": year,
            "age": 44 + year,
            "premium": 50000,
            "policyValue": 48000 * year,
            "surrenderValue": 45000 * year,
            "deathBenefit": 1000000,
        }
        for year in range(1, count + 1)
    ]


def make_expense_rows(count: int) -> List[Dict[str, Any]]:
    return [
        {"year": year, "premiumCharge": 5000, "coi": 2000, "adminCharge": 500, "totalCharges": 7500}
        for year in range(1, count + 1)
    ]


@pytest.fixture
def stage_responses() -> Dict[str, str]:
    """Model replies keyed by stage, for a cleanly extracted Symetra illustration."""
    return {
        IDENTIFY_PROMPT: json.dumps({"carrier": "Symetra", "product": "Accumulator Ascent IUL"}),
        POLICY_INFO_PROMPT: json.dumps(
            {
                "insuredName": "Jane Doe",
                "insuredAge": 45,
                "insuredAge2": None,
                "insuredGender": "Female",
                "riskClass": "Preferred Non-Tobacco",
                "faceAmount": 1000000,
                "premium": 50000,
                "premiumYear1": None,
                "premiumYear2Plus": None,
                "exchange1035": None,
                "state": "WA",
            }
        ),
        PROJECTIONS_PROMPT: json.dumps({"projections": make_projection_rows(12)}),
        EXPENSES_PROMPT: json.dumps({"expenses": make_expense_rows(8)}),
    }


@pytest.fixture
def mock_vision_client(stage_responses: Dict[str, str]) -> Mock:
    """Vision client whose reply depends on the stage instruction.

    Tests adjust ``stage_responses`` before running the pipeline to change
    what a given stage returns.
    """
    client = Mock(spec=ClaudeVisionClient)

    async def _invoke(images, instruction):
        return stage_responses[instruction]

    client.invoke = AsyncMock(side_effect=_invoke)
    return client


@pytest.fixture
def mock_template_repository() -> Mock:
    """Enabled template repository with no stored templates."""
    repository = Mock(spec=SupabaseTemplateRepository)
    repository.enabled = True
    repository.get_template = AsyncMock(return_value=None)
    repository.save_template = AsyncMock(return_value=True)
    repository.increment_usage = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def mock_httpx_client() -> AsyncMock:
    """Create mock httpx client usable as an async context manager.

    Returns:
        AsyncMock: Mocked httpx client
    """
    client = AsyncMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = None
    return client


def make_http_response(status_code: int = 200, body: Any = None, text: str = "") -> Mock:
    """Build a stand-in for ``httpx.Response``."""
    response = Mock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http_response() -> Callable[..., Mock]:
    return make_http_response


@pytest.fixture
def projection_rows() -> Callable[[int], List[Dict[str, Any]]]:
    return make_projection_rows


@pytest.fixture
def expense_rows() -> Callable[[int], List[Dict[str, Any]]]:
    return make_expense_rows
