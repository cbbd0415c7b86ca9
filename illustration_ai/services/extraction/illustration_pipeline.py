"""Multi-stage extraction pipeline for life-insurance illustrations.

Stages run in a fixed order:

1. identify carrier and product
2. template cache lookup keyed by (carrier, product)
3. policy fields
4. year-by-year projections
5. year-by-year expenses

followed by template write-back. Each model stage sends a page subset and
an instruction to the vision client and parses the reply leniently; an
unparsable reply degrades that stage to its default instead of failing the
run. A vision client failure aborts the whole run.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from illustration_ai.core.exceptions import InvalidInputError
from illustration_ai.core.vision_client import ClaudeVisionClient
from illustration_ai.prompts.illustration import (
    EXPENSES_PROMPT,
    IDENTIFY_PROMPT,
    POLICY_INFO_PROMPT,
    PROJECTIONS_PROMPT,
)
from illustration_ai.repositories.template_repository import TemplateRepository
from illustration_ai.schemas.illustration import (
    DocumentStructure,
    ExtractionResult,
    PageImage,
    Template,
)
from illustration_ai.services.extraction import page_selection
from illustration_ai.utils.json_parser import parse_json_safely
from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)

TEMPLATE_MIN_PROJECTIONS = 5


def compute_confidence(projection_count: int) -> float:
    """Completeness proxy from the number of projection rows."""
    if projection_count >= 10:
        return 0.9
    if projection_count >= 5:
        return 0.7
    return 0.5


def _list_field(key: str) -> Callable[[Optional[Dict[str, Any]]], List[Any]]:
    def merge(parsed: Optional[Dict[str, Any]]) -> List[Any]:
        value = (parsed or {}).get(key)
        return value if isinstance(value, list) else []

    return merge


@dataclass(frozen=True)
class ExtractionStage:
    """One model call: which pages, what to ask, how to default the answer."""

    name: str
    instruction: str
    select_pages: Callable[[int], slice]
    merge: Callable[[Optional[Dict[str, Any]]], Any]


IDENTIFY_STAGE = ExtractionStage(
    name="identify",
    instruction=IDENTIFY_PROMPT,
    select_pages=page_selection.identify_pages,
    merge=DocumentStructure.from_parsed,
)

POLICY_INFO_STAGE = ExtractionStage(
    name="policy_info",
    instruction=POLICY_INFO_PROMPT,
    select_pages=page_selection.policy_info_pages,
    merge=lambda parsed: parsed or {},
)

PROJECTIONS_STAGE = ExtractionStage(
    name="projections",
    instruction=PROJECTIONS_PROMPT,
    select_pages=page_selection.projection_pages,
    merge=_list_field("projections"),
)

EXPENSES_STAGE = ExtractionStage(
    name="expenses",
    instruction=EXPENSES_PROMPT,
    select_pages=page_selection.expense_pages,
    merge=_list_field("expenses"),
)

# Independent of each other once identification is done.
DETAIL_STAGES = (POLICY_INFO_STAGE, PROJECTIONS_STAGE, EXPENSES_STAGE)


class IllustrationExtractionPipeline:
    """Orchestrates one extraction run over a set of page images.

    Attributes:
        vision_client: Client used for every model stage
        template_repository: Template cache; a disabled repository turns
            both the lookup and the write-back off
        parallel_stages: Run policy, projection and expense stages concurrently
    """

    def __init__(
        self,
        vision_client: ClaudeVisionClient,
        template_repository: TemplateRepository,
        parallel_stages: bool = False,
        template_min_projections: int = TEMPLATE_MIN_PROJECTIONS,
    ):
        self.vision_client = vision_client
        self.template_repository = template_repository
        self.parallel_stages = parallel_stages
        self.template_min_projections = template_min_projections

    async def run(self, images: Sequence[PageImage]) -> ExtractionResult:
        """Extract an illustration.

        Args:
            images: Page images in document order

        Returns:
            ExtractionResult: Merged stage outputs with a confidence score

        Raises:
            InvalidInputError: If no images are given
            ServiceError: If any model call fails; no partial result is kept
        """
        if not images:
            raise InvalidInputError("No images provided")

        LOGGER.info(f"Processing {len(images)} page images...")

        structure: DocumentStructure = await self._run_stage(IDENTIFY_STAGE, images)
        LOGGER.info(f"Identified: {structure.carrier} - {structure.product}")

        template = await self._lookup_template(structure)
        template_used = template is not None

        if self.parallel_stages:
            policy_info, projections, expenses = await self._run_concurrently(DETAIL_STAGES, images)
        else:
            policy_info = await self._run_stage(POLICY_INFO_STAGE, images)
            projections = await self._run_stage(PROJECTIONS_STAGE, images)
            expenses = await self._run_stage(EXPENSES_STAGE, images)

        await self._write_back(structure, template_used, policy_info, projections, expenses)

        LOGGER.info(
            f"Extraction complete: {len(projections)} projection years, {len(expenses)} expense years"
        )

        return ExtractionResult(
            carrier=structure.carrier,
            product=structure.product,
            policy_info=policy_info,
            projections=projections,
            expenses=expenses,
            template_used=template_used,
            confidence=compute_confidence(len(projections)),
        )

    async def _run_stage(self, stage: ExtractionStage, images: Sequence[PageImage]) -> Any:
        pages = list(images[stage.select_pages(len(images))])
        response_text = await self.vision_client.invoke(pages, stage.instruction)

        parsed = parse_json_safely(response_text)
        if parsed is None:
            LOGGER.warning(
                f"Stage '{stage.name}' returned no parsable JSON, using default",
                extra={"stage": stage.name, "pages": len(pages)},
            )
        return stage.merge(parsed)

    async def _run_concurrently(
        self, stages: Sequence[ExtractionStage], images: Sequence[PageImage]
    ) -> List[Any]:
        """Run stages together; the first failure cancels the rest before re-raising."""
        tasks = [asyncio.ensure_future(self._run_stage(stage, images)) for stage in stages]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _lookup_template(self, structure: DocumentStructure) -> Optional[Template]:
        if not self.template_repository.enabled or not structure.is_known:
            return None

        template = await self._best_effort(
            "template lookup",
            lambda: self.template_repository.get_template(structure.carrier, structure.product),
        )
        if template:
            LOGGER.info("Found existing template")
        return template

    async def _write_back(
        self,
        structure: DocumentStructure,
        template_used: bool,
        policy_info: Dict[str, Any],
        projections: List[Any],
        expenses: List[Any],
    ) -> None:
        if not self.template_repository.enabled:
            return

        if template_used:
            await self._best_effort(
                "template usage increment",
                lambda: self.template_repository.increment_usage(structure.carrier, structure.product),
            )
        elif structure.is_known and len(projections) >= self.template_min_projections:
            LOGGER.info("Saving new template...")
            template = Template(
                carrier=structure.carrier,
                product=structure.product,
                sample_extraction={
                    "policyInfo": policy_info,
                    "projectionsCount": len(projections),
                    "expensesCount": len(expenses),
                },
                usage_count=1,
            )
            await self._best_effort(
                "template save",
                lambda: self.template_repository.save_template(template),
            )

    @staticmethod
    async def _best_effort(action: str, call: Callable[[], Awaitable[Any]]) -> Any:
        """Await a cache-side call; failures are logged and never reach the result."""
        try:
            return await call()
        except Exception as e:
            LOGGER.error(f"Unexpected failure during {action}", exc_info=True, extra={"error": str(e)})
            return None
