"""Illustration extraction services."""

from illustration_ai.services.extraction.illustration_pipeline import (
    ExtractionStage,
    IllustrationExtractionPipeline,
    compute_confidence,
)

__all__ = [
    "ExtractionStage",
    "IllustrationExtractionPipeline",
    "compute_confidence",
]
