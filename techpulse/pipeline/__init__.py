"""Ingestion pipeline orchestration."""

from techpulse.pipeline.orchestrator import IngestionPipeline

__all__ = ["IngestionPipeline"]
