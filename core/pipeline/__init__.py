"""Scene generation pipeline."""

from .orchestrator import (
    GenerationRequest,
    PipelineResult,
    PipelineStage,
    RequestMode,
    ScenePipeline,
    build_pipeline,
)

__all__ = [
    "GenerationRequest",
    "PipelineResult",
    "PipelineStage",
    "RequestMode",
    "ScenePipeline",
    "build_pipeline",
]
