"""Runs a request through generation, execution and export."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from core.config import SceneGenConfig
from core.errors import InvalidRequest, PipelineFailure, SceneGenError
from core.export import ExportResult, SceneExporter
from core.llm import Envelope, ScriptGenerator
from core.sandbox import execute_script
from core.scene_kit import SceneKit

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Stages a request passes through."""

    RECEIVED = "received"
    GENERATING = "generating"
    EXECUTING = "executing"
    EXPORTING = "exporting"
    COMPLETED = "completed"
    FAILED = "failed"


class RequestMode(str, Enum):
    CREATE = "create"
    REFINE = "refine"


@dataclass
class GenerationRequest:
    """A scene to create from a prompt, or a prior script to refine."""

    prompt_text: str = ""
    model_id: Optional[str] = None
    mode: RequestMode = RequestMode.CREATE
    prior_script: Optional[str] = None
    refinement_text: Optional[str] = None

    @classmethod
    def create(cls, prompt_text: str, model_id: Optional[str] = None) -> "GenerationRequest":
        return cls(prompt_text=prompt_text, model_id=model_id)

    @classmethod
    def refine(cls, prior_script: str, refinement_text: str, model_id: Optional[str] = None) -> "GenerationRequest":
        return cls(
            prompt_text=refinement_text,
            model_id=model_id,
            mode=RequestMode.REFINE,
            prior_script=prior_script,
            refinement_text=refinement_text,
        )

    def validate(self) -> None:
        """
        Raises:
            InvalidRequest: If a field the mode requires is empty
        """
        if self.mode == RequestMode.CREATE:
            if not self.prompt_text or not self.prompt_text.strip():
                raise InvalidRequest("Prompt is required")
        else:
            if not self.prior_script or not self.prior_script.strip():
                raise InvalidRequest("Original script is required")
            if not self.refinement_text or not self.refinement_text.strip():
                raise InvalidRequest("Refinement prompt is required")


@dataclass
class PipelineResult:
    """Outcome of a successful run."""

    envelope: Envelope
    model_id: str
    export: ExportResult
    stages: List[PipelineStage] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "envelope": self.envelope.to_dict(),
            "model_id": self.model_id,
            "export": self.export.to_dict(),
            "stages": [stage.value for stage in self.stages],
        }


class ScenePipeline:
    """
    Generate, execute and export one scene per run.

    Runs share no state beyond the read-only kit and model catalog. Any stage
    failure stops the run and surfaces as PipelineFailure tagged with the
    stage; nothing is retried.
    """

    def __init__(
        self,
        generator: ScriptGenerator,
        exporter: SceneExporter,
        capability: SceneKit,
        executor: Callable = execute_script,
    ):
        self.generator = generator
        self.exporter = exporter
        self.capability = capability
        self.executor = executor

    async def run(self, request: GenerationRequest, path_for: Callable[[str], Path]) -> PipelineResult:
        """
        Run one request.

        Args:
            request: What to generate
            path_for: Maps the envelope's filename to the output path

        Returns:
            PipelineResult with the envelope and the written asset

        Raises:
            PipelineFailure: Wrapping the failing stage's SceneGenError
        """
        stages: List[PipelineStage] = []
        stage = PipelineStage.RECEIVED

        def advance(next_stage: PipelineStage) -> PipelineStage:
            logger.info(f"Pipeline stage: {stage.value} -> {next_stage.value}")
            stages.append(next_stage)
            return next_stage

        stages.append(stage)
        logger.info(f"Pipeline received {request.mode.value} request")

        try:
            request.validate()
            model = self.generator.resolve(request.model_id)

            stage = advance(PipelineStage.GENERATING)
            if request.mode == RequestMode.REFINE:
                envelope = await self.generator.refine_from_prior_script(
                    request.prior_script, request.refinement_text, model.id
                )
            else:
                envelope = await self.generator.generate_from_prompt(request.prompt_text, model.id)

            stage = advance(PipelineStage.EXECUTING)
            scene = self.executor(envelope.script, self.capability)

            stage = advance(PipelineStage.EXPORTING)
            export = self.exporter.export(scene, path_for(envelope.filename))

        except SceneGenError as e:
            logger.error(f"Pipeline failed at {stage.value}: {e.message}")
            stages.append(PipelineStage.FAILED)
            raise PipelineFailure(stage.value, e) from e

        advance(PipelineStage.COMPLETED)
        return PipelineResult(envelope=envelope, model_id=model.id, export=export, stages=stages)


def build_pipeline(config: Optional[SceneGenConfig] = None) -> ScenePipeline:
    """Wire a pipeline from configuration."""
    config = config or SceneGenConfig.from_env()
    return ScenePipeline(
        generator=ScriptGenerator(config),
        exporter=SceneExporter(),
        capability=SceneKit(),
    )
