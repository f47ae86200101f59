"""Scene generation routes."""

import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.background import BackgroundTask

from core.config import SceneGenConfig
from core.errors import InvalidRequest, PipelineFailure
from core.llm import DEFAULT_MODEL_ID, list_models
from core.naming import unique_transient_path
from core.pipeline import GenerationRequest, PipelineResult, ScenePipeline, build_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()

SCRIPT_HEADER = "X-Scene-Script"
FILENAME_HEADER = "X-Scene-Filename"
MODEL_HEADER = "X-Scene-Model"
EXPOSED_HEADERS = [SCRIPT_HEADER, FILENAME_HEADER, MODEL_HEADER]

_config: Optional[SceneGenConfig] = None
_pipeline: Optional[ScenePipeline] = None


def get_config() -> SceneGenConfig:
    """Get or load the service configuration."""
    global _config
    if _config is None:
        _config = SceneGenConfig.from_env()
    return _config


def get_pipeline() -> ScenePipeline:
    """Get or create the shared pipeline."""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(get_config())
    return _pipeline


def get_temp_dir() -> Path:
    """Directory for per-request assets; created on demand."""
    temp_dir = Path(get_config().temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


class GenerateSceneRequest(BaseModel):
    """Create a scene from a description."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    model_id: Optional[str] = Field(default=None, alias="modelId")


class RefineSceneRequest(BaseModel):
    """Rewrite a previously generated script."""

    model_config = ConfigDict(populate_by_name=True)

    original_script: Optional[str] = Field(default=None, alias="originalScript")
    refinement_prompt: Optional[str] = Field(default=None, alias="refinementPrompt")
    model_id: Optional[str] = Field(default=None, alias="modelId")


def _delete_transient(path: Path) -> None:
    """Remove a served asset; failure is logged only."""
    try:
        os.unlink(path)
        logger.info(f"Deleted temporary file {path}")
    except OSError as e:
        logger.error(f"Error deleting temporary file {path}: {e}")


def _asset_response(result: PipelineResult) -> FileResponse:
    export = result.export
    headers = {
        SCRIPT_HEADER: quote(result.envelope.script, safe=""),
        FILENAME_HEADER: result.envelope.filename,
        MODEL_HEADER: result.model_id,
    }
    return FileResponse(
        export.path,
        media_type=export.media_type,
        filename=f"{result.envelope.filename}.{export.format}",
        headers=headers,
        background=BackgroundTask(_delete_transient, export.path),
    )


async def _run(request: GenerationRequest, pipeline: ScenePipeline, temp_dir: Path):
    try:
        request.validate()
    except InvalidRequest as e:
        return JSONResponse(status_code=e.http_status, content=e.to_dict())

    try:
        result = await pipeline.run(request, lambda name: unique_transient_path(temp_dir, name))
    except PipelineFailure as e:
        logger.error(f"Failed in API generation pipeline: {e.message}")
        return JSONResponse(status_code=e.http_status, content=e.to_dict())

    logger.info(f"Serving {result.export.path.name} ({result.export.size_bytes} bytes)")
    return _asset_response(result)


@router.post("/generate-scene")
async def generate_scene(
    body: GenerateSceneRequest,
    pipeline: ScenePipeline = Depends(get_pipeline),
    temp_dir: Path = Depends(get_temp_dir),
):
    """Generate a scene from a prompt and return it as GLB."""
    logger.info(f"API request - prompt: {body.prompt}")
    request = GenerationRequest.create(body.prompt, model_id=body.model_id)
    return await _run(request, pipeline, temp_dir)


@router.post("/refine-scene")
async def refine_scene(
    body: RefineSceneRequest,
    pipeline: ScenePipeline = Depends(get_pipeline),
    temp_dir: Path = Depends(get_temp_dir),
):
    """Apply a requested change to a prior script and return the new scene."""
    logger.info(f"API request - refinement: {body.refinement_prompt}")
    request = GenerationRequest.refine(
        body.original_script, body.refinement_prompt, model_id=body.model_id
    )
    return await _run(request, pipeline, temp_dir)


@router.get("/models")
async def get_models():
    """List selectable models."""
    return {
        "models": list_models(),
        "default": DEFAULT_MODEL_ID,
    }
