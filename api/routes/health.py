"""Health check routes."""

from fastapi import APIRouter, Depends

from core.config import SceneGenConfig

from .scenes import get_config

router = APIRouter()


@router.get("/healthz")
async def liveness():
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health")
async def health_check(config: SceneGenConfig = Depends(get_config)):
    """Health check endpoint with provider configuration status."""
    return {
        "status": "healthy",
        "providers": {
            "anthropic": config.is_anthropic_configured(),
            "openai": config.is_openai_configured(),
        },
    }
