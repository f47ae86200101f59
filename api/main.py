"""Scene Generator FastAPI Application"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv
load_dotenv()  # Load .env file

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import health, scenes

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    temp_dir = scenes.get_temp_dir()
    config = scenes.get_config()
    logger.info(f"Starting Scene Generator API (temp dir: {temp_dir})")
    if not (config.is_anthropic_configured() or config.is_openai_configured()):
        logger.warning("No LLM provider key configured; set ANTHROPIC_API_KEY or OPENAI_API_KEY")
    yield
    logger.info("Shutting down Scene Generator API...")


app = FastAPI(
    title="Scene Generator",
    description="Prompt-to-GLB 3D scene generation API",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for browser clients; scene metadata travels in headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=scenes.EXPOSED_HEADERS,
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(scenes.router, tags=["Scenes"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Scene Generator",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs",
    }
