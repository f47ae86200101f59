"""Static catalog of selectable LLM models."""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ANTHROPIC = "anthropic"
OPENAI = "openai"


@dataclass(frozen=True)
class ModelInfo:
    """A selectable model and the provider that serves it."""

    id: str
    label: str
    provider: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"id": self.id, "label": self.label, "provider": self.provider}


DEFAULT_MODEL_ID = "claude-opus-4-20250514"

MODEL_CATALOG: Mapping[str, ModelInfo] = MappingProxyType(
    {
        info.id: info
        for info in (
            ModelInfo("claude-opus-4-20250514", "Claude Opus 4", ANTHROPIC),
            ModelInfo("claude-sonnet-4-20250514", "Claude Sonnet 4", ANTHROPIC),
            ModelInfo("claude-3-7-sonnet-20250219", "Claude 3.7 Sonnet", ANTHROPIC),
            ModelInfo("claude-3-5-haiku-20241022", "Claude 3.5 Haiku", ANTHROPIC),
            ModelInfo("gpt-4o", "GPT-4o", OPENAI),
            ModelInfo("gpt-4.1", "GPT-4.1", OPENAI),
        )
    }
)


def resolve_model(model_id: Optional[str]) -> ModelInfo:
    """
    Look up a model, falling back to the default for unknown ids.

    Args:
        model_id: Caller-supplied model id (may be None or empty)

    Returns:
        ModelInfo for the id, or for DEFAULT_MODEL_ID
    """
    info = MODEL_CATALOG.get(model_id or "")
    if info is None:
        if model_id:
            logger.info(f"Unknown model id '{model_id}', using default '{DEFAULT_MODEL_ID}'")
        return MODEL_CATALOG[DEFAULT_MODEL_ID]
    return info


def list_models() -> list:
    """List catalog entries as dictionaries."""
    return [info.to_dict() for info in MODEL_CATALOG.values()]
