"""LLM-backed scene script generation."""

from .catalog import DEFAULT_MODEL_ID, MODEL_CATALOG, ModelInfo, list_models, resolve_model
from .contract import Envelope, extract_payload, parse_envelope
from .generator import ScriptGenerator
from .providers import AnthropicProvider, LLMProvider, LLMRequest, OpenAIProvider

__all__ = [
    # Catalog
    "DEFAULT_MODEL_ID",
    "MODEL_CATALOG",
    "ModelInfo",
    "list_models",
    "resolve_model",
    # Contract
    "Envelope",
    "extract_payload",
    "parse_envelope",
    # Generation
    "ScriptGenerator",
    "LLMProvider",
    "LLMRequest",
    "AnthropicProvider",
    "OpenAIProvider",
]
