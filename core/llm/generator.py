"""Turns prompts into validated scene-script envelopes."""

import logging
from typing import Dict, Optional

from core.config import SceneGenConfig
from core.errors import CredentialMissing, InvalidRequest

from .catalog import ModelInfo, resolve_model
from .contract import Envelope, parse_envelope
from .prompts import (
    CREATE_SYSTEM_INSTRUCTION,
    REFINE_SYSTEM_INSTRUCTION,
    build_create_content,
    build_refine_content,
)
from .providers import PROVIDER_CLASSES, LLMProvider, LLMRequest

logger = logging.getLogger(__name__)

_CREDENTIAL_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class ScriptGenerator:
    """
    Ask an LLM for a scene script and validate its reply.

    Providers are created on first use from the config's API keys; tests may
    pass pre-built providers keyed by provider name.
    """

    def __init__(self, config: SceneGenConfig, providers: Optional[Dict[str, LLMProvider]] = None):
        self.config = config
        self._providers: Dict[str, LLMProvider] = dict(providers or {})

    def resolve(self, model_id: Optional[str]) -> ModelInfo:
        """Normalize a model id through the catalog."""
        return resolve_model(model_id)

    def provider_for(self, model: ModelInfo) -> LLMProvider:
        """
        Get the provider serving a model.

        Raises:
            CredentialMissing: If no API key is configured for the provider
        """
        if model.provider in self._providers:
            return self._providers[model.provider]

        api_key = self.config.api_key_for(model.provider)
        if not api_key:
            env_var = _CREDENTIAL_VARS.get(model.provider, "the provider API key")
            raise CredentialMissing(
                f"{env_var} is not set. Set it in the environment or in a .env file to use {model.id}."
            )

        provider = PROVIDER_CLASSES[model.provider](api_key, timeout=self.config.request_timeout)
        self._providers[model.provider] = provider
        return provider

    async def generate_from_prompt(self, prompt_text: str, model_id: Optional[str] = None) -> Envelope:
        """
        Generate a new scene script.

        Args:
            prompt_text: Natural-language scene description
            model_id: Catalog id; unknown or missing ids use the default model

        Returns:
            Validated Envelope

        Raises:
            InvalidRequest: Empty prompt
            CredentialMissing: No key for the model's provider
            ProviderError: Upstream call failed
            MalformedEnvelope / MissingContractField: Reply violates the contract
        """
        if not prompt_text or not prompt_text.strip():
            raise InvalidRequest("Prompt is required")

        logger.info(f"Received prompt: \"{prompt_text}\"")
        return await self._complete(
            model_id,
            CREATE_SYSTEM_INSTRUCTION,
            build_create_content(prompt_text),
        )

    async def refine_from_prior_script(
        self,
        prior_script: str,
        refinement_text: str,
        model_id: Optional[str] = None,
    ) -> Envelope:
        """Generate a complete replacement for a prior script given a requested change."""
        if not prior_script or not prior_script.strip():
            raise InvalidRequest("Original script is required")
        if not refinement_text or not refinement_text.strip():
            raise InvalidRequest("Refinement prompt is required")

        logger.info(f"Received refinement: \"{refinement_text}\"")
        return await self._complete(
            model_id,
            REFINE_SYSTEM_INSTRUCTION,
            build_refine_content(prior_script, refinement_text),
        )

    async def _complete(self, model_id: Optional[str], system_instruction: str, user_content: str) -> Envelope:
        model = self.resolve(model_id)
        provider = self.provider_for(model)
        logger.info(f"Using model {model.id} ({model.provider})")

        raw_text = await provider.complete(
            LLMRequest(
                model_id=model.id,
                system_instruction=system_instruction,
                max_output_tokens=self.config.max_output_tokens,
                user_content=user_content,
            )
        )
        return parse_envelope(raw_text)
