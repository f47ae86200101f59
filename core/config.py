"""Configuration management."""

import os
from dataclasses import dataclass


@dataclass
class SceneGenConfig:
    """Scene generator configuration."""

    # LLM providers
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Request limits
    max_output_tokens: int = 2048
    request_timeout: float = 120.0

    # Output locations
    output_dir: str = "glb"  # CLI
    temp_dir: str = "temp_glb_files"  # API, deleted after each response

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "SceneGenConfig":
        """Load configuration from environment variables."""
        return cls(
            # Providers
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),

            # Limits
            max_output_tokens=int(os.getenv("SCENEGEN_MAX_OUTPUT_TOKENS", "2048")),
            request_timeout=float(os.getenv("SCENEGEN_REQUEST_TIMEOUT", "120")),

            # Storage
            output_dir=os.getenv("SCENEGEN_OUTPUT_DIR", "glb"),
            temp_dir=os.getenv("SCENEGEN_TEMP_DIR", "temp_glb_files"),

            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def is_anthropic_configured(self) -> bool:
        """Check if the Anthropic API key is set."""
        return bool(self.anthropic_api_key)

    def is_openai_configured(self) -> bool:
        """Check if the OpenAI API key is set."""
        return bool(self.openai_api_key)

    def api_key_for(self, provider: str) -> str:
        """Return the API key for a provider name, or an empty string."""
        return {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }.get(provider, "")
