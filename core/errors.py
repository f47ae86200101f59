"""Error taxonomy for the scene generation pipeline."""

from typing import Optional


class SceneGenError(Exception):
    """Base exception for scene generation errors."""

    http_status = 500

    def __init__(self, message: str, error_type: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.error_type = error_type

    def to_dict(self) -> dict:
        """Convert to dictionary for response bodies."""
        return {
            "error": self.message,
            "error_type": self.error_type,
        }


class InvalidRequest(SceneGenError):
    """Caller supplied an incomplete or empty request."""

    http_status = 400

    def __init__(self, message: str):
        super().__init__(message, error_type="invalid_request")


class CredentialMissing(SceneGenError):
    """No API key configured for the selected provider."""

    def __init__(self, message: str):
        super().__init__(message, error_type="credential_missing")


class ProviderError(SceneGenError):
    """The upstream LLM call failed."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message, error_type="provider_error")
        self.provider = provider


class MalformedEnvelope(SceneGenError):
    """LLM reply could not be parsed as a JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message, error_type="malformed_envelope")
        self.raw_text = raw_text


class MissingContractField(SceneGenError):
    """LLM reply parsed but lacks a required string field."""

    def __init__(self, message: str, fields: Optional[list] = None):
        super().__init__(message, error_type="missing_contract_field")
        self.fields = fields or []


class ScriptSyntaxError(SceneGenError):
    """Script text does not compile under the sandbox grammar."""

    def __init__(self, message: str, lineno: Optional[int] = None):
        super().__init__(message, error_type="script_syntax_error")
        self.lineno = lineno


class ScriptRuntimeError(SceneGenError):
    """Script raised while running."""

    def __init__(self, message: str):
        super().__init__(message, error_type="script_runtime_error")


class ScriptContractViolation(SceneGenError):
    """Script ran but did not return a scene."""

    def __init__(self, message: str):
        super().__init__(message, error_type="script_contract_violation")


class ExportError(SceneGenError):
    """Serializing or writing the scene failed."""

    def __init__(self, message: str):
        super().__init__(message, error_type="export_error")


class PipelineFailure(SceneGenError):
    """A pipeline stage failed; wraps the originating error."""

    def __init__(self, stage: str, error: SceneGenError):
        super().__init__(f"{stage} failed: {error.message}", error_type=error.error_type)
        self.stage = stage
        self.error = error
        self.http_status = error.http_status

    def to_dict(self) -> dict:
        """Convert to dictionary for response bodies."""
        data = super().to_dict()
        data["stage"] = self.stage
        return data
