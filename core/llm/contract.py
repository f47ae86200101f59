"""Contract for the LLM's structured reply: a JSON object with `script` and `filename`."""

import json
import logging
import re
from dataclasses import dataclass

from core.errors import MalformedEnvelope, MissingContractField
from core.naming import sanitize_filename

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("script", "filename")

# First fenced block, optionally tagged `json`. Other tags are not unwrapped.
_FENCED_BLOCK_RE = re.compile(r"```(?:json)?[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class Envelope:
    """Validated LLM reply."""

    script: str
    filename: str  # URL-safe, no extension

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"script": self.script, "filename": self.filename}


def extract_payload(raw_text: str) -> str:
    """Unwrap a single fenced block if present, else return the trimmed text."""
    match = _FENCED_BLOCK_RE.search(raw_text)
    if match:
        logger.debug("Extracted JSON from fenced block")
        return match.group(1).strip()
    logger.debug("No fenced block found, treating whole reply as JSON")
    return raw_text.strip()


def parse_envelope(raw_text: str) -> Envelope:
    """
    Validate an LLM reply against the envelope contract.

    Args:
        raw_text: Full text returned by the provider

    Returns:
        Envelope with the script and a normalized filename

    Raises:
        MalformedEnvelope: If the payload is not a JSON object
        MissingContractField: If `script` or `filename` is absent or not a string
    """
    payload = extract_payload(raw_text or "")

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning(f"LLM reply is not valid JSON: {e}")
        raise MalformedEnvelope(
            f"Failed to parse LLM response as JSON: {e}", raw_text=raw_text
        ) from e

    if not isinstance(parsed, dict):
        raise MalformedEnvelope(
            f"LLM response JSON is a {type(parsed).__name__}, expected an object",
            raw_text=raw_text,
        )

    missing = [key for key in REQUIRED_FIELDS if not isinstance(parsed.get(key), str)]
    if missing:
        raise MissingContractField(
            f"LLM response JSON is missing string field(s): {', '.join(missing)}",
            fields=missing,
        )

    script = parsed["script"]
    if not script.strip():
        raise MissingContractField("LLM response JSON has an empty 'script'", fields=["script"])

    filename = sanitize_filename(parsed["filename"])
    logger.info(f"Envelope accepted: {len(script)} chars of script, filename '{filename}'")
    return Envelope(script=script, filename=filename)
