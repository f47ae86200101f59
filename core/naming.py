"""Output file naming."""

import re
import secrets
import time
from pathlib import Path

FALLBACK_NAME = "scene"
# leaves room for counters and transient suffixes under common 255-byte limits
MAX_NAME_LENGTH = 100

_EXTENSION_RE = re.compile(r"\.(glb|gltf)$")
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9_\s-]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_filename(name: str) -> str:
    """Reduce a suggested name to lowercase alphanumerics, underscores and hyphens, capped in length."""
    value = _EXTENSION_RE.sub("", (name or "").strip().lower())
    value = _INVALID_CHARS_RE.sub("", value).strip()
    value = _WHITESPACE_RE.sub("_", value)
    value = value[:MAX_NAME_LENGTH].rstrip("_-")
    return value or FALLBACK_NAME


def available_path(directory: Path, base: str, suffix: str = ".glb") -> Path:
    """
    Path in directory named after base that does not collide with an existing file.

    The first collision gets `_2`, the next `_3`, and so on. The `.gltf`
    sibling counts as a collision too since the exporter may switch to it.
    """
    base = sanitize_filename(base)
    candidate = directory / f"{base}{suffix}"
    counter = 2
    while candidate.exists() or candidate.with_suffix(".gltf").exists():
        candidate = directory / f"{base}_{counter}{suffix}"
        counter += 1
    return candidate


def unique_transient_path(directory: Path, base: str, suffix: str = ".glb") -> Path:
    """Per-request path: `<base>-<millis>-<random>` so concurrent exports never collide."""
    unique_id = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"
    return directory / f"{sanitize_filename(base)}-{unique_id}{suffix}"
