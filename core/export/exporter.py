"""Write constructed scenes to disk as glTF assets."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from core.errors import ExportError

from .gltf import GltfSerializer

logger = logging.getLogger(__name__)

GLB = "glb"
GLTF = "gltf"

MEDIA_TYPES = {
    GLB: "model/gltf-binary",
    GLTF: "model/gltf+json",
}


@dataclass
class ExportResult:
    """A written asset."""

    path: Path
    format: str  # "glb" or "gltf"
    size_bytes: int

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self.format]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "path": str(self.path),
            "format": self.format,
            "size_bytes": self.size_bytes,
        }


def _write_atomic(path: Path, data: bytes) -> None:
    """Write via a temp file in the same directory so readers never see a partial file."""
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, path)
    except BaseException:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise


class SceneExporter:
    """
    Serialize a scene and write it to the requested location.

    GLB bytes go to the requested path. A glTF JSON document goes next to it
    with the suffix switched to `.gltf`.
    """

    def __init__(self, serializer: Optional[GltfSerializer] = None):
        self.serializer = serializer or GltfSerializer()

    def export(self, scene, desired_path: Union[str, Path]) -> ExportResult:
        """
        Export a scene.

        Args:
            scene: Kit scene returned by a script
            desired_path: Target path, normally ending in `.glb`

        Returns:
            ExportResult describing the written file

        Raises:
            ExportError: If serialization or the write fails; nothing is left on disk
        """
        desired_path = Path(desired_path)

        try:
            output = self.serializer.serialize(scene, binary=True)
        except Exception as e:
            logger.error(f"Scene serialization failed: {e}")
            raise ExportError(f"Failed to serialize scene: {e}") from e

        if isinstance(output, (bytes, bytearray)):
            path, data, fmt = desired_path, bytes(output), GLB
        elif isinstance(output, dict):
            path = desired_path.with_suffix(".gltf")
            data, fmt = json.dumps(output, indent=2).encode("utf-8"), GLTF
        else:
            raise ExportError(f"Serializer returned unsupported type {type(output).__name__}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _write_atomic(path, data)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise ExportError(f"Failed to write {path}: {e}") from e

        logger.info(f"Exported {fmt.upper()} to {path} ({len(data)} bytes)")
        return ExportResult(path=path, format=fmt, size_bytes=len(data))
