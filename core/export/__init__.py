"""Scene export to glTF / GLB."""

from .exporter import GLB, GLTF, MEDIA_TYPES, ExportResult, SceneExporter
from .gltf import GltfSerializer, attach_lights, to_pbr_material

__all__ = [
    "SceneExporter",
    "ExportResult",
    "GltfSerializer",
    "attach_lights",
    "to_pbr_material",
    "GLB",
    "GLTF",
    "MEDIA_TYPES",
]
