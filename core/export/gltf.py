"""glTF serialization of scene-kit graphs via trimesh."""

import json
import logging
from typing import Dict, List, Tuple, Union

import numpy as np
import trimesh
from trimesh.visual.material import PBRMaterial

from core.scene_kit import (
    AmbientLight,
    DirectionalLight,
    Light,
    Material,
    Mesh,
    Object3D,
    PointLight,
    Scene,
    SpotLight,
    geometry_trimesh,
    local_matrix,
)

logger = logging.getLogger(__name__)

BASE_FRAME = "world"
GENERATOR = "scenegen"
LIGHTS_EXTENSION = "KHR_lights_punctual"


class _NameRegistry:
    """Hands out unique node names; glTF consumers key nodes by name."""

    def __init__(self):
        self._used = {BASE_FRAME}

    def claim(self, node: Object3D, index: int) -> str:
        base = node.name.strip() or f"{type(node).__name__.lower()}_{index}"
        name = base
        suffix = 2
        while name in self._used:
            name = f"{base}_{suffix}"
            suffix += 1
        self._used.add(name)
        return name


def to_pbr_material(material: Material, fallback_name: str) -> PBRMaterial:
    """Map a kit material onto a glTF metallic-roughness material."""
    kwargs = {}
    if material.opacity < 1.0:
        kwargs["alphaMode"] = "BLEND"
    return PBRMaterial(
        name=material.name or fallback_name,
        baseColorFactor=[*material.color, material.opacity],
        metallicFactor=material.metalness,
        roughnessFactor=material.roughness,
        emissiveFactor=list(material.emissive),
        doubleSided=material.double_sided,
        **kwargs,
    )


def _look_at(position: np.ndarray, target: np.ndarray) -> np.ndarray:
    """Rotation whose -Z axis points from position to target (glTF light direction)."""
    direction = target - position
    length = np.linalg.norm(direction)
    direction = direction / length if length > 1e-9 else np.array([0.0, -1.0, 0.0])
    z_axis = -direction
    up = np.array([0.0, 1.0, 0.0])
    if abs(np.dot(up, z_axis)) > 0.999:
        up = np.array([0.0, 0.0, 1.0])
    x_axis = np.cross(up, z_axis)
    x_axis /= np.linalg.norm(x_axis)
    y_axis = np.cross(z_axis, x_axis)
    rotation = np.eye(4)
    rotation[:3, 0] = x_axis
    rotation[:3, 1] = y_axis
    rotation[:3, 2] = z_axis
    return rotation


def node_matrix(node: Object3D) -> np.ndarray:
    """Local matrix for export; aimed lights face their target instead of using rotation."""
    if isinstance(node, DirectionalLight):
        position = np.array(node.position.to_tuple())
        translate = trimesh.transformations.translation_matrix(position)
        return translate @ _look_at(position, np.array(node.target.to_tuple()))
    return local_matrix(node)


def light_definition(name: str, light: Light) -> dict:
    """KHR_lights_punctual entry for a directional, point or spot light."""
    definition = {
        "name": name,
        "type": light.light_type,
        "color": [float(c) for c in light.color],
        "intensity": light.intensity,
    }
    if isinstance(light, (PointLight, SpotLight)) and light.distance > 0:
        definition["range"] = light.distance
    if isinstance(light, SpotLight):
        definition["spot"] = {
            "innerConeAngle": light.angle * (1.0 - light.penumbra),
            "outerConeAngle": light.angle,
        }
    return definition


def attach_lights(tree: dict, lights: List[Tuple[str, Light]]) -> None:
    """Bind lights to their named nodes in a glTF tree, in place."""
    if not lights:
        return
    node_index = {node.get("name"): i for i, node in enumerate(tree.get("nodes", []))}
    punctual = []
    for name, light in lights:
        index = node_index.get(name)
        if index is None:
            logger.warning(f"Light node '{name}' missing from exported tree")
            continue
        node = tree["nodes"][index]
        if isinstance(light, AmbientLight):
            # no ambient type in KHR_lights_punctual
            node.setdefault("extras", {})["ambient_light"] = {
                "color": [float(c) for c in light.color],
                "intensity": light.intensity,
            }
            continue
        node.setdefault("extensions", {})[LIGHTS_EXTENSION] = {"light": len(punctual)}
        punctual.append(light_definition(name, light))

    if punctual:
        tree.setdefault("extensions", {})[LIGHTS_EXTENSION] = {"lights": punctual}
        used = tree.setdefault("extensionsUsed", [])
        if LIGHTS_EXTENSION not in used:
            used.append(LIGHTS_EXTENSION)


def _column_major(matrix: np.ndarray) -> list:
    return [float(v) for v in matrix.T.flatten()]


class GltfSerializer:
    """
    Serializes a kit Scene.

    Scenes with mesh geometry become GLB bytes. Scenes without any mesh have
    no buffer to pack, so they come back as a glTF JSON document (dict) of
    nodes and lights.
    """

    def serialize(self, scene: Scene, binary: bool = True) -> Union[bytes, Dict]:
        """
        Args:
            scene: Kit scene to serialize
            binary: Prefer GLB; False always yields a glTF JSON document

        Returns:
            GLB bytes, or a glTF JSON dict with buffers embedded as data URIs
        """
        if not isinstance(scene, Scene):
            raise TypeError(f"expected a Scene, got {type(scene).__name__}")

        if not scene.meshes():
            logger.info("Scene has no mesh geometry, producing glTF JSON")
            return self.build_node_document(scene)

        tm_scene, lights = self.build_trimesh_scene(scene)

        def _postprocess(tree: dict) -> None:
            attach_lights(tree, lights)
            self._attach_scene_extras(tree, scene)

        if binary:
            return trimesh.exchange.gltf.export_glb(tm_scene, tree_postprocessor=_postprocess)

        files = trimesh.exchange.gltf.export_gltf(
            tm_scene, embed_buffers=True, tree_postprocessor=_postprocess
        )
        return json.loads(files["model.gltf"])

    def build_trimesh_scene(self, scene: Scene) -> Tuple[trimesh.Scene, List[Tuple[str, Light]]]:
        """Convert the kit graph to a trimesh Scene, returning it with the named lights."""
        tm_scene = trimesh.Scene(base_frame=BASE_FRAME)
        names = _NameRegistry()
        lights: List[Tuple[str, Light]] = []
        counter = [0]

        def visit(node: Object3D, parent: str) -> None:
            counter[0] += 1
            name = names.claim(node, counter[0])
            matrix = node_matrix(node)

            if isinstance(node, Mesh):
                mesh = geometry_trimesh(node.geometry)
                mesh.visual = trimesh.visual.TextureVisuals(
                    material=to_pbr_material(node.material, f"{name}_material")
                )
                tm_scene.add_geometry(
                    mesh,
                    node_name=name,
                    geom_name=name,
                    parent_node_name=parent,
                    transform=matrix,
                )
            else:
                tm_scene.graph.update(frame_from=parent, frame_to=name, matrix=matrix)
                if isinstance(node, Light):
                    lights.append((name, node))

            for child in node.children:
                visit(child, name)

        for child in scene.children:
            visit(child, BASE_FRAME)

        return tm_scene, lights

    def build_node_document(self, scene: Scene) -> dict:
        """glTF JSON for a scene with no geometry: node hierarchy plus lights."""
        tree = {
            "asset": {"version": "2.0", "generator": GENERATOR},
            "scene": 0,
            "scenes": [{"name": scene.name, "nodes": [0]}],
            "nodes": [{"name": BASE_FRAME}],
        }
        names = _NameRegistry()
        lights: List[Tuple[str, Light]] = []

        def visit(node: Object3D, parent_index: int) -> None:
            name = names.claim(node, len(tree["nodes"]))
            entry = {"name": name}
            matrix = node_matrix(node)
            if not np.allclose(matrix, np.eye(4)):
                entry["matrix"] = _column_major(matrix)
            index = len(tree["nodes"])
            tree["nodes"].append(entry)
            tree["nodes"][parent_index].setdefault("children", []).append(index)
            if isinstance(node, Light):
                lights.append((name, node))
            for child in node.children:
                visit(child, index)

        for child in scene.children:
            visit(child, 0)

        attach_lights(tree, lights)
        self._attach_scene_extras(tree, scene)
        return tree

    @staticmethod
    def _attach_scene_extras(tree: dict, scene: Scene) -> None:
        if scene.background is None:
            return
        gltf_scene = tree["scenes"][tree.get("scene", 0)]
        gltf_scene.setdefault("extras", {})["background"] = [float(c) for c in scene.background]
