"""Scene construction kit injected into generated scripts.

Scripts see a single `kit` object:

    scene = kit.Scene(name="red_cube")
    cube = kit.Mesh(kit.box(1, 1, 1), kit.Material(color=0xff0000), name="red_cube")
    cube.position.x = -1
    scene.add(cube)
    return scene
"""

from .geometry import SHAPES
from .kit import SceneKit
from .types import (
    MAX_NODES,
    AmbientLight,
    DirectionalLight,
    Geometry,
    Group,
    Light,
    Material,
    Mesh,
    Object3D,
    PointLight,
    Scene,
    SpotLight,
    Vector3,
    geometry_trimesh,
    local_matrix,
    parse_color,
    world_matrix,
)

__all__ = [
    # Capability
    "SceneKit",
    "SHAPES",
    # Nodes
    "Object3D",
    "Scene",
    "Group",
    "Mesh",
    "Geometry",
    "Material",
    "Vector3",
    # Lights
    "Light",
    "AmbientLight",
    "DirectionalLight",
    "PointLight",
    "SpotLight",
    # Helpers (not exposed to scripts)
    "geometry_trimesh",
    "local_matrix",
    "world_matrix",
    "parse_color",
    "MAX_NODES",
]
