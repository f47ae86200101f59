"""Scene graph types exposed to generated scripts."""

import math
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np
import trimesh

Color = Tuple[float, float, float]
ColorLike = Union[int, str, Sequence[float]]
VectorLike = Union["Vector3", Sequence[float]]

# Upper bound on nodes reachable from one scene
MAX_NODES = 2000


class SealedType(type):
    """Metaclass that rejects attribute assignment on the class itself."""

    def __setattr__(cls, name, value):
        raise AttributeError(f"{cls.__name__} is read-only")

    def __delattr__(cls, name):
        raise AttributeError(f"{cls.__name__} is read-only")


def parse_color(value: ColorLike) -> Color:
    """
    Parse a color into linear RGB floats in [0, 1].

    Accepts 0xRRGGBB integers, "#rrggbb" strings, or an (r, g, b) float sequence.
    """
    if isinstance(value, bool):
        raise TypeError("color must be an int, a '#rrggbb' string or an (r, g, b) tuple")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"color out of range: {value:#x}")
        return ((value >> 16 & 0xFF) / 255.0, (value >> 8 & 0xFF) / 255.0, (value & 0xFF) / 255.0)
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"color string must look like '#rrggbb', got {value!r}")
        return parse_color(int(text, 16))
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError("color tuple must have exactly three components")
    return tuple(min(max(c, 0.0), 1.0) for c in components)


class Vector3(metaclass=SealedType):
    """Mutable xyz triple used for position, rotation and scale."""

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def set(self, x: float, y: float, z: float) -> "Vector3":
        self.x, self.y, self.z = float(x), float(y), float(z)
        return self

    def copy(self) -> "Vector3":
        return Vector3(self.x, self.y, self.z)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __iter__(self):
        return iter(self.to_tuple())

    def __eq__(self, other) -> bool:
        if isinstance(other, Vector3):
            return self.to_tuple() == other.to_tuple()
        return NotImplemented

    def __repr__(self) -> str:
        return f"Vector3({self.x}, {self.y}, {self.z})"


def _coerce_vector(value: VectorLike) -> Vector3:
    if isinstance(value, Vector3):
        return value.copy()
    x, y, z = value
    return Vector3(x, y, z)


class Object3D(metaclass=SealedType):
    """Base scene node: a name, a local transform and children."""

    def __init__(
        self,
        name: str = "",
        position: Optional[VectorLike] = None,
        rotation: Optional[VectorLike] = None,
        scale: Optional[VectorLike] = None,
    ):
        self.name = str(name)
        self._position = _coerce_vector(position) if position is not None else Vector3()
        self._rotation = _coerce_vector(rotation) if rotation is not None else Vector3()
        self._scale = _coerce_vector(scale) if scale is not None else Vector3(1.0, 1.0, 1.0)
        self._children = []
        self._parent: Optional["Object3D"] = None

    @property
    def children(self) -> tuple:
        """Read-only view; use add() and remove() to change the hierarchy."""
        return tuple(self._children)

    @property
    def parent(self) -> Optional["Object3D"]:
        return self._parent

    @property
    def position(self) -> Vector3:
        return self._position

    @position.setter
    def position(self, value: VectorLike) -> None:
        self._position = _coerce_vector(value)

    @property
    def rotation(self) -> Vector3:
        """Euler angles in radians, applied in XYZ order."""
        return self._rotation

    @rotation.setter
    def rotation(self, value: VectorLike) -> None:
        self._rotation = _coerce_vector(value)

    @property
    def scale(self) -> Vector3:
        return self._scale

    @scale.setter
    def scale(self, value: Union[VectorLike, float]) -> None:
        if isinstance(value, (int, float)):
            self._scale = Vector3(value, value, value)
        else:
            self._scale = _coerce_vector(value)

    def add(self, *objects: "Object3D") -> "Object3D":
        """Attach nodes as children, detaching them from any previous parent."""
        for obj in objects:
            if not isinstance(obj, Object3D):
                raise TypeError(f"can only add scene nodes, got {type(obj).__name__}")
            if isinstance(obj, Scene):
                raise TypeError("a Scene cannot be added as a child")
            if obj is self or any(node is obj for node in self.ancestors()):
                raise ValueError(f"adding '{obj.name}' would create a cycle")

            root = self.root()
            if isinstance(root, Scene) and root.node_count() + obj.node_count() > MAX_NODES:
                raise ValueError(f"scene exceeds {MAX_NODES} nodes")

            if obj._parent is not None:
                obj._parent.remove(obj)
            obj._parent = self
            self._children.append(obj)
        return self

    def remove(self, *objects: "Object3D") -> "Object3D":
        for obj in objects:
            for index, child in enumerate(self._children):
                if child is obj:
                    del self._children[index]
                    obj._parent = None
                    break
        return self

    def ancestors(self) -> Iterator["Object3D"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> "Object3D":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def traverse(self) -> Iterator["Object3D"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self._children:
            yield from child.traverse()

    def node_count(self) -> int:
        return sum(1 for _ in self.traverse())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, children={len(self._children)})"


class Scene(Object3D):
    """Root of a constructed scene."""

    def __init__(self, name: str = "scene", background: Optional[ColorLike] = None):
        super().__init__(name=name)
        self.background = parse_color(background) if background is not None else None

    def meshes(self) -> list:
        return [node for node in self.traverse() if isinstance(node, Mesh)]

    def lights(self) -> list:
        return [node for node in self.traverse() if isinstance(node, Light)]


class Group(Object3D):
    """Transform-only node used to compose children."""


class Geometry(metaclass=SealedType):
    """Triangle geometry created by the kit's shape constructors."""

    def __init__(self, mesh: trimesh.Trimesh, kind: str):
        self._mesh = mesh
        self.kind = kind

    @property
    def vertex_count(self) -> int:
        return len(self._mesh.vertices)

    @property
    def face_count(self) -> int:
        return len(self._mesh.faces)

    def __repr__(self) -> str:
        return f"Geometry(kind={self.kind!r}, faces={self.face_count})"


def geometry_trimesh(geometry: Geometry) -> trimesh.Trimesh:
    """Copy of the trimesh behind a Geometry; not reachable from scripts."""
    return geometry._mesh.copy()


class Material(metaclass=SealedType):
    """Metallic-roughness surface description."""

    def __init__(
        self,
        color: ColorLike = 0xFFFFFF,
        metalness: float = 0.0,
        roughness: float = 1.0,
        opacity: float = 1.0,
        emissive: ColorLike = 0x000000,
        double_sided: bool = False,
        name: str = "",
    ):
        self.color = color
        self.emissive = emissive
        self.metalness = min(max(float(metalness), 0.0), 1.0)
        self.roughness = min(max(float(roughness), 0.0), 1.0)
        self.opacity = min(max(float(opacity), 0.0), 1.0)
        self.double_sided = bool(double_sided)
        self.name = str(name)

    @property
    def color(self) -> Color:
        return self._color

    @color.setter
    def color(self, value: ColorLike) -> None:
        self._color = parse_color(value)

    @property
    def emissive(self) -> Color:
        return self._emissive

    @emissive.setter
    def emissive(self, value: ColorLike) -> None:
        self._emissive = parse_color(value)

    def __repr__(self) -> str:
        return f"Material(color={self.color}, metalness={self.metalness}, roughness={self.roughness})"


class Mesh(Object3D):
    """Geometry plus material placed in the scene."""

    def __init__(self, geometry: Geometry, material: Optional[Material] = None, name: str = "", **transform):
        super().__init__(name=name, **transform)
        if not isinstance(geometry, Geometry):
            raise TypeError(f"Mesh geometry must come from a kit shape, got {type(geometry).__name__}")
        if material is not None and not isinstance(material, Material):
            raise TypeError(f"Mesh material must be a kit.Material, got {type(material).__name__}")
        self.geometry = geometry
        self.material = material or Material()


class Light(Object3D):
    """Base class for lights."""

    light_type = "light"

    def __init__(self, color: ColorLike = 0xFFFFFF, intensity: float = 1.0, name: str = "", **transform):
        super().__init__(name=name, **transform)
        self.color = color
        self.intensity = float(intensity)

    @property
    def color(self) -> Color:
        return self._color

    @color.setter
    def color(self, value: ColorLike) -> None:
        self._color = parse_color(value)


class AmbientLight(Light):
    """Uniform light with no position or direction."""

    light_type = "ambient"


class DirectionalLight(Light):
    """Parallel light shining from position toward target."""

    light_type = "directional"

    def __init__(self, color: ColorLike = 0xFFFFFF, intensity: float = 1.0, name: str = "", target: Optional[VectorLike] = None, **transform):
        super().__init__(color=color, intensity=intensity, name=name, **transform)
        self.target = _coerce_vector(target) if target is not None else Vector3()


class PointLight(Light):
    """Omnidirectional light; distance 0 means unlimited range."""

    light_type = "point"

    def __init__(self, color: ColorLike = 0xFFFFFF, intensity: float = 1.0, distance: float = 0.0, name: str = "", **transform):
        super().__init__(color=color, intensity=intensity, name=name, **transform)
        self.distance = max(float(distance), 0.0)


class SpotLight(DirectionalLight):
    """Cone light shining from position toward target."""

    light_type = "spot"

    def __init__(
        self,
        color: ColorLike = 0xFFFFFF,
        intensity: float = 1.0,
        distance: float = 0.0,
        angle: float = math.pi / 3,
        penumbra: float = 0.0,
        name: str = "",
        target: Optional[VectorLike] = None,
        **transform,
    ):
        super().__init__(color=color, intensity=intensity, name=name, target=target, **transform)
        self.distance = max(float(distance), 0.0)
        self.angle = min(max(float(angle), 0.0), math.pi / 2)
        self.penumbra = min(max(float(penumbra), 0.0), 1.0)


def local_matrix(node: Object3D) -> np.ndarray:
    """4x4 transform of a node relative to its parent (translate * rotate * scale)."""
    translate = trimesh.transformations.translation_matrix(node.position.to_tuple())
    rotate = trimesh.transformations.euler_matrix(
        node.rotation.x, node.rotation.y, node.rotation.z, axes="rxyz"
    )
    scale = np.diag([node.scale.x, node.scale.y, node.scale.z, 1.0])
    return translate @ rotate @ scale


def world_matrix(node: Object3D) -> np.ndarray:
    """4x4 transform of a node relative to its root."""
    matrix = local_matrix(node)
    for ancestor in node.ancestors():
        matrix = local_matrix(ancestor) @ matrix
    return matrix
