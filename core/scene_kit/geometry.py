"""Shape constructors backed by trimesh.creation.

All shapes are Y-up and centered on the origin, matching the conventions
the generation prompt describes.
"""

import math

import numpy as np
import trimesh

from .types import Geometry

MIN_SEGMENTS = 3
MAX_SEGMENTS = 128

# trimesh builds round shapes along +Z; this turns +Z into +Y
_Z_TO_Y = trimesh.transformations.rotation_matrix(-math.pi / 2, [1, 0, 0])


def _positive(value: float, label: str) -> float:
    value = float(value)
    if not value > 0:
        raise ValueError(f"{label} must be positive, got {value}")
    return value


def _segments(value: int) -> int:
    return min(max(int(value), MIN_SEGMENTS), MAX_SEGMENTS)


def box(width: float = 1.0, height: float = 1.0, depth: float = 1.0) -> Geometry:
    """Axis-aligned box; width on X, height on Y, depth on Z."""
    extents = [_positive(width, "width"), _positive(height, "height"), _positive(depth, "depth")]
    return Geometry(trimesh.creation.box(extents=extents), kind="box")


def sphere(radius: float = 1.0, segments: int = 32) -> Geometry:
    count = _segments(segments)
    mesh = trimesh.creation.uv_sphere(radius=_positive(radius, "radius"), count=[count, count])
    return Geometry(mesh, kind="sphere")


def cylinder(radius: float = 1.0, height: float = 1.0, segments: int = 32) -> Geometry:
    mesh = trimesh.creation.cylinder(
        radius=_positive(radius, "radius"),
        height=_positive(height, "height"),
        sections=_segments(segments),
        transform=_Z_TO_Y,
    )
    return Geometry(mesh, kind="cylinder")


def cone(radius: float = 1.0, height: float = 1.0, segments: int = 32) -> Geometry:
    """Cone with its base at -height/2 and apex at +height/2 on Y."""
    height = _positive(height, "height")
    center = trimesh.transformations.translation_matrix([0, 0, -height / 2])
    mesh = trimesh.creation.cone(
        radius=_positive(radius, "radius"),
        height=height,
        sections=_segments(segments),
        transform=_Z_TO_Y @ center,
    )
    return Geometry(mesh, kind="cone")


def capsule(radius: float = 0.5, height: float = 1.0, segments: int = 16) -> Geometry:
    """Capsule whose cylindrical section is `height` long on Y."""
    count = _segments(segments)
    mesh = trimesh.creation.capsule(
        height=_positive(height, "height"),
        radius=_positive(radius, "radius"),
        count=[count, count],
        transform=_Z_TO_Y,
    )
    return Geometry(mesh, kind="capsule")


def torus(radius: float = 1.0, tube: float = 0.4, radial_segments: int = 16, tubular_segments: int = 48) -> Geometry:
    """Ring in the XY plane; `radius` to the tube center, `tube` the tube radius."""
    radius = _positive(radius, "radius")
    tube = _positive(tube, "tube")
    if tube >= radius:
        raise ValueError("tube must be smaller than radius")
    mesh = trimesh.creation.torus(
        major_radius=radius,
        minor_radius=tube,
        major_sections=_segments(tubular_segments),
        minor_sections=_segments(radial_segments),
    )
    return Geometry(mesh, kind="torus")


def plane(width: float = 1.0, depth: float = 1.0) -> Geometry:
    """Flat rectangle on the XZ plane facing +Y."""
    half_w = _positive(width, "width") / 2
    half_d = _positive(depth, "depth") / 2
    vertices = np.array(
        [
            [-half_w, 0.0, -half_d],
            [-half_w, 0.0, half_d],
            [half_w, 0.0, half_d],
            [half_w, 0.0, -half_d],
        ]
    )
    faces = np.array([[0, 1, 2], [0, 2, 3]])
    return Geometry(trimesh.Trimesh(vertices=vertices, faces=faces, process=False), kind="plane")


SHAPES = {
    "box": box,
    "sphere": sphere,
    "cylinder": cylinder,
    "cone": cone,
    "capsule": capsule,
    "torus": torus,
    "plane": plane,
}
