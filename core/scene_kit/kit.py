"""The capability object handed to generated scripts as `kit`."""

import math

from . import geometry
from .types import (
    AmbientLight,
    DirectionalLight,
    Group,
    Material,
    Mesh,
    PointLight,
    Scene,
    SpotLight,
    Vector3,
)


class SceneKit:
    """
    Scene construction vocabulary available to a script.

    Holds only constructors and pure math helpers; nothing on it reads or
    writes files, opens sockets or touches the process. Instances are
    immutable so one kit can serve every request.
    """

    def __init__(self):
        members = {
            # Node types
            "Scene": Scene,
            "Group": Group,
            "Mesh": Mesh,
            "Material": Material,
            "Vector3": Vector3,
            # Lights
            "AmbientLight": AmbientLight,
            "DirectionalLight": DirectionalLight,
            "PointLight": PointLight,
            "SpotLight": SpotLight,
            # Math
            "pi": math.pi,
            "radians": math.radians,
            "degrees": math.degrees,
            "sin": math.sin,
            "cos": math.cos,
            "tan": math.tan,
            "sqrt": math.sqrt,
        }
        members.update(geometry.SHAPES)
        for name, value in members.items():
            object.__setattr__(self, name, value)

    def is_scene(self, value) -> bool:
        """Root scene type check."""
        return isinstance(value, Scene)

    def __setattr__(self, name, value):
        raise AttributeError("scene kit is read-only")

    def __delattr__(self, name):
        raise AttributeError("scene kit is read-only")
