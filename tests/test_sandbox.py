"""Tests for sandboxed script execution."""

import pytest

from core.errors import ScriptContractViolation, ScriptRuntimeError, ScriptSyntaxError
from core.sandbox import SAFE_BUILTINS, compile_script, execute_script
from core.scene_kit import SceneKit, Scene


@pytest.fixture
def kit():
    """Create a scene kit."""
    return SceneKit()


RED_CUBE_BLUE_SPHERE = """
scene = kit.Scene(name="red_cube_blue_sphere")
cube = kit.Mesh(kit.box(1, 1, 1), kit.Material(color=0xff0000), name="red_cube")
cube.position.x = -1
scene.add(cube)
sphere = kit.Mesh(kit.sphere(0.75, 32), kit.Material(color=0x0000ff), name="blue_sphere")
sphere.position.x = 1
scene.add(sphere)
return scene
"""


class TestExecuteScript:
    """Tests for the happy path."""

    def test_builds_scene(self, kit):
        """A valid script returns its scene."""
        scene = execute_script(RED_CUBE_BLUE_SPHERE, kit)
        assert isinstance(scene, Scene)
        assert [mesh.name for mesh in scene.meshes()] == ["red_cube", "blue_sphere"]
        assert scene.meshes()[0].position.x == -1
        assert scene.meshes()[0].material.color == (1.0, 0.0, 0.0)

    def test_loops_and_helpers(self, kit):
        """Loops, comprehensions, local functions and math helpers work."""
        script = """
def post(i):
    return kit.Mesh(kit.cylinder(0.1, 2), name=f"post_{i}", position=(kit.cos(i) * 3, 1, kit.sin(i) * 3))

scene = kit.Scene(name="fence")
posts = [post(i) for i in range(8)]
scene.add(*posts)
return scene
"""
        scene = execute_script(script, kit)
        assert len(scene.meshes()) == 8

    def test_runs_are_isolated(self, kit):
        """Names defined by one run are not visible to the next."""
        execute_script("leaked = 1\nreturn kit.Scene()", kit)
        with pytest.raises(ScriptRuntimeError):
            execute_script("leaked\nreturn kit.Scene()", kit)

    def test_same_script_twice(self, kit):
        """Execution is pure: two runs produce equivalent scenes."""
        first = execute_script(RED_CUBE_BLUE_SPHERE, kit)
        second = execute_script(RED_CUBE_BLUE_SPHERE, kit)
        assert first is not second
        assert [m.name for m in first.meshes()] == [m.name for m in second.meshes()]


class TestContractViolations:
    """Tests for scripts that run but return the wrong thing."""

    def test_dict_return(self, kit):
        """Returning a dict is a contract violation."""
        with pytest.raises(ScriptContractViolation):
            execute_script('return {"scene": 1}', kit)

    def test_no_return(self, kit):
        """Falling off the end returns None."""
        with pytest.raises(ScriptContractViolation):
            execute_script("scene = kit.Scene()", kit)

    def test_group_return(self, kit):
        """Only the root Scene type counts."""
        with pytest.raises(ScriptContractViolation):
            execute_script("return kit.Group()", kit)


class TestRuntimeErrors:
    """Tests for scripts that raise."""

    def test_exception_is_wrapped(self, kit):
        """Script exceptions become ScriptRuntimeError with the cause attached."""
        with pytest.raises(ScriptRuntimeError) as exc_info:
            execute_script("x = 1 / 0\nreturn kit.Scene()", kit)
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_kit_validation_errors(self, kit):
        """Invalid kit arguments surface as runtime errors."""
        with pytest.raises(ScriptRuntimeError):
            execute_script("return kit.Scene().add('cube')", kit)

    @pytest.mark.parametrize("name", ["open", "print", "getattr", "eval", "exec", "type", "vars", "globals"])
    def test_unsafe_builtins_missing(self, kit, name):
        """Unsafe builtins are not defined."""
        assert name not in SAFE_BUILTINS
        with pytest.raises(ScriptRuntimeError):
            execute_script(f"{name}\nreturn kit.Scene()", kit)

    def test_children_cannot_bypass_node_cap(self, kit):
        """Appending to children directly fails instead of growing past the cap."""
        script = """
scene = kit.Scene()
for i in range(5000):
    scene.children.append(kit.Group())
return scene
"""
        with pytest.raises(ScriptRuntimeError):
            execute_script(script, kit)

    def test_add_enforces_node_cap(self, kit):
        """Growing a scene through add() stops at the node cap."""
        script = """
scene = kit.Scene()
for i in range(5000):
    scene.add(kit.Group())
return scene
"""
        with pytest.raises(ScriptRuntimeError):
            execute_script(script, kit)

    def test_kit_is_read_only(self, kit):
        """Scripts cannot replace kit members."""
        with pytest.raises(ScriptRuntimeError):
            execute_script("kit.box = None\nreturn kit.Scene()", kit)
        assert callable(kit.box)


class TestSyntaxErrors:
    """Tests for rejected script text."""

    def test_unparseable(self, kit):
        """Broken syntax reports the script-relative line."""
        with pytest.raises(ScriptSyntaxError) as exc_info:
            execute_script("scene = kit.Scene()\nscene.add(\nreturn scene", kit)
        assert exc_info.value.lineno is not None
        assert exc_info.value.lineno <= 3

    @pytest.mark.parametrize(
        "script",
        [
            "import os\nreturn kit.Scene()",
            "from os import path\nreturn kit.Scene()",
            "global x\nreturn kit.Scene()",
            "class A:\n    pass\nreturn kit.Scene()",
            "x = kit.__class__\nreturn kit.Scene()",
            "x = kit._private\nreturn kit.Scene()",
            "x = __builtins__\nreturn kit.Scene()",
            "x = '{0.__class__}'.format(kit)\nreturn kit.Scene()",
            "g = (i for i in range(3))\nf = g.gi_frame\nreturn kit.Scene()",
            "yield 1",
        ],
    )
    def test_forbidden_constructs(self, kit, script):
        """Escape hatches are rejected before execution."""
        with pytest.raises(ScriptSyntaxError):
            execute_script(script, kit)

    def test_forbidden_line_number(self):
        """Line numbers count from the first script line."""
        with pytest.raises(ScriptSyntaxError) as exc_info:
            compile_script("scene = kit.Scene()\nimport os\nreturn scene")
        assert exc_info.value.lineno == 2

    def test_compiler_only_errors(self):
        """Errors raised by the compiler rather than the parser are caught too."""
        with pytest.raises(ScriptSyntaxError):
            compile_script("break\nreturn kit.Scene()")

    def test_deeply_nested_expression(self, kit):
        """Expressions too deep to check are rejected as syntax errors."""
        script = "x = " + "+".join(["1"] * 800) + "\nreturn kit.Scene()"
        with pytest.raises(ScriptSyntaxError) as exc_info:
            execute_script(script, kit)
        assert "too deeply nested" in exc_info.value.message

    def test_deeply_nested_brackets(self, kit):
        """Parser-level nesting limits are classified too."""
        script = "x = " + "[" * 1000 + "]" * 1000 + "\nreturn kit.Scene()"
        with pytest.raises(ScriptSyntaxError):
            execute_script(script, kit)

    def test_empty_script(self, kit):
        """Empty script returns None, which is not a scene."""
        with pytest.raises(ScriptContractViolation):
            execute_script("", kit)
