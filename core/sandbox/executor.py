"""Runs generated scene scripts with the scene kit as their only capability."""

import ast
import logging
import textwrap
from typing import Any

from core.errors import ScriptContractViolation, ScriptRuntimeError, ScriptSyntaxError

logger = logging.getLogger(__name__)

CAPABILITY_NAME = "kit"
SCRIPT_FILENAME = "<scene-script>"
_ENTRY_POINT = "build_scene"

# Pure helpers only; no open, print, getattr, __import__, eval or type()
SAFE_BUILTINS = {
    "abs": abs,
    "all": all,
    "any": any,
    "bool": bool,
    "dict": dict,
    "enumerate": enumerate,
    "float": float,
    "int": int,
    "isinstance": isinstance,
    "len": len,
    "list": list,
    "max": max,
    "min": min,
    "range": range,
    "reversed": reversed,
    "round": round,
    "sorted": sorted,
    "str": str,
    "sum": sum,
    "tuple": tuple,
    "zip": zip,
    "Exception": Exception,
    "ValueError": ValueError,
    "TypeError": TypeError,
}

# Attribute names that reach frames, code objects or format-string traversal
FORBIDDEN_ATTRIBUTES = frozenset(
    {
        "format",
        "format_map",
        "mro",
        "gi_frame",
        "gi_code",
        "gi_yieldfrom",
        "cr_frame",
        "cr_code",
        "ag_frame",
        "ag_code",
        "f_back",
        "f_builtins",
        "f_code",
        "f_globals",
        "f_locals",
        "tb_frame",
        "tb_next",
    }
)

_FORBIDDEN_NODES = {
    ast.Import: "import statements",
    ast.ImportFrom: "import statements",
    ast.Global: "global declarations",
    ast.Nonlocal: "nonlocal declarations",
    ast.ClassDef: "class definitions",
    ast.AsyncFunctionDef: "async functions",
    ast.Await: "await",
    ast.Yield: "yield",
    ast.YieldFrom: "yield",
}


class _ScriptChecker(ast.NodeVisitor):
    """Rejects constructs that could reach outside the injected capability."""

    def generic_visit(self, node: ast.AST) -> None:
        for node_type, label in _FORBIDDEN_NODES.items():
            if isinstance(node, node_type):
                self._reject(node, f"{label} are not allowed")
        super().generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith("__"):
            self._reject(node, f"name '{node.id}' is not allowed")
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr.startswith("_") or node.attr in FORBIDDEN_ATTRIBUTES:
            self._reject(node, f"attribute '{node.attr}' is not allowed")
        self.generic_visit(node)

    @staticmethod
    def _reject(node: ast.AST, message: str) -> None:
        # line 1 of the compiled source is the wrapper def
        lineno = max(getattr(node, "lineno", 1) - 1, 1)
        raise ScriptSyntaxError(f"line {lineno}: {message}", lineno=lineno)


def _syntax_error(error: Exception) -> ScriptSyntaxError:
    lineno = getattr(error, "lineno", None)
    lineno = max(lineno - 1, 1) if lineno else None
    message = getattr(error, "msg", None) or str(error)
    if lineno:
        message = f"line {lineno}: {message}"
    return ScriptSyntaxError(message, lineno=lineno)


def compile_script(script_text: str):
    """
    Compile script text into a function taking the capability as its only argument.

    The script body becomes the body of `build_scene(kit)`, so a top-level
    `return scene` is its result.

    Raises:
        ScriptSyntaxError: If the text does not parse or uses a forbidden construct
    """
    body = textwrap.indent(script_text, "    ") if script_text.strip() else "    pass"
    source = f"def {_ENTRY_POINT}({CAPABILITY_NAME}):\n{body}\n"

    try:
        tree = ast.parse(source, filename=SCRIPT_FILENAME)

        function_def = tree.body[0]
        checker = _ScriptChecker()
        for statement in function_def.body:
            checker.visit(statement)

        # some errors (e.g. break outside a loop) only surface in the compiler
        code = compile(tree, SCRIPT_FILENAME, "exec")
    except (SyntaxError, ValueError) as e:
        raise _syntax_error(e) from e
    except (RecursionError, MemoryError) as e:
        raise ScriptSyntaxError("script is too deeply nested") from e

    namespace = {"__builtins__": dict(SAFE_BUILTINS)}
    exec(code, namespace)
    return namespace[_ENTRY_POINT]


def execute_script(script_text: str, capability: Any):
    """
    Execute a scene script and return the scene it builds.

    Args:
        script_text: Script body; must end by returning the scene
        capability: Scene kit bound to `kit` inside the script; must provide is_scene()

    Returns:
        The scene object returned by the script

    Raises:
        ScriptSyntaxError: Script does not compile
        ScriptRuntimeError: Script raised during execution
        ScriptContractViolation: Script returned something other than a scene
    """
    logger.info("Executing scene script")
    build_scene = compile_script(script_text)

    try:
        result = build_scene(capability)
    except Exception as e:
        logger.warning(f"Scene script raised {type(e).__name__}: {e}")
        raise ScriptRuntimeError(f"Script raised {type(e).__name__}: {e}") from e

    if not capability.is_scene(result):
        raise ScriptContractViolation(
            f"Script did not return a scene (got {type(result).__name__})"
        )

    logger.info("Scene generated successfully")
    return result
