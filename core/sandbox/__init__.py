"""Sandboxed execution of generated scene scripts."""

from .executor import (
    CAPABILITY_NAME,
    FORBIDDEN_ATTRIBUTES,
    SAFE_BUILTINS,
    compile_script,
    execute_script,
)

__all__ = [
    "execute_script",
    "compile_script",
    "CAPABILITY_NAME",
    "SAFE_BUILTINS",
    "FORBIDDEN_ATTRIBUTES",
]
