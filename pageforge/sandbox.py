"""Execution of ``custom`` action snippets.

A snippet is the body of a function taking ``source``, ``context`` and
``binding``; those three names are the only things it can see. Builtins are
emptied before running. Before compiling, the snippet is rejected if it
imports, uses a double-underscore name, touches a private or interpreter
introspection attribute (frames, generators, code objects, tracebacks), calls
``str.format``, or carries a string literal containing ``__``.

This narrows what a snippet can reach; it is not a security boundary against a
hostile author.
"""

from __future__ import annotations

import ast
from typing import Any, Dict

from .errors import ErrorContext, SandboxError, sandbox_forbidden_name

SNIPPET_FILENAME = "<custom action>"
SNIPPET_ARGS = ("source", "context", "binding")

# Attribute prefixes of frame, generator, coroutine, async generator,
# traceback and code objects.
INTROSPECTION_PREFIXES = ("f_", "gi_", "cr_", "ag_", "tb_", "co_")
# Format strings can walk attributes without an ast.Attribute node.
FORBIDDEN_ATTRIBUTES = frozenset({"format", "format_map"})


def forbidden_attribute(name: str) -> bool:
    return (
        name.startswith("_")
        or name.startswith(INTROSPECTION_PREFIXES)
        or name in FORBIDDEN_ATTRIBUTES
    )


def check_snippet(code: str) -> ast.Module:
    """Parse ``code`` and reject constructs that escape the three injected names.

    Raises:
        SyntaxError: If the snippet does not parse.
        SandboxError: If it imports, or reaches for a forbidden name,
            attribute or string literal.
    """
    tree = ast.parse(code, filename=SNIPPET_FILENAME, mode="exec")
    for node in ast.walk(tree):
        line = getattr(node, "lineno", 0)
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            ctx = ErrorContext().add("line", line)
            raise SandboxError(
                "Custom action tries to import a module",
                why="Snippets run without access to the host environment.",
                fix="Remove the import and use the context callbacks instead.",
                context=ctx,
            )
        if isinstance(node, ast.Name) and node.id.startswith("__"):
            raise sandbox_forbidden_name(node.id, line)
        if isinstance(node, ast.Attribute) and forbidden_attribute(node.attr):
            raise sandbox_forbidden_name(node.attr, line)
        if isinstance(node, ast.Constant) and isinstance(node.value, str) and "__" in node.value:
            raise sandbox_forbidden_name(node.value, line)
        # ``case Cls(attr=...)`` names attributes as plain strings (3.10+).
        for attr in getattr(node, "kwd_attrs", None) or ():
            if forbidden_attribute(attr):
                raise sandbox_forbidden_name(attr, line)
    return tree


def compile_snippet(code: str) -> Any:
    """Compile ``code`` into a function of (source, context, binding)."""
    body = check_snippet(code)

    # Wrapping through the AST keeps the snippet's own line numbers and allows
    # a bare ``return`` inside it.
    wrapper = ast.parse(f"def _snippet({', '.join(SNIPPET_ARGS)}):\n    pass")
    wrapper.body[0].body = body.body or [ast.Pass()]  # type: ignore[attr-defined]
    ast.fix_missing_locations(wrapper)

    scope: Dict[str, Any] = {"__builtins__": {}}
    exec(compile(wrapper, SNIPPET_FILENAME, "exec"), scope)
    return scope.pop("_snippet")


def run_snippet(code: str, *, source: Any, context: Any, binding: Any) -> None:
    """Compile and run a snippet; any error propagates to the caller."""
    fn = compile_snippet(code)
    fn(source, context, binding)
