"""PageForge error types with structured, actionable messages.

Error Contract:
Every user-facing error includes:
- What happened (one sentence, plain English)
- Why (root cause, not stack trace)
- Fix (specific, actionable)
- Context (relevant keys/paths, trimmed)

Errors are only raised at the import, config and CLI boundaries. Tree
operations, history and event dispatch degrade to logged no-ops instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ErrorContext:
    """Structured context for error messages."""

    items: Dict[str, Any] = field(default_factory=dict)

    def add(self, key: str, value: Any) -> "ErrorContext":
        """Add a context item, returning self for chaining."""
        self.items[key] = value
        return self

    def format(self) -> str:
        """Format context as indented key=value lines."""
        if not self.items:
            return ""
        lines = [f"  {k}={v!r}" for k, v in self.items.items()]
        return "\n".join(lines)


class PageForgeError(Exception):
    """Base exception for PageForge with structured error messages.

    Attributes:
        what: One-sentence description of what happened
        why: Root cause explanation
        fix: Actionable fix suggestion
        context: Relevant debugging context
    """

    def __init__(
        self,
        what: str,
        *,
        why: Optional[str] = None,
        fix: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        self.what = what
        self.why = why
        self.fix = fix
        self.context = context or ErrorContext()

        message = self._format_message()
        super().__init__(message)

    def _format_message(self) -> str:
        lines = [self.what]

        if self.why:
            lines.append(f"\nWhy: {self.why}")

        if self.fix:
            lines.append(f"\nFix: {self.fix}")

        ctx = self.context.format()
        if ctx:
            lines.append(f"\nContext:\n{ctx}")

        return "".join(lines)


class ConfigError(PageForgeError):
    """Error loading or validating builder configuration."""

    pass


class DocumentError(PageForgeError):
    """A page document could not be imported."""

    pass


class RegistryError(PageForgeError):
    """Error related to the component type catalog."""

    pass


class ImportError_(PageForgeError):
    """Error importing a dotted path symbol."""

    pass


class SandboxError(PageForgeError):
    """A custom action snippet was rejected before it ran."""

    pass


# --- Helper constructors for common errors ---


def config_missing_field(field: str, path: Optional[str] = None) -> ConfigError:
    """Config is missing a required field."""
    ctx = ErrorContext()
    if path:
        ctx.add("config_path", path)
    ctx.add("field", field)

    return ConfigError(
        f"Config missing required field: '{field}'",
        why=f"The '{field}' field is required but was not found in the config.",
        fix=f"Add '{field}' to your config file.",
        context=ctx,
    )


def config_wrong_type(
    field: str, expected: str, got: str, path: Optional[str] = None
) -> ConfigError:
    """Config field has wrong type."""
    ctx = ErrorContext()
    if path:
        ctx.add("config_path", path)
    ctx.add("field", field)
    ctx.add("expected", expected)
    ctx.add("got", got)

    return ConfigError(
        f"Config field '{field}' has wrong type",
        why=f"Expected {expected}, but got {got}.",
        fix=f"Change '{field}' to be a {expected}.",
        context=ctx,
    )


def unknown_component_type(type_name: str, known_types: List[str]) -> RegistryError:
    """Component type is not in the catalog."""
    shown = known_types[:5]
    more = len(known_types) - 5 if len(known_types) > 5 else 0

    known_str = ", ".join(shown) or "(catalog is empty)"
    if more > 0:
        known_str += f" (+{more} more)"

    ctx = ErrorContext()
    ctx.add("requested_type", type_name)
    ctx.add("known_types", shown)

    return RegistryError(
        f"Unknown component type: '{type_name}'",
        why="The type is not registered in the component catalog.",
        fix=f"Use one of the registered types: {known_str}\n"
        "Or add it to the 'catalog' section of your builder config.",
        context=ctx,
    )


def document_invalid_json(error: str, source: Optional[str] = None) -> DocumentError:
    """Imported document is not valid JSON."""
    ctx = ErrorContext()
    if source:
        ctx.add("source", source)
    ctx.add("error", error)

    return DocumentError(
        "Page document is not valid JSON",
        why="The import contains malformed JSON.",
        fix="Check the file for syntax errors, or re-export it from the editor.",
        context=ctx,
    )


def document_missing_field(where: str, field: str) -> DocumentError:
    """Imported document is missing a required field."""
    ctx = ErrorContext()
    ctx.add("location", where)
    ctx.add("field", field)

    return DocumentError(
        f"Page document missing required field: '{field}'",
        why=f"'{field}' is required at {where} but was not found.",
        fix="This may indicate a truncated or hand-edited file. Re-export the page, "
        "or add the missing field.",
        context=ctx,
    )


def document_wrong_type(where: str, field: str, expected: str, got: str) -> DocumentError:
    """Imported document field has wrong type."""
    ctx = ErrorContext()
    ctx.add("location", where)
    ctx.add("field", field)
    ctx.add("expected", expected)
    ctx.add("got", got)

    return DocumentError(
        f"Page document field '{field}' has wrong type",
        why=f"Expected {expected} at {where}, but got {got}.",
        fix=f"Change '{field}' to be a {expected}.",
        context=ctx,
    )


def document_duplicate_id(kind: str, duplicate_id: str, where: str) -> DocumentError:
    """Imported document reuses an id."""
    ctx = ErrorContext()
    ctx.add("kind", kind)
    ctx.add("id", duplicate_id)
    ctx.add("location", where)

    return DocumentError(
        f"Duplicate {kind} id: '{duplicate_id}'",
        why=f"Every {kind} id must be unique, but '{duplicate_id}' appears more than once.",
        fix="Give the duplicated entry a new id, or re-export the page from the editor.",
        context=ctx,
    )


def document_unknown_type(type_name: str, instance_id: str) -> DocumentError:
    """Imported document uses a type missing from the catalog."""
    ctx = ErrorContext()
    ctx.add("type", type_name)
    ctx.add("instance_id", instance_id)

    return DocumentError(
        f"Page document uses unknown component type: '{type_name}'",
        why="The type is not registered in the component catalog used for the import.",
        fix="Register the type in your catalog, or remove the instance from the file.",
        context=ctx,
    )


def children_mismatch(type_name: str, instance_id: str, allows_children: bool) -> DocumentError:
    """Instance carries children while its type forbids them, or the reverse."""
    ctx = ErrorContext()
    ctx.add("type", type_name)
    ctx.add("instance_id", instance_id)
    ctx.add("allows_children", allows_children)

    if allows_children:
        why = f"Type '{type_name}' is a container, so its instances need a 'children' list."
        fix = "Add \"children\": [] to the instance."
    else:
        why = f"Type '{type_name}' does not allow children, but the instance has a 'children' field."
        fix = "Remove the 'children' field from the instance."

    return DocumentError(
        f"Children field does not match component type '{type_name}'",
        why=why,
        fix=fix,
        context=ctx,
    )


def import_invalid_format(dotted_path: str) -> ImportError_:
    """Dotted path has invalid format."""
    ctx = ErrorContext()
    ctx.add("dotted_path", dotted_path)

    return ImportError_(
        f"Invalid dotted path format: '{dotted_path}'",
        why="Dotted paths must be in 'module:name' format.",
        fix="Use the format 'mypackage.module:my_action' (colon separates module from name).",
        context=ctx,
    )


def import_module_not_found(module: str, dotted_path: str) -> ImportError_:
    """Module in dotted path not found."""
    ctx = ErrorContext()
    ctx.add("module", module)
    ctx.add("dotted_path", dotted_path)

    return ImportError_(
        f"Module not found: '{module}'",
        why="The module specified in the dotted path could not be imported.",
        fix="Check that the module exists and is on your Python path.\n"
        "You may need to install the package or add its directory to sys.path.",
        context=ctx,
    )


def import_symbol_not_found(module: str, symbol: str, dotted_path: str) -> ImportError_:
    """Symbol not found in module."""
    ctx = ErrorContext()
    ctx.add("module", module)
    ctx.add("symbol", symbol)
    ctx.add("dotted_path", dotted_path)

    return ImportError_(
        f"Symbol '{symbol}' not found in module '{module}'",
        why="The module was imported successfully, but doesn't contain that symbol.",
        fix="Check the spelling of the function name.\n"
        "Make sure it's defined at the top level of the module.",
        context=ctx,
    )


def import_not_callable(dotted_path: str, got_type: str) -> ImportError_:
    """Imported symbol cannot be used as an action executor."""
    ctx = ErrorContext()
    ctx.add("dotted_path", dotted_path)
    ctx.add("got_type", got_type)

    return ImportError_(
        f"Not callable: '{dotted_path}'",
        why=f"Action executors must be callables, but got {got_type}.",
        fix="Point the action at a function taking (binding, source, context):\n"
        "  def my_action(binding, source, context): ...",
        context=ctx,
    )


def sandbox_forbidden_name(name: str, line: int) -> SandboxError:
    """Custom snippet reaches for a private or introspection name."""
    ctx = ErrorContext()
    ctx.add("name", name)
    ctx.add("line", line)

    return SandboxError(
        f"Custom action uses a forbidden name: '{name}'",
        why="Snippets may only use 'source', 'context' and 'binding'; "
        "private and introspection names are blocked.",
        fix="Rewrite the snippet using the context callbacks, e.g. "
        "context.update_component_props(...).",
        context=ctx,
    )
