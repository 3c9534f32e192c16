"""Page explanation and validation without side effects.

explain(page) answers: "What is on this page, and will its event bindings do
anything when they fire?" without loading it into a builder or running any
action.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .actions import BUILTIN_ACTIONS
from .errors import DocumentError, PageForgeError
from .model import (
    ComponentInstance,
    CustomPayload,
    EventBinding,
    NavigatePayload,
    PageDocument,
    SetPropPayload,
)
from .registry import ComponentTypeRegistry
from .sandbox import check_snippet
from .serialize import document_from_dict, loads

TARGETED_ACTIONS = ("setProp", "show", "hide", "toggle")


@dataclass
class Diagnostic:
    """A single warning or error from page explanation."""

    level: str  # "warning" or "error"
    what: str
    why: Optional[str] = None
    fix: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        """Format as structured message (matches PageForgeError format)."""
        lines = [f"[{self.level.upper()}] {self.what}"]
        if self.why:
            lines.append(f"Why: {self.why}")
        if self.fix:
            lines.append(f"Fix: {self.fix}")
        if self.context:
            ctx_lines = [f"  {k}={v!r}" for k, v in self.context.items()]
            lines.append("Context:\n" + "\n".join(ctx_lines))
        return "\n".join(lines)


@dataclass
class DocumentExplanation:
    """Structured explanation of a page document."""

    source: str
    page_id: Optional[str] = None
    title: Optional[str] = None
    component_count: int = 0
    max_depth: int = 0
    type_counts: Dict[str, int] = field(default_factory=dict)
    binding_count: int = 0
    event_types: List[str] = field(default_factory=list)

    warnings: List[Diagnostic] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True if the page has no errors (warnings are ok)."""
        return len(self.errors) == 0

    def format(self) -> str:
        lines = [
            "PageForge Page Explanation",
            "=" * 40,
            f"Source: {self.source}",
            "",
            "Page:",
            f"  id: {self.page_id or '(missing)'}",
            f"  title: {self.title if self.title is not None else '(missing)'}",
            f"  components: {self.component_count} (max depth {self.max_depth})",
            f"  bindings: {self.binding_count}",
            "",
        ]

        if self.type_counts:
            lines.append("Types:")
            for name in sorted(self.type_counts):
                lines.append(f"  {name}: {self.type_counts[name]}")
            lines.append("")

        if self.event_types:
            lines.append(f"Events: {', '.join(self.event_types)}")
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for w in self.warnings:
                lines.append(f"  ⚠ {w.what}")
                if w.fix:
                    lines.append(f"    Fix: {w.fix}")
            lines.append("")

        if self.errors:
            lines.append("Errors:")
            for e in self.errors:
                lines.append(f"  ✗ {e.what}")
                if e.why:
                    lines.append(f"    Why: {e.why}")
                if e.fix:
                    lines.append(f"    Fix: {e.fix}")
            lines.append("")

        if self.is_valid:
            lines.append("Status: ✓ Valid - page will load successfully")
        else:
            lines.append(f"Status: ✗ Invalid - {len(self.errors)} error(s) found")

        return "\n".join(lines)


def explain(
    page: Union[str, Path, Dict[str, Any], PageDocument],
    registry: Optional[ComponentTypeRegistry] = None,
    actions: Optional[Iterable[str]] = None,
) -> DocumentExplanation:
    """Explain a page from a JSON file path, an exported dict, or a PageDocument.

    Never raises for a malformed page: decoding problems become error
    diagnostics. ``actions`` lists the action names the runtime knows about
    (built-ins by default).
    """
    if isinstance(page, PageDocument):
        result = DocumentExplanation(source="(document)")
        document: Optional[PageDocument] = page
    else:
        result = DocumentExplanation(source=str(page) if isinstance(page, (str, Path)) else "(dict)")
        document = _decode(page, result)

    if document is None:
        return result

    known_actions = set(actions) if actions is not None else set(BUILTIN_ACTIONS)
    ids = {node.id for node in document.walk()}

    result.page_id = document.id
    result.title = document.title

    type_counts: Counter = Counter()
    event_types = set()
    for node, depth in _walk_depth(document.components, 1):
        result.component_count += 1
        result.max_depth = max(result.max_depth, depth)
        type_counts[node.type] += 1
        if registry is not None:
            _check_type(node, registry, result)
        for binding in node.events:
            result.binding_count += 1
            if binding.event_type:
                event_types.add(binding.event_type)
            _check_binding(node, binding, ids, known_actions, registry, result)

    result.type_counts = dict(type_counts)
    result.event_types = sorted(event_types)
    return result


def _decode(page: Union[str, Path, Dict[str, Any]], result: DocumentExplanation) -> Optional[PageDocument]:
    try:
        if isinstance(page, dict):
            return document_from_dict(page)
        p = Path(page)
        if not p.exists():
            result.errors.append(
                Diagnostic(
                    level="error",
                    what=f"Page file not found: {p}",
                    fix="Check the path and try again.",
                    context={"path": str(p)},
                )
            )
            return None
        return loads(p.read_text(encoding="utf-8"), source=str(p))
    except DocumentError as e:
        result.errors.append(_from_error(e))
        return None


def _from_error(e: PageForgeError) -> Diagnostic:
    return Diagnostic(level="error", what=e.what, why=e.why, fix=e.fix, context=dict(e.context.items))


def _walk_depth(siblings: List[ComponentInstance], depth: int):
    for node in siblings:
        yield node, depth
        if node.children:
            yield from _walk_depth(node.children, depth + 1)


def _check_type(node: ComponentInstance, registry: ComponentTypeRegistry, result: DocumentExplanation) -> None:
    if not registry.has_type(node.type):
        result.errors.append(
            Diagnostic(
                level="error",
                what=f"Unknown component type '{node.type}'",
                why="The type is not in the component catalog, so the page cannot be loaded.",
                fix="Register the type, or remove the instance.",
                context={"instance_id": node.id},
            )
        )
        return

    allowed = registry.allows_children(node.type)
    if allowed != node.allows_nesting:
        result.errors.append(
            Diagnostic(
                level="error",
                what=f"Children field does not match type '{node.type}'",
                why="Only container types carry a children list, and they always do.",
                fix="Add \"children\": []" if allowed else "Remove the 'children' field.",
                context={"instance_id": node.id, "allows_children": allowed},
            )
        )


def _warn(result: DocumentExplanation, what: str, fix: str, **context: Any) -> None:
    result.warnings.append(Diagnostic(level="warning", what=what, fix=fix, context=context))


def _check_binding(
    node: ComponentInstance,
    binding: EventBinding,
    ids: set,
    known_actions: set,
    registry: Optional[ComponentTypeRegistry],
    result: DocumentExplanation,
) -> None:
    where = {"instance_id": node.id, "binding_id": binding.id}

    if not binding.event_type:
        _warn(result, f"Binding {binding.id} on {node.id} has no event", "Pick the event that should trigger it.", **where)
    elif registry is not None and registry.has_type(node.type):
        declared = registry.events_declared_for(node.type)
        if binding.event_type not in declared:
            _warn(
                result,
                f"Event '{binding.event_type}' is not declared by type '{node.type}'",
                f"Use one of: {', '.join(declared) or '(none declared)'}",
                **where,
            )

    if binding.action not in known_actions:
        _warn(
            result,
            f"Unknown action '{binding.action}' on {node.id}",
            "Register the action, or pick a built-in one. The binding is skipped when fired.",
            **where,
        )
        return

    if binding.action in TARGETED_ACTIONS:
        if not binding.has_target:
            _warn(result, f"'{binding.action}' binding {binding.id} has no target", "Pick a target component.", **where)
        elif binding.target_component not in ids:
            _warn(
                result,
                f"Binding {binding.id} targets missing component {binding.target_component}",
                "The target was deleted or moved (moves assign new ids). Re-pick the target.",
                **where,
            )
        elif binding.target_component == node.id:
            _warn(result, f"Binding {binding.id} targets its own component", "Target another component.", **where)

    if binding.action == "setProp" and not isinstance(binding.payload, SetPropPayload):
        _warn(result, f"'setProp' binding {binding.id} has no props to set", "Add at least one prop value.", **where)
    elif binding.action == "navigate" and not (
        isinstance(binding.payload, NavigatePayload) and binding.payload.url
    ):
        _warn(result, f"'navigate' binding {binding.id} has no url", "Set payload.url.", **where)
    elif binding.action == "custom":
        code = binding.payload.code if isinstance(binding.payload, CustomPayload) else None
        if not code:
            _warn(result, f"'custom' binding {binding.id} has no code", "Set payload.code.", **where)
        else:
            try:
                check_snippet(code)
            except SyntaxError as e:
                _warn(result, f"Custom code in {binding.id} does not parse: {e.msg}", "Fix the snippet syntax.", **where)
            except PageForgeError as e:
                _warn(result, f"Custom code in {binding.id} is rejected: {e.what}", e.fix or "", **where)
