"""Built-in action executors.

An executor is called as ``executor(binding, source, context)`` and acts only
through the ``EventContext`` callbacks. Executors return nothing; a missing
precondition (no target, no url, no code) makes them a silent no-op.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from .context import EventContext
from .model import (
    ComponentInstance,
    CustomPayload,
    EventBinding,
    NavigatePayload,
    RawPayload,
    SetPropPayload,
    SubmitPayload,
)
from .sandbox import run_snippet

logger = logging.getLogger(__name__)

ActionExecutor = Callable[[EventBinding, ComponentInstance, EventContext], None]

DEFAULT_SUBMIT_MESSAGE = "Submitted successfully!"
CUSTOM_FAILURE_MESSAGE = "Custom action failed"


@dataclass(frozen=True)
class ActionDescriptor:
    """An action choice offered by the event editing UI."""

    value: str
    label: str


BUILTIN_DESCRIPTORS: List[ActionDescriptor] = [
    ActionDescriptor("setProp", "Set property"),
    ActionDescriptor("show", "Show component"),
    ActionDescriptor("hide", "Hide component"),
    ActionDescriptor("toggle", "Toggle visibility"),
    ActionDescriptor("navigate", "Navigate"),
    ActionDescriptor("submit", "Submit / message"),
    ActionDescriptor("custom", "Custom code"),
]


def _payload_field(binding: EventBinding, typed: type, name: str) -> Any:
    """Read ``name`` from a typed payload, or from a raw mapping payload."""
    payload = binding.payload
    if isinstance(payload, typed):
        return getattr(payload, name)
    if isinstance(payload, RawPayload) and isinstance(payload.data, dict):
        return payload.data.get(name)
    return None


def set_prop(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    payload = binding.payload
    if not binding.has_target or payload is None:
        return
    if isinstance(payload, SetPropPayload):
        props = payload.props
    elif isinstance(payload, RawPayload) and isinstance(payload.data, dict):
        props = payload.data
    else:
        return
    context.update_component_props(binding.target_component, copy.deepcopy(props))  # type: ignore[arg-type]


def show(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    if binding.has_target:
        context.set_component_hidden(binding.target_component, False)  # type: ignore[arg-type]


def hide(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    if binding.has_target:
        context.set_component_hidden(binding.target_component, True)  # type: ignore[arg-type]


def toggle(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    if not binding.has_target:
        return
    target = context.find_component(binding.target_component)  # type: ignore[arg-type]
    if target is not None:
        context.set_component_hidden(target.id, not target.hidden)


def navigate(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    url = _payload_field(binding, NavigatePayload, "url")
    if url is not None:
        context.navigate(str(url))


def submit(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    message = _payload_field(binding, SubmitPayload, "message")
    if message is None:
        message = context.custom_data.get("submit_message", DEFAULT_SUBMIT_MESSAGE)
    context.show_message(str(message), "success")


def custom(binding: EventBinding, source: ComponentInstance, context: EventContext) -> None:
    code = _payload_field(binding, CustomPayload, "code")
    if code is None:
        return
    try:
        # Copies, so a snippet can only change the page through the context.
        run_snippet(
            str(code),
            source=copy.deepcopy(source),
            context=context,
            binding=copy.deepcopy(binding),
        )
    except Exception as e:
        logger.error("Custom action %s on %s failed: %s", binding.id, source.id, e)
        context.show_message(f"{CUSTOM_FAILURE_MESSAGE}: {e}", "error")


BUILTIN_ACTIONS: Dict[str, ActionExecutor] = {
    "setProp": set_prop,
    "show": show,
    "hide": hide,
    "toggle": toggle,
    "navigate": navigate,
    "submit": submit,
    "custom": custom,
}
