from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .actions import BUILTIN_ACTIONS, BUILTIN_DESCRIPTORS, ActionDescriptor, ActionExecutor
from .context import EventContext
from .model import ComponentInstance


@dataclass
class DispatchReport:
    """What happened to each binding during one ``execute_event`` call."""

    event_type: str
    source_id: str
    executed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped


class EventEngine:
    """Runs the bindings of a fired event, in stored order, on the calling thread.

    A failing executor is logged and recorded in the report; it never stops the
    bindings after it and never propagates to the caller. Bindings naming an
    action with no registered executor are skipped with a warning.
    """

    def __init__(self, logger: Any = None, register_builtins: bool = True) -> None:
        self._actions: Dict[str, ActionExecutor] = {}
        self._labels: Dict[str, str] = {}
        self._context: Optional[EventContext] = None
        self._logger = logger or logging.getLogger(__name__)

        if register_builtins:
            for name, executor in BUILTIN_ACTIONS.items():
                self.register_action(name, executor)
            for descriptor in BUILTIN_DESCRIPTORS:
                self._labels[descriptor.value] = descriptor.label

    @property
    def context(self) -> Optional[EventContext]:
        return self._context

    def set_context(self, context: Optional[EventContext]) -> None:
        self._context = context

    def register_action(
        self, name: str, executor: ActionExecutor, label: Optional[str] = None
    ) -> None:
        """Add or replace an action. The last registration for a name wins."""
        if not callable(executor):
            raise ValueError("executor must be callable")
        self._actions[name] = executor
        if label:
            self._labels[name] = label

    def unregister_action(self, name: str) -> bool:
        self._labels.pop(name, None)
        return self._actions.pop(name, None) is not None

    def has_action(self, name: str) -> bool:
        return name in self._actions

    def action_names(self) -> List[str]:
        return list(self._actions.keys())

    def available_actions(self) -> List[ActionDescriptor]:
        return [ActionDescriptor(name, self._labels.get(name, name)) for name in self._actions]

    def has_binding(self, instance: ComponentInstance, event_type: str) -> bool:
        return any(b.event_type == event_type for b in instance.events)

    def execute_event(self, event_type: str, source: ComponentInstance) -> DispatchReport:
        report = DispatchReport(event_type=event_type, source_id=source.id)

        context = self._context
        if context is None:
            self._logger.warning("EventEngine: no context set, ignoring %s on %s", event_type, source.id)
            return report

        # Snapshot the list so bindings edited mid-dispatch don't reorder this run.
        for binding in list(source.bindings_for(event_type)):
            executor = self._actions.get(binding.action)
            if executor is None:
                self._logger.warning("EventEngine: unknown action %r (binding %s)", binding.action, binding.id)
                report.skipped.append(binding.id)
                continue
            try:
                executor(binding, source, context)
            except Exception as e:
                self._logger.error(
                    "EventEngine: error executing action %r (binding %s): %s", binding.action, binding.id, e
                )
                report.failed[binding.id] = str(e)
            else:
                report.executed.append(binding.id)

        return report
