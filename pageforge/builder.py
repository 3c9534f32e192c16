from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from . import tree
from .context import SEVERITIES, EventContext
from .event_engine import DispatchReport, EventEngine
from .history import DEFAULT_HISTORY_LIMIT, Command, CommandHistory
from .ids import new_id
from .logger import get_logger, page_scope
from .model import DEFAULT_TITLE, ComponentInstance, EventBinding, PageDocument, new_page
from .registry import ComponentTypeRegistry, builtin_registry
from .serialize import document_from_dict, document_to_dict, dumps, loads
from .view_state import ViewState

if TYPE_CHECKING:
    from .config_loader import BuilderConfig

Listener = Callable[[str], None]

UPDATABLE_FIELDS = ("props", "style", "events", "hidden")


@dataclass
class PageBuilder:
    """The editing session: one page, its undo history, view state and event engine.

    Every editing method records exactly one command when it changes the page
    and is a logged no-op otherwise. Changes made by fired events go through
    ``live_context()`` and are deliberately not recorded.
    """

    registry: ComponentTypeRegistry = field(default_factory=builtin_registry)
    logger: Any = field(default_factory=lambda: get_logger("pageforge"))
    history_limit: int = DEFAULT_HISTORY_LIMIT
    default_title: str = DEFAULT_TITLE
    default_global_styles: Optional[Dict[str, Any]] = None
    open_url: Optional[Callable[[str], None]] = None
    notify: Optional[Callable[[str, str], None]] = None
    submit_message: Optional[str] = None
    view: ViewState = field(default_factory=ViewState)
    document: PageDocument = field(init=False)
    history: CommandHistory = field(init=False)
    engine: EventEngine = field(init=False)
    _listeners: List[Listener] = field(init=False, default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.document = new_page(self.default_title, self.default_global_styles)
        self.history = CommandHistory(self.history_limit, logger=self.logger)
        self.engine = EventEngine(logger=self.logger)
        self.engine.set_context(self.live_context())

    @classmethod
    def from_config(cls, config: "BuilderConfig", **kwargs: Any) -> "PageBuilder":
        builder = cls(
            registry=config.registry,
            history_limit=config.history_limit,
            default_title=config.title,
            default_global_styles=config.global_styles,
            submit_message=config.submit_message,
            view=ViewState(zoom=config.zoom, device_mode=config.device_mode),
            **kwargs,
        )
        for name, executor in config.actions.items():
            builder.engine.register_action(name, executor)
        return builder

    @property
    def roots(self) -> List[ComponentInstance]:
        return self.document.components

    # --- Change listeners ---

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    def _emit(self, change: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                self.logger.error("Error in change listener for %s: %s", change, e)

    def _execute(self, command: Command) -> None:
        with page_scope(self.document.id):
            self.history.execute(command)
            self._emit(command.label)

    # --- Lookups ---

    def find_component(self, instance_id: str) -> Optional[ComponentInstance]:
        """Return the live instance (mutating it bypasses history)."""
        return tree.find(self.roots, instance_id)

    def find_component_path(self, instance_id: str) -> List[str]:
        return tree.find_path(self.roots, instance_id)

    def clone_component(self, instance_id: str) -> Optional[ComponentInstance]:
        """Detached copy with fresh ids; the page is not changed."""
        node = self.find_component(instance_id)
        return tree.clone(node) if node is not None else None

    # --- Structural edits ---

    def add_component(
        self, type_name: str, parent_id: Optional[str] = None, index: Optional[int] = None
    ) -> Optional[str]:
        if not self.registry.has_type(type_name):
            self.logger.error("Component type %r not found in registry", type_name)
            return None

        if parent_id is not None:
            parent = self.find_component(parent_id)
            if parent is None or parent.children is None:
                self.logger.warning("Cannot add %s: %s is not a container", type_name, parent_id)
                return None
            siblings = parent.children
        else:
            siblings = self.roots

        instance = ComponentInstance(
            id=new_id(),
            type=type_name,
            props=self.registry.default_props(type_name),
            children=[] if self.registry.allows_children(type_name) else None,
        )
        position = tree.clamp_index(index, len(siblings))
        self._execute(self._insert_command(f"add {type_name}", [instance], parent_id, position))
        self.view.select(instance.id)
        return instance.id

    def remove_component(self, instance_id: str) -> bool:
        loc = tree.find_location(self.roots, instance_id)
        if loc is None:
            self.logger.debug("remove: %s not found", instance_id)
            return False

        snapshot = copy.deepcopy(loc.node)
        parent_id, index = loc.parent_id, loc.index

        def forward() -> None:
            tree.remove(self.roots, instance_id)

        def inverse() -> None:
            tree.insert(self.roots, copy.deepcopy(snapshot), parent_id, index)

        self._execute(Command(f"remove {snapshot.type}", forward, inverse))
        self.view.forget(tree.collect_ids(snapshot))
        return True

    def move_component(
        self, instance_id: str, new_parent_id: Optional[str], index: Optional[int] = None
    ) -> Optional[str]:
        """Move a subtree. The moved instances get new ids; the new root id is returned."""
        origin = tree.find_location(self.roots, instance_id)
        if origin is None:
            self.logger.debug("move: %s not found", instance_id)
            return None
        original = copy.deepcopy(origin.node)
        origin_parent, origin_index = origin.parent_id, origin.index

        moved_id = tree.move(self.roots, instance_id, new_parent_id, index)
        if moved_id is None:
            self.logger.warning("Rejected move of %s into %s", instance_id, new_parent_id)
            return None

        dest = tree.find_location(self.roots, moved_id)
        if dest is None:
            self.logger.error("move: %s vanished after moving %s", moved_id, instance_id)
            return None
        moved = copy.deepcopy(dest.node)
        dest_parent, dest_index = dest.parent_id, dest.index

        def forward() -> None:
            tree.remove(self.roots, instance_id)
            tree.insert(self.roots, copy.deepcopy(moved), dest_parent, dest_index)

        def inverse() -> None:
            tree.remove(self.roots, moved_id)
            tree.insert(self.roots, copy.deepcopy(original), origin_parent, origin_index)

        self.history.record(Command(f"move {original.type}", forward, inverse))
        was_selected = instance_id in self.view.selected_ids
        self.view.forget(tree.collect_ids(original))
        if was_selected:
            self.view.select(moved_id)
        self._emit(f"move {original.type}")
        return moved_id

    def duplicate_component(self, instance_id: str) -> Optional[str]:
        loc = tree.find_location(self.roots, instance_id)
        if loc is None:
            self.logger.debug("duplicate: %s not found", instance_id)
            return None

        cloned = tree.clone(loc.node)
        self._execute(
            self._insert_command(f"duplicate {cloned.type}", [cloned], loc.parent_id, loc.index + 1)
        )
        self.view.select(cloned.id)
        return cloned.id

    def drop(
        self,
        intent: tree.DropIntent,
        component_type: Optional[str] = None,
        component_id: Optional[str] = None,
    ) -> Optional[str]:
        """Apply a drop gesture: add ``component_type`` or move ``component_id``."""
        if component_type is not None:
            position = tree.resolve_drop(self.roots, intent)
            if position is None:
                return None
            return self.add_component(component_type, *position)

        if component_id is not None:
            position = tree.resolve_drop(self.roots, intent, moving_id=component_id)
            if position is None:
                return None
            return self.move_component(component_id, *position)

        self.logger.debug("drop: nothing dragged")
        return None

    def _insert_command(
        self,
        label: str,
        instances: List[ComponentInstance],
        parent_id: Optional[str],
        index: int,
    ) -> Command:
        snapshots = [copy.deepcopy(i) for i in instances]

        def forward() -> None:
            for offset, snapshot in enumerate(snapshots):
                tree.insert(self.roots, copy.deepcopy(snapshot), parent_id, index + offset)

        def inverse() -> None:
            for snapshot in snapshots:
                tree.remove(self.roots, snapshot.id)

        return Command(label, forward, inverse)

    # --- Field edits ---

    def update_component(self, instance_id: str, **changes: Any) -> bool:
        """Replace whole fields (``props``, ``style``, ``events``, ``hidden``)."""
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"cannot update fields: {', '.join(sorted(unknown))}")
        for name in ("props", "style"):
            if name in changes and not isinstance(changes[name], dict):
                raise TypeError(f"{name} must be a dict, not {type(changes[name]).__name__}")
        events = changes.get("events", [])
        if not isinstance(events, list) or not all(isinstance(b, EventBinding) for b in events):
            raise TypeError("events must be a list of EventBinding")
        if "hidden" in changes:
            changes["hidden"] = bool(changes["hidden"])
        if "events" in changes and not self._bindings_valid(changes["events"]):
            return False
        return self._update_fields(instance_id, "update", changes)

    def update_component_props(self, instance_id: str, props: Dict[str, Any]) -> bool:
        node = self.find_component(instance_id)
        if node is None:
            self.logger.debug("update props: %s not found", instance_id)
            return False
        return self._update_fields(instance_id, "update props", {"props": {**node.props, **props}})

    def update_component_style(self, instance_id: str, style: Dict[str, Any]) -> bool:
        node = self.find_component(instance_id)
        if node is None:
            self.logger.debug("update style: %s not found", instance_id)
            return False
        return self._update_fields(instance_id, "update style", {"style": {**node.style, **style}})

    def update_component_events(self, instance_id: str, events: List[EventBinding]) -> bool:
        if not self._bindings_valid(events):
            return False
        return self._update_fields(instance_id, "update events", {"events": list(events)})

    def set_component_hidden(self, instance_id: str, hidden: bool) -> bool:
        hidden = bool(hidden)
        return self._update_fields(instance_id, "hide" if hidden else "show", {"hidden": hidden})

    def _bindings_valid(self, events: List[EventBinding]) -> bool:
        ids = [b.id for b in events]
        if len(ids) != len(set(ids)):
            self.logger.warning("Rejected events update: duplicate binding ids")
            return False
        return True

    def _update_fields(self, instance_id: str, label: str, changes: Dict[str, Any]) -> bool:
        node = self.find_component(instance_id)
        if node is None:
            self.logger.debug("%s: %s not found", label, instance_id)
            return False

        before = {name: copy.deepcopy(getattr(node, name)) for name in changes}
        after = copy.deepcopy(changes)

        def assign(values: Dict[str, Any]) -> None:
            target = tree.find(self.roots, instance_id)
            if target is None:
                return
            for name, value in values.items():
                setattr(target, name, copy.deepcopy(value))

        self._execute(Command(label, lambda: assign(after), lambda: assign(before)))
        return True

    def set_page_title(self, title: str) -> None:
        before = self.document.title

        def assign(value: str) -> None:
            self.document.title = value

        self._execute(Command("set title", lambda: assign(title), lambda: assign(before)))

    # --- Clipboard ---

    def copy_components(self) -> int:
        """Copy the selected instances to the clipboard; returns how many were copied."""
        found = [n for n in (self.find_component(i) for i in self.view.selected_ids) if n is not None]
        if found:
            self.view.clipboard = [tree.clone(n) for n in found]
        return len(found)

    def paste_components(self, parent_id: Optional[str] = None) -> List[str]:
        clipboard = self.view.clipboard
        if not clipboard:
            return []

        if parent_id is not None:
            parent = self.find_component(parent_id)
            if parent is None or parent.children is None:
                self.logger.warning("Cannot paste into %s: not a container", parent_id)
                return []
            siblings = parent.children
        else:
            siblings = self.roots

        # Fresh clones per paste, so pasting twice never repeats ids.
        clones = [tree.clone(c) for c in clipboard]
        self._execute(self._insert_command("paste", clones, parent_id, len(siblings)))
        pasted = [c.id for c in clones]
        self.view.select_many(pasted)
        return pasted

    # --- History ---

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        with page_scope(self.document.id):
            if not self.history.undo():
                return False
            self._prune_view()
            self._emit("undo")
        return True

    def redo(self) -> bool:
        with page_scope(self.document.id):
            if not self.history.redo():
                return False
            self._prune_view()
            self._emit("redo")
        return True

    def _prune_view(self) -> None:
        present = tree.all_ids(self.roots)
        stale = [i for i in self.view.selected_ids if i not in present]
        if self.view.hovered_id is not None and self.view.hovered_id not in present:
            stale.append(self.view.hovered_id)
        self.view.forget(stale)

    # --- Whole-page operations ---

    def load_page(self, document: PageDocument) -> None:
        """Replace the page. Validation happens first; on error nothing changes.

        Raises:
            DocumentError: If the document breaks the model invariants.
        """
        self._replace(document_from_dict(document_to_dict(document), self.registry))

    def load_page_dict(self, data: Any) -> None:
        self._replace(document_from_dict(data, self.registry))

    def load_page_json(self, text: str) -> None:
        self._replace(loads(text, self.registry))

    def clear_page(self) -> None:
        self._replace(new_page(self.default_title, self.default_global_styles))

    def _replace(self, document: PageDocument) -> None:
        self.document = document
        self.view.reset()
        self.history.clear()
        self.logger.info("Loaded page %s (%s)", document.id, document.title)
        self._emit("load")

    def export_page(self) -> PageDocument:
        """A deep copy of the current page, safe to keep or serialize."""
        return copy.deepcopy(self.document)

    def export_page_dict(self) -> Dict[str, Any]:
        return document_to_dict(self.document)

    def export_page_json(self, indent: Optional[int] = 2) -> str:
        return dumps(self.document, indent=indent)

    # --- Runtime events ---

    def live_context(self) -> EventContext:
        """Callbacks for action executors. Their edits bypass the history."""
        custom_data: Dict[str, Any] = {}
        if self.submit_message is not None:
            custom_data["submit_message"] = self.submit_message

        return EventContext(
            find_component=self._live_find,
            update_component_props=self._live_update_props,
            set_component_hidden=self._live_set_hidden,
            navigate=self._live_navigate,
            show_message=self._live_show_message,
            custom_data=custom_data,
        )

    def fire_event(self, event_type: str, instance_id: str) -> Optional[DispatchReport]:
        source = self.find_component(instance_id)
        if source is None:
            self.logger.debug("fire %s: %s not found", event_type, instance_id)
            return None
        with page_scope(self.document.id):
            return self.engine.execute_event(event_type, source)

    def has_binding(self, instance_id: str, event_type: str) -> bool:
        source = self.find_component(instance_id)
        return source is not None and self.engine.has_binding(source, event_type)

    def _live_find(self, instance_id: str) -> Optional[ComponentInstance]:
        node = self.find_component(instance_id)
        return copy.deepcopy(node) if node is not None else None

    def _live_update_props(self, instance_id: str, props: Dict[str, Any]) -> None:
        node = self.find_component(instance_id)
        if node is None:
            self.logger.debug("live setProp: %s not found", instance_id)
            return
        node.props = {**node.props, **copy.deepcopy(props)}
        self._emit("live props")

    def _live_set_hidden(self, instance_id: str, hidden: bool) -> None:
        node = self.find_component(instance_id)
        if node is None:
            self.logger.debug("live visibility: %s not found", instance_id)
            return
        node.hidden = bool(hidden)
        self._emit("live visibility")

    def _live_navigate(self, url: str) -> None:
        if not self.view.preview_mode:
            self._live_show_message(f"Will navigate to: {url}", "info")
        elif self.open_url is not None:
            self.open_url(url)
        else:
            self.logger.info("Navigate to %s", url)

    def _live_show_message(self, text: str, severity: str = "info") -> None:
        if severity not in SEVERITIES:
            severity = "info"
        if self.notify is not None:
            self.notify(text, severity)
        else:
            self.logger.info("[%s] %s", severity, text)
