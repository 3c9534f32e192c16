from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from .errors import ConfigError, ErrorContext, config_missing_field, config_wrong_type
from .history import DEFAULT_HISTORY_LIMIT
from .imports import load_action
from .model import DEFAULT_GLOBAL_STYLES, DEFAULT_TITLE
from .registry import ComponentMeta, ComponentTypeRegistry, builtin_metas, meta_from_dict
from .view_state import DEVICE_MODES


@dataclass(frozen=True)
class BuilderConfig:
    registry: ComponentTypeRegistry
    history_limit: int = DEFAULT_HISTORY_LIMIT
    title: str = DEFAULT_TITLE
    global_styles: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_GLOBAL_STYLES))
    device_mode: str = "mobile"
    zoom: int = 100
    submit_message: Optional[str] = None
    actions: Dict[str, Callable[..., None]] = field(default_factory=dict)


class ConfigLoader:
    @staticmethod
    def load_yaml(path: str | Path) -> Dict[str, Any]:
        p = Path(path)
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise config_wrong_type(
                field="(root)",
                expected="mapping/object",
                got=type(data).__name__,
                path=str(p),
            )
        return data

    @staticmethod
    def parse_catalog(entries: Any, path_str: Optional[str] = None) -> List[ComponentMeta]:
        if not isinstance(entries, list):
            raise config_wrong_type("catalog", "list", type(entries).__name__, path_str)

        metas: List[ComponentMeta] = []
        for i, entry in enumerate(entries):
            where = f"catalog[{i}]"
            if not isinstance(entry, dict):
                raise config_wrong_type(where, "mapping", type(entry).__name__, path_str)
            type_name = entry.get("type")
            if not type_name or not isinstance(type_name, str):
                raise config_missing_field(f"{where}.type", path_str)

            default_props = entry.get("default_props", {})
            if default_props is not None and not isinstance(default_props, dict):
                raise config_wrong_type(
                    f"{where}.default_props", "mapping", type(default_props).__name__, path_str
                )
            events = entry.get("events", [])
            if events is not None and (
                not isinstance(events, list) or not all(isinstance(e, str) for e in events)
            ):
                raise config_wrong_type(f"{where}.events", "list of strings", type(events).__name__, path_str)
            allow_children = entry.get("allow_children", False)
            if not isinstance(allow_children, bool):
                raise config_wrong_type(
                    f"{where}.allow_children", "boolean", type(allow_children).__name__, path_str
                )

            metas.append(meta_from_dict(entry))
        return metas

    @staticmethod
    def load_catalog(path: str | Path) -> ComponentTypeRegistry:
        """Load a registry from a YAML file with a top-level 'catalog' list."""
        path_str = str(path)
        data = ConfigLoader.load_yaml(path)
        if "catalog" not in data:
            raise config_missing_field("catalog", path_str)
        return ComponentTypeRegistry(ConfigLoader.parse_catalog(data["catalog"], path_str))

    @staticmethod
    def _load_actions(mapping: Any, path_str: str) -> Dict[str, Callable[..., None]]:
        if not isinstance(mapping, dict):
            raise config_wrong_type("actions", "mapping", type(mapping).__name__, path_str)

        actions: Dict[str, Callable[..., None]] = {}
        for name, dotted_path in mapping.items():
            if not isinstance(name, str) or not isinstance(dotted_path, str) or ":" not in dotted_path:
                ctx = ErrorContext()
                ctx.add("config_path", path_str)
                ctx.add("key", name)
                ctx.add("value", dotted_path)
                raise ConfigError(
                    f"Invalid actions entry: {name!r}: {dotted_path!r}",
                    why="Action entries map an action name to a 'module:function' path.",
                    fix="Use format: myAction: 'mypackage.actions:my_action'",
                    context=ctx,
                )
            actions[name] = load_action(dotted_path)
        return actions

    @staticmethod
    def load_builder_config(path: str | Path) -> BuilderConfig:
        path_str = str(path)
        data = ConfigLoader.load_yaml(path)

        history_limit = data.get("history_limit", DEFAULT_HISTORY_LIMIT)
        if not isinstance(history_limit, int) or isinstance(history_limit, bool) or history_limit < 1:
            raise config_wrong_type("history_limit", "integer >= 1", repr(history_limit), path_str)

        title = data.get("title", DEFAULT_TITLE)
        if not isinstance(title, str):
            raise config_wrong_type("title", "string", type(title).__name__, path_str)

        global_styles = data.get("global_styles", dict(DEFAULT_GLOBAL_STYLES))
        if not isinstance(global_styles, dict):
            raise config_wrong_type("global_styles", "mapping", type(global_styles).__name__, path_str)

        device_mode = data.get("device_mode", "mobile")
        if device_mode not in DEVICE_MODES:
            raise config_wrong_type("device_mode", " | ".join(DEVICE_MODES), repr(device_mode), path_str)

        zoom = data.get("zoom", 100)
        if not isinstance(zoom, int) or isinstance(zoom, bool):
            raise config_wrong_type("zoom", "integer", type(zoom).__name__, path_str)

        submit_message = data.get("submit_message")
        if submit_message is not None and not isinstance(submit_message, str):
            raise config_wrong_type("submit_message", "string", type(submit_message).__name__, path_str)

        use_builtin = data.get("builtin_catalog", True)
        if not isinstance(use_builtin, bool):
            raise config_wrong_type("builtin_catalog", "boolean", type(use_builtin).__name__, path_str)

        registry = ComponentTypeRegistry(builtin_metas() if use_builtin else None)
        catalog = data.get("catalog")
        if catalog is not None:
            # Entries replace built-ins of the same type.
            for meta in ConfigLoader.parse_catalog(catalog, path_str):
                registry.unregister(meta.type)
                registry.register(meta)

        actions = data.get("actions") or {}
        return BuilderConfig(
            registry=registry,
            history_limit=history_limit,
            title=title,
            global_styles=global_styles,
            device_mode=device_mode,
            zoom=zoom,
            submit_message=submit_message,
            actions=ConfigLoader._load_actions(actions, path_str),
        )
