"""JSON codec for page documents.

Keys follow the editor's export format (camelCase). Decoding validates the
whole input before returning, so a failed import never yields a partial page.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Optional, Set

from .errors import (
    DocumentError,
    children_mismatch,
    document_duplicate_id,
    document_invalid_json,
    document_missing_field,
    document_unknown_type,
    document_wrong_type,
)
from .model import ComponentInstance, EventBinding, PageDocument, payload_from_dict
from .registry import ComponentTypeRegistry


# --- Encoding ---


def binding_to_dict(binding: EventBinding) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": binding.id,
        "eventType": binding.event_type,
        "action": binding.action,
    }
    if binding.target_component is not None:
        data["targetComponent"] = binding.target_component
    if binding.payload is not None:
        data["payload"] = binding.payload.to_dict()
    return data


def instance_to_dict(instance: ComponentInstance) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": instance.id,
        "type": instance.type,
        "props": copy.deepcopy(instance.props),
        "style": copy.deepcopy(instance.style),
        "events": [binding_to_dict(b) for b in instance.events],
        "hidden": instance.hidden,
    }
    if instance.children is not None:
        data["children"] = [instance_to_dict(c) for c in instance.children]
    return data


def document_to_dict(document: PageDocument) -> Dict[str, Any]:
    return {
        "id": document.id,
        "title": document.title,
        "globalStyles": copy.deepcopy(document.global_styles),
        "components": [instance_to_dict(c) for c in document.components],
        "dataSources": copy.deepcopy(document.data_sources),
    }


def dumps(document: PageDocument, indent: Optional[int] = 2) -> str:
    return json.dumps(document_to_dict(document), indent=indent, ensure_ascii=False)


# --- Decoding ---


def _require(data: Dict[str, Any], key: str, where: str, expected: type, label: str) -> Any:
    if key not in data:
        raise document_missing_field(where, key)
    value = data[key]
    if not isinstance(value, expected):
        raise document_wrong_type(where, key, label, type(value).__name__)
    return value


def _optional(
    data: Dict[str, Any], key: str, where: str, expected: type, label: str, default: Any
) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, expected):
        raise document_wrong_type(where, key, label, type(value).__name__)
    return value


def _binding_from_dict(data: Any, where: str) -> EventBinding:
    if not isinstance(data, dict):
        raise document_wrong_type(where, "(binding)", "object", type(data).__name__)

    binding_id = _require(data, "id", where, str, "string")
    action = _require(data, "action", where, str, "string")
    event_type = _optional(data, "eventType", where, str, "string", "")
    target = data.get("targetComponent")
    if target is not None and not isinstance(target, str):
        raise document_wrong_type(where, "targetComponent", "string", type(target).__name__)

    return EventBinding(
        id=binding_id,
        event_type=event_type,
        action=action,
        target_component=target,
        payload=payload_from_dict(action, data.get("payload")),
    )


def _instance_from_dict(
    data: Any,
    where: str,
    seen: Set[str],
    registry: Optional[ComponentTypeRegistry],
) -> ComponentInstance:
    if not isinstance(data, dict):
        raise document_wrong_type(where, "(component)", "object", type(data).__name__)

    instance_id = _require(data, "id", where, str, "string")
    if instance_id in seen:
        raise document_duplicate_id("component", instance_id, where)
    seen.add(instance_id)

    type_name = _require(data, "type", where, str, "string")
    props = _optional(data, "props", where, dict, "object", {})
    style = _optional(data, "style", where, dict, "object", {})
    hidden = data.get("hidden", False)
    if not isinstance(hidden, bool):
        raise document_wrong_type(where, "hidden", "boolean", type(hidden).__name__)

    raw_children = data.get("children")
    if raw_children is not None and not isinstance(raw_children, list):
        raise document_wrong_type(where, "children", "array", type(raw_children).__name__)

    if registry is not None:
        if not registry.has_type(type_name):
            raise document_unknown_type(type_name, instance_id)
        allowed = registry.allows_children(type_name)
        if allowed != (raw_children is not None):
            raise children_mismatch(type_name, instance_id, allowed)

    raw_events = _optional(data, "events", where, list, "array", [])
    events: List[EventBinding] = []
    binding_ids: Set[str] = set()
    for i, raw in enumerate(raw_events):
        binding = _binding_from_dict(raw, f"{where}.events[{i}]")
        if binding.id in binding_ids:
            raise document_duplicate_id("binding", binding.id, f"{where}.events[{i}]")
        binding_ids.add(binding.id)
        events.append(binding)

    children: Optional[List[ComponentInstance]] = None
    if raw_children is not None:
        children = [
            _instance_from_dict(child, f"{where}.children[{i}]", seen, registry)
            for i, child in enumerate(raw_children)
        ]

    return ComponentInstance(
        id=instance_id,
        type=type_name,
        props=copy.deepcopy(props),
        style=copy.deepcopy(style),
        children=children,
        events=events,
        hidden=hidden,
    )


def document_from_dict(
    data: Any, registry: Optional[ComponentTypeRegistry] = None
) -> PageDocument:
    """Build a new PageDocument from exported data.

    Raises:
        DocumentError: On any missing field, wrong type, duplicate id, or (when
            a registry is given) unknown type or children/type mismatch.
    """
    if not isinstance(data, dict):
        raise document_wrong_type("page", "(root)", "object", type(data).__name__)

    page_id = _require(data, "id", "page", str, "string")
    title = _require(data, "title", "page", str, "string")
    raw_components = _require(data, "components", "page", list, "array")
    global_styles = _optional(data, "globalStyles", "page", dict, "object", {})
    data_sources = _optional(data, "dataSources", "page", list, "array", [])

    seen: Set[str] = set()
    components = [
        _instance_from_dict(raw, f"components[{i}]", seen, registry)
        for i, raw in enumerate(raw_components)
    ]

    return PageDocument(
        id=page_id,
        title=title,
        global_styles=copy.deepcopy(global_styles),
        components=components,
        data_sources=copy.deepcopy(data_sources),
    )


def loads(
    text: str,
    registry: Optional[ComponentTypeRegistry] = None,
    source: Optional[str] = None,
) -> PageDocument:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise document_invalid_json(str(e), source) from None
    return document_from_dict(data, registry)


__all__ = [
    "DocumentError",
    "binding_to_dict",
    "instance_to_dict",
    "document_to_dict",
    "document_from_dict",
    "dumps",
    "loads",
]
