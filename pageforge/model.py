"""Page document data model.

A page is a tree of ``ComponentInstance`` nodes. Each instance carries its own
``EventBinding`` list; each binding names an action and a typed payload.

Payloads are a tagged union keyed by action name: the built-in actions decode
into their own dataclass, anything else stays a ``RawPayload``. Keys a typed
payload does not know about are kept in ``extra`` so documents survive a
save/load cycle unchanged.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Type, Union

from .ids import new_id

DEFAULT_TITLE = "Untitled page"
DEFAULT_GLOBAL_STYLES: Dict[str, Any] = {"backgroundColor": "#ffffff", "padding": "16px"}


# --- Action payloads ---


@dataclass
class SetPropPayload:
    """Partial props merged into the target. The whole payload is the props map."""

    props: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "SetPropPayload":
        return cls(props=copy.deepcopy(data))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.props)


@dataclass
class NavigatePayload:
    url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "NavigatePayload":
        rest = copy.deepcopy(data)
        return cls(url=rest.pop("url", None), extra=rest)

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extra)
        if self.url is not None:
            data["url"] = self.url
        return data


@dataclass
class SubmitPayload:
    message: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "SubmitPayload":
        rest = copy.deepcopy(data)
        return cls(message=rest.pop("message", None), extra=rest)

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extra)
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass
class CustomPayload:
    code: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "CustomPayload":
        rest = copy.deepcopy(data)
        return cls(code=rest.pop("code", None), extra=rest)

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extra)
        if self.code is not None:
            data["code"] = self.code
        return data


@dataclass
class EmptyPayload:
    """Payload of show/hide/toggle, which only need ``target_component``."""

    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "EmptyPayload":
        return cls(extra=copy.deepcopy(data))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.extra)


@dataclass
class RawPayload:
    """Free-form payload for actions registered at runtime, or malformed payloads."""

    data: Any = None

    @classmethod
    def from_data(cls, data: Any) -> "RawPayload":
        return cls(data=copy.deepcopy(data))

    def to_dict(self) -> Any:
        return copy.deepcopy(self.data)


ActionPayload = Union[
    SetPropPayload, NavigatePayload, SubmitPayload, CustomPayload, EmptyPayload, RawPayload
]

PAYLOAD_TYPES: Dict[str, Type[Any]] = {
    "setProp": SetPropPayload,
    "show": EmptyPayload,
    "hide": EmptyPayload,
    "toggle": EmptyPayload,
    "navigate": NavigatePayload,
    "submit": SubmitPayload,
    "custom": CustomPayload,
}


def payload_from_dict(action: str, data: Any) -> Optional[ActionPayload]:
    """Decode a JSON payload into the variant for ``action``.

    ``None`` stays ``None`` (no payload configured). Non-mapping payloads and
    payloads of unknown actions are kept verbatim as ``RawPayload``.
    """
    if data is None:
        return None
    if not isinstance(data, dict):
        return RawPayload.from_data(data)
    payload_cls = PAYLOAD_TYPES.get(action, RawPayload)
    return payload_cls.from_data(data)


# --- Document tree ---


@dataclass
class EventBinding:
    """When ``event_type`` fires on the owning instance, run ``action``."""

    id: str = field(default_factory=new_id)
    event_type: str = ""
    action: str = "show"
    target_component: Optional[str] = None
    payload: Optional[ActionPayload] = None

    @property
    def has_target(self) -> bool:
        # The editor stores an unpicked target as "".
        return bool(self.target_component)


@dataclass
class ComponentInstance:
    id: str
    type: str
    props: Dict[str, Any] = field(default_factory=dict)
    style: Dict[str, Any] = field(default_factory=dict)
    children: Optional[List["ComponentInstance"]] = None
    events: List[EventBinding] = field(default_factory=list)
    hidden: bool = False

    @property
    def allows_nesting(self) -> bool:
        """True when this instance carries a children sequence (even an empty one)."""
        return self.children is not None

    def walk(self) -> Iterator["ComponentInstance"]:
        """Pre-order iteration over this instance and its descendants."""
        yield self
        for child in self.children or ():
            yield from child.walk()

    def bindings_for(self, event_type: str) -> List[EventBinding]:
        return [b for b in self.events if b.event_type == event_type]


@dataclass
class PageDocument:
    id: str = field(default_factory=new_id)
    title: str = DEFAULT_TITLE
    global_styles: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_GLOBAL_STYLES))
    components: List[ComponentInstance] = field(default_factory=list)
    data_sources: List[Any] = field(default_factory=list)

    def walk(self) -> Iterator[ComponentInstance]:
        for component in self.components:
            yield from component.walk()


def new_page(
    title: str = DEFAULT_TITLE, global_styles: Optional[Dict[str, Any]] = None
) -> PageDocument:
    """Create an empty page with a fresh id."""
    styles = copy.deepcopy(global_styles) if global_styles is not None else dict(DEFAULT_GLOBAL_STYLES)
    return PageDocument(id=new_id(), title=title, global_styles=styles)
