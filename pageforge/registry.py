from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from .errors import unknown_component_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentMeta:
    """Static description of a component type. Not part of the mutable document."""

    type: str
    name: str = ""
    category: str = "basic"
    default_props: Dict[str, Any] = field(default_factory=dict)
    allow_children: bool = False
    events: tuple[str, ...] = ()
    icon: str = ""
    description: str = ""


class ComponentTypeRegistry:
    """Catalog of component types.

    Constructed explicitly and passed to whatever needs it; there is no
    process-wide instance, so tests can fabricate their own catalogs.
    """

    def __init__(self, metas: Optional[Iterable[ComponentMeta]] = None) -> None:
        self._types: Dict[str, ComponentMeta] = {}
        if metas:
            self.register_all(metas)

    def register(self, meta: ComponentMeta) -> None:
        if meta.type in self._types:
            logger.warning("Component type %r is already registered, overwriting", meta.type)
        self._types[meta.type] = meta

    def register_all(self, metas: Iterable[ComponentMeta]) -> None:
        for meta in metas:
            self.register(meta)

    def unregister(self, type_name: str) -> bool:
        return self._types.pop(type_name, None) is not None

    def clear(self) -> None:
        self._types.clear()

    def get(self, type_name: str) -> Optional[ComponentMeta]:
        return self._types.get(type_name)

    def require(self, type_name: str) -> ComponentMeta:
        meta = self._types.get(type_name)
        if meta is None:
            raise unknown_component_type(type_name, self.names())
        return meta

    def has_type(self, type_name: str) -> bool:
        return type_name in self._types

    def allows_children(self, type_name: str) -> bool:
        meta = self._types.get(type_name)
        return bool(meta and meta.allow_children)

    def default_props(self, type_name: str) -> Dict[str, Any]:
        """Return a private copy of the type's default props ({} for unknown types)."""
        meta = self._types.get(type_name)
        return copy.deepcopy(meta.default_props) if meta else {}

    def events_declared_for(self, type_name: str) -> List[str]:
        meta = self._types.get(type_name)
        return list(meta.events) if meta else []

    def names(self) -> List[str]:
        return sorted(self._types.keys())

    def categories(self) -> List[str]:
        seen: List[str] = []
        for meta in self._types.values():
            if meta.category not in seen:
                seen.append(meta.category)
        return seen

    def by_category(self, category: str) -> List[ComponentMeta]:
        return [m for m in self._types.values() if m.category == category]

    def all(self) -> List[ComponentMeta]:
        return list(self._types.values())

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __len__(self) -> int:
        return len(self._types)


def builtin_metas() -> List[ComponentMeta]:
    """The stock material catalog shipped with the editor."""
    countdown_end = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()

    return [
        ComponentMeta(
            type="button",
            name="Button",
            category="basic",
            icon="🔘",
            default_props={
                "text": "Click me",
                "variant": "primary",
                "size": "medium",
                "disabled": False,
                "block": False,
            },
            events=("onClick",),
        ),
        ComponentMeta(
            type="text",
            name="Text",
            category="basic",
            icon="📝",
            default_props={"content": "Enter some text", "variant": "body", "align": "left"},
            events=("onClick",),
        ),
        ComponentMeta(
            type="image",
            name="Image",
            category="basic",
            icon="🖼️",
            default_props={
                "src": "https://via.placeholder.com/300x200",
                "alt": "Image",
                "fit": "cover",
                "link": "",
            },
            events=("onClick", "onLoad", "onError"),
        ),
        ComponentMeta(
            type="container",
            name="Container",
            category="layout",
            icon="📦",
            default_props={
                "direction": "column",
                "justify": "flex-start",
                "align": "stretch",
                "gap": 8,
                "wrap": False,
            },
            allow_children=True,
        ),
        ComponentMeta(
            type="divider",
            name="Divider",
            category="basic",
            icon="➖",
            default_props={"type": "solid", "text": "", "orientation": "center"},
        ),
        ComponentMeta(
            type="carousel",
            name="Carousel",
            category="media",
            icon="🎠",
            default_props={
                "images": ",".join(
                    [
                        "https://via.placeholder.com/400x200/3b82f6/ffffff?text=Slide+1",
                        "https://via.placeholder.com/400x200/10b981/ffffff?text=Slide+2",
                        "https://via.placeholder.com/400x200/f59e0b/ffffff?text=Slide+3",
                    ]
                ),
                "autoplay": True,
                "interval": 3000,
                "showDots": True,
            },
            events=("onChange",),
        ),
        ComponentMeta(
            type="countdown",
            name="Countdown",
            category="marketing",
            icon="⏱️",
            default_props={"endTime": countdown_end, "title": "Sale ends in", "showDays": True},
            events=("onEnd",),
        ),
        ComponentMeta(
            type="productCard",
            name="Product card",
            category="marketing",
            icon="🛍️",
            default_props={
                "image": "https://via.placeholder.com/200x200",
                "title": "Product name",
                "price": 99.0,
                "originalPrice": 199.0,
                "tag": "Best seller",
            },
            events=("onClick", "onBuy"),
        ),
    ]


def builtin_registry() -> ComponentTypeRegistry:
    """Return a new registry loaded with the stock catalog."""
    return ComponentTypeRegistry(builtin_metas())


def meta_from_dict(data: Dict[str, Any]) -> ComponentMeta:
    """Build a ComponentMeta from a config mapping (keys mirror the dataclass fields).

    The caller validates types; this only normalizes optional fields.
    """
    return ComponentMeta(
        type=data["type"],
        name=data.get("name") or data["type"],
        category=data.get("category") or "basic",
        default_props=dict(data.get("default_props") or {}),
        allow_children=bool(data.get("allow_children", False)),
        events=tuple(data.get("events") or ()),
        icon=data.get("icon") or "",
        description=data.get("description") or "",
    )
