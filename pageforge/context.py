from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .model import ComponentInstance

SEVERITIES = ("info", "success", "error")


@dataclass
class EventContext:
    """Everything an action executor is allowed to touch.

    Executors never see the page tree directly; they go through these
    callbacks, which the hosting application supplies.
    """

    find_component: Callable[[str], Optional[ComponentInstance]]
    update_component_props: Callable[[str, Dict[str, Any]], None]
    set_component_hidden: Callable[[str, bool], None]
    navigate: Callable[[str], None]
    show_message: Callable[..., None]
    custom_data: Dict[str, Any] = field(default_factory=dict)
