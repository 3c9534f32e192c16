from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .model import ComponentInstance

DEVICE_MODES = ("mobile", "tablet", "desktop")
ZOOM_MIN = 50
ZOOM_MAX = 200


@dataclass
class ViewState:
    """Editor-side state that is not part of the page: selection, hover, zoom, clipboard."""

    selected_ids: List[str] = field(default_factory=list)
    hovered_id: Optional[str] = None
    preview_mode: bool = False
    zoom: int = 100
    device_mode: str = "mobile"
    clipboard: Optional[List[ComponentInstance]] = None

    def select(self, instance_id: Optional[str], multi: bool = False) -> None:
        """Select one instance; with ``multi`` toggle it in the current selection."""
        if instance_id is None:
            self.selected_ids = []
        elif multi:
            if instance_id in self.selected_ids:
                self.selected_ids.remove(instance_id)
            else:
                self.selected_ids.append(instance_id)
        else:
            self.selected_ids = [instance_id]

    def select_many(self, ids: Iterable[str]) -> None:
        self.selected_ids = list(ids)

    def clear_selection(self) -> None:
        self.selected_ids = []

    def set_hovered(self, instance_id: Optional[str]) -> None:
        self.hovered_id = instance_id

    def set_preview_mode(self, enabled: bool) -> None:
        self.preview_mode = enabled
        if enabled:
            self.selected_ids = []
            self.hovered_id = None

    def set_zoom(self, zoom: int) -> None:
        self.zoom = max(ZOOM_MIN, min(ZOOM_MAX, zoom))

    def set_device_mode(self, mode: str) -> None:
        if mode not in DEVICE_MODES:
            raise ValueError(f"device mode must be one of {', '.join(DEVICE_MODES)}")
        self.device_mode = mode

    def forget(self, ids: Iterable[str]) -> None:
        """Drop ids that no longer exist in the page."""
        gone = set(ids)
        self.selected_ids = [i for i in self.selected_ids if i not in gone]
        if self.hovered_id in gone:
            self.hovered_id = None

    def reset(self) -> None:
        """Clear selection and hover, as after loading or clearing a page."""
        self.selected_ids = []
        self.hovered_id = None
