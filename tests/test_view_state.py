"""Tests for editor view state."""

from __future__ import annotations

import pytest

from pageforge import ViewState


def test_select_single_and_multi():
    view = ViewState()
    view.select("a")
    view.select("b", multi=True)
    assert view.selected_ids == ["a", "b"]
    view.select("a", multi=True)
    assert view.selected_ids == ["b"]
    view.select("c")
    assert view.selected_ids == ["c"]
    view.select(None)
    assert view.selected_ids == []


def test_zoom_is_clamped():
    view = ViewState()
    view.set_zoom(10)
    assert view.zoom == 50
    view.set_zoom(500)
    assert view.zoom == 200
    view.set_zoom(120)
    assert view.zoom == 120


def test_device_mode():
    view = ViewState()
    view.set_device_mode("tablet")
    assert view.device_mode == "tablet"
    with pytest.raises(ValueError):
        view.set_device_mode("watch")


def test_preview_mode_clears_selection_and_hover():
    view = ViewState(selected_ids=["a"], hovered_id="a")
    view.set_preview_mode(True)
    assert view.preview_mode
    assert view.selected_ids == [] and view.hovered_id is None


def test_forget():
    view = ViewState(selected_ids=["a", "b"], hovered_id="b")
    view.forget(["b"])
    assert view.selected_ids == ["a"]
    assert view.hovered_id is None
