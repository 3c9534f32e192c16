"""Tests for builder config and catalog loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from pageforge import ConfigError, ConfigLoader, EventBinding, ImportError_, PageBuilder


def write(tmp_path: Path, body: str, name: str = "config.yaml") -> Path:
    p = tmp_path / name
    p.write_text(textwrap.dedent(body), encoding="utf-8")
    return p


def test_load_builder_config(builder_config_yaml: Path):
    config = ConfigLoader.load_builder_config(builder_config_yaml)
    assert config.history_limit == 10
    assert config.title == "Promo page"
    assert config.device_mode == "desktop"
    assert config.zoom == 150
    assert config.submit_message == "Thanks!"
    assert config.registry.has_type("video")
    assert config.registry.has_type("button")


def test_defaults_for_empty_file(tmp_path: Path):
    config = ConfigLoader.load_builder_config(write(tmp_path, ""))
    assert config.history_limit == 50
    assert config.title == "Untitled page"
    assert config.device_mode == "mobile"
    assert len(config.registry) == 8
    assert config.actions == {}


def test_builder_from_config(builder_config_yaml: Path):
    builder = PageBuilder.from_config(ConfigLoader.load_builder_config(builder_config_yaml))
    assert builder.history.limit == 10
    assert builder.document.title == "Promo page"
    assert builder.view.zoom == 150
    video = builder.add_component("video")
    assert builder.find_component(video).props == {"src": "", "autoplay": False}


def test_builtin_catalog_can_be_disabled(tmp_path: Path):
    path = write(
        tmp_path,
        """\
        builtin_catalog: false
        catalog:
          - type: card
            allow_children: true
        """,
    )
    config = ConfigLoader.load_builder_config(path)
    assert config.registry.names() == ["card"]
    assert config.registry.allows_children("card")


def test_catalog_entry_overrides_builtin(tmp_path: Path):
    path = write(
        tmp_path,
        """\
        catalog:
          - type: button
            default_props: {text: "Buy now"}
            events: [onClick]
        """,
    )
    registry = ConfigLoader.load_builder_config(path).registry
    assert registry.default_props("button") == {"text": "Buy now"}
    assert len(registry) == 8


def test_actions_are_loaded_and_registered(tmp_path: Path, messages):
    path = write(
        tmp_path,
        """\
        actions:
          shout: "fixture_actions:shout"
        """,
    )
    config = ConfigLoader.load_builder_config(path)
    builder = PageBuilder.from_config(config, notify=lambda t, s: messages.append((t, s)))
    assert builder.engine.has_action("shout")

    button = builder.add_component("button")
    builder.update_component_events(button, [EventBinding(event_type="onClick", action="shout")])
    builder.fire_event("onClick", button)
    assert messages == [("BUTTON!", "info")]


def test_action_entry_must_be_dotted_path(tmp_path: Path):
    path = write(tmp_path, "actions:\n  shout: fixture_actions.shout\n")
    with pytest.raises(ConfigError, match="Invalid actions entry"):
        ConfigLoader.load_builder_config(path)


def test_action_must_be_callable(tmp_path: Path):
    path = write(tmp_path, "actions:\n  nope: 'fixture_actions:NOT_CALLABLE'\n")
    with pytest.raises(ImportError_, match="Not callable"):
        ConfigLoader.load_builder_config(path)


@pytest.mark.parametrize(
    "body, field",
    [
        ("history_limit: 0\n", "history_limit"),
        ("history_limit: many\n", "history_limit"),
        ("title: [1, 2]\n", "title"),
        ("device_mode: watch\n", "device_mode"),
        ("zoom: big\n", "zoom"),
        ("submit_message: 3\n", "submit_message"),
        ("global_styles: red\n", "global_styles"),
        ("catalog: button\n", "catalog"),
        ("catalog:\n  - name: NoType\n", "catalog[0].type"),
        ("catalog:\n  - type: x\n    allow_children: maybe\n", "catalog[0].allow_children"),
        ("catalog:\n  - type: x\n    events: onClick\n", "catalog[0].events"),
    ],
)
def test_invalid_values(tmp_path: Path, body: str, field: str):
    with pytest.raises(ConfigError) as exc:
        ConfigLoader.load_builder_config(write(tmp_path, body))
    assert exc.value.context.items["field"] == field


def test_root_must_be_mapping(tmp_path: Path):
    with pytest.raises(ConfigError, match="wrong type"):
        ConfigLoader.load_yaml(write(tmp_path, "- a\n- b\n"))


def test_load_catalog(tmp_path: Path):
    path = write(
        tmp_path,
        """\
        catalog:
          - type: hero
            name: Hero banner
            category: marketing
            events: [onClick]
        """,
    )
    registry = ConfigLoader.load_catalog(path)
    meta = registry.require("hero")
    assert meta.name == "Hero banner"
    assert meta.events == ("onClick",)
    assert registry.by_category("marketing") == [meta]


def test_load_catalog_requires_key(tmp_path: Path):
    with pytest.raises(ConfigError, match="'catalog'"):
        ConfigLoader.load_catalog(write(tmp_path, "types: []\n"))
