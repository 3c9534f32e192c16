"""Tests for explain() page introspection."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pageforge import Diagnostic, DocumentExplanation, builtin_registry, explain


def add_binding(page_data: dict, binding: dict) -> dict:
    page_data["components"][0]["children"][0]["events"].append(binding)
    return page_data


def warning_text(result: DocumentExplanation) -> str:
    return "\n".join(w.what for w in result.warnings)


class TestDiagnostic:
    """Tests for Diagnostic formatting."""

    def test_format_minimal(self):
        d = Diagnostic(level="warning", what="Something happened")
        assert "[WARNING] Something happened" in d.format()

    def test_format_full(self):
        d = Diagnostic(level="error", what="Bad", why="Because", fix="Fix it", context={"key": "value"})
        formatted = d.format()
        assert "[ERROR] Bad" in formatted
        assert "Why: Because" in formatted
        assert "Fix: Fix it" in formatted
        assert "key='value'" in formatted


class TestExplain:
    def test_valid_page_summary(self, page_data):
        result = explain(page_data, registry=builtin_registry())
        assert result.is_valid
        assert result.warnings == []
        assert result.page_id == "page-1"
        assert result.component_count == 3
        assert result.max_depth == 2
        assert result.type_counts == {"container": 1, "button": 1, "text": 1}
        assert result.binding_count == 1
        assert result.event_types == ["onClick"]

    def test_from_file(self, page_json: Path):
        result = explain(page_json)
        assert result.source == str(page_json)
        assert result.is_valid

    def test_missing_file(self, tmp_path: Path):
        result = explain(tmp_path / "nope.json")
        assert not result.is_valid
        assert "not found" in result.errors[0].what

    def test_invalid_json_file(self, tmp_path: Path):
        p = tmp_path / "bad.json"
        p.write_text("{oops", encoding="utf-8")
        result = explain(p)
        assert not result.is_valid
        assert "not valid JSON" in result.errors[0].what

    def test_never_raises_on_malformed_dict(self):
        result = explain({"title": "no id"})
        assert not result.is_valid

    def test_unknown_type_is_error(self, page_data):
        page_data["components"][1]["type"] = "hologram"
        result = explain(page_data, registry=builtin_registry())
        assert not result.is_valid
        assert "hologram" in result.errors[0].what

    def test_children_mismatch_is_error(self, page_data):
        page_data["components"][1]["children"] = []
        result = explain(page_data, registry=builtin_registry())
        assert "Children field" in result.errors[0].what

    def test_stale_target_warning(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "onClick", "action": "show", "targetComponent": "gone"})
        result = explain(page_data)
        assert result.is_valid
        assert "missing component gone" in warning_text(result)

    def test_missing_target_warning(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "onClick", "action": "toggle", "targetComponent": ""})
        assert "has no target" in warning_text(explain(page_data))

    def test_self_target_warning(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "onClick", "action": "hide", "targetComponent": "btn"})
        assert "its own component" in warning_text(explain(page_data))

    def test_undeclared_event_warning(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "onHover", "action": "submit"})
        assert "not declared" in warning_text(explain(page_data, registry=builtin_registry()))

    def test_empty_event_warning(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "", "action": "submit"})
        assert "has no event" in warning_text(explain(page_data))

    def test_unknown_action_warning(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "onClick", "action": "confetti"})
        assert "Unknown action 'confetti'" in warning_text(explain(page_data))
        assert "'confetti'" not in warning_text(explain(page_data, actions=["confetti", "hide"]))

    @pytest.mark.parametrize(
        "binding, expected",
        [
            ({"action": "setProp", "targetComponent": "banner"}, "no props"),
            ({"action": "navigate", "payload": {}}, "no url"),
            ({"action": "custom"}, "no code"),
            ({"action": "custom", "payload": {"code": "def ("}}, "does not parse"),
            ({"action": "custom", "payload": {"code": "import os"}}, "is rejected"),
        ],
    )
    def test_payload_warnings(self, page_data, binding, expected):
        add_binding(page_data, {"id": "b2", "eventType": "onClick", **binding})
        assert expected in warning_text(explain(page_data))

    def test_format_output(self, page_data):
        add_binding(page_data, {"id": "b2", "eventType": "onClick", "action": "show", "targetComponent": "gone"})
        text = explain(page_data).format()
        assert "Source: (dict)" in text
        assert "Warnings:" in text
        assert "Status: ✓ Valid" in text

    def test_format_invalid(self):
        text = explain({"id": "p"}).format()
        assert "Status: ✗ Invalid" in text

    def test_does_not_modify_input(self, page_data):
        before = json.dumps(page_data, sort_keys=True)
        explain(page_data, registry=builtin_registry())
        assert json.dumps(page_data, sort_keys=True) == before
