"""Tests for structured error messages.

These tests verify that errors follow the what/why/fix/context contract
and that the formatting doesn't regress.
"""

from __future__ import annotations

import pytest

from pageforge import (
    ConfigError,
    DocumentError,
    ImportError_,
    PageForgeError,
    RegistryError,
    SandboxError,
    builtin_registry,
)
from pageforge.errors import (
    ErrorContext,
    children_mismatch,
    config_missing_field,
    document_duplicate_id,
    document_missing_field,
    import_module_not_found,
    sandbox_forbidden_name,
    unknown_component_type,
)


# --- ErrorContext tests ---


def test_error_context_empty():
    """Empty context formats to empty string."""
    assert ErrorContext().format() == ""


def test_error_context_chaining():
    """add() returns self so calls can be chained."""
    ctx = ErrorContext().add("a", 1).add("b", "two")
    assert ctx.items == {"a": 1, "b": "two"}
    assert ctx.format() == "  a=1\n  b='two'"


# --- PageForgeError tests ---


def test_message_includes_all_parts():
    err = PageForgeError(
        "Something broke",
        why="Because",
        fix="Do this",
        context=ErrorContext().add("key", "value"),
    )
    text = str(err)
    assert text.startswith("Something broke")
    assert "Why: Because" in text
    assert "Fix: Do this" in text
    assert "key='value'" in text


def test_message_what_only():
    assert str(PageForgeError("Only what")) == "Only what"


@pytest.mark.parametrize("cls", [ConfigError, DocumentError, RegistryError, ImportError_, SandboxError])
def test_subclasses_share_base(cls):
    assert issubclass(cls, PageForgeError)


# --- Helper constructors ---


def test_config_missing_field():
    err = config_missing_field("catalog", "/tmp/b.yaml")
    assert isinstance(err, ConfigError)
    assert err.context.items == {"config_path": "/tmp/b.yaml", "field": "catalog"}


def test_unknown_component_type_lists_known():
    err = unknown_component_type("hologram", [f"t{i}" for i in range(7)])
    assert isinstance(err, RegistryError)
    assert "(+2 more)" in err.fix
    assert err.context.items["known_types"] == ["t0", "t1", "t2", "t3", "t4"]


def test_registry_require_raises():
    with pytest.raises(RegistryError, match="Unknown component type: 'hologram'"):
        builtin_registry().require("hologram")


def test_document_errors():
    assert "location" in document_missing_field("page", "id").context.items
    err = document_duplicate_id("binding", "b1", "components[0].events[1]")
    assert err.what == "Duplicate binding id: 'b1'"


def test_children_mismatch_fix_depends_on_type():
    assert "Add" in children_mismatch("container", "x", True).fix
    assert "Remove" in children_mismatch("text", "x", False).fix


def test_import_module_not_found():
    err = import_module_not_found("nope", "nope:fn")
    assert err.context.items["dotted_path"] == "nope:fn"


def test_sandbox_forbidden_name():
    err = sandbox_forbidden_name("__class__", 3)
    assert isinstance(err, SandboxError)
    assert err.context.items == {"name": "__class__", "line": 3}
