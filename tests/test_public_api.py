"""Tests for public API stability.

These tests ensure the top-level imports remain valid and don't regress.
"""

from __future__ import annotations


def test_core_imports_from_top_level():
    """Core symbols are importable from pageforge directly."""
    from pageforge import CommandHistory, EventEngine, PageBuilder, ViewState

    assert PageBuilder.__name__ == "PageBuilder"
    assert EventEngine.__name__ == "EventEngine"
    assert CommandHistory.__name__ == "CommandHistory"
    assert ViewState.__name__ == "ViewState"


def test_model_imports_from_top_level():
    from pageforge import ComponentInstance, EventBinding, PageDocument, new_page

    page = new_page("Hello")
    assert isinstance(page, PageDocument)
    assert page.components == []
    assert EventBinding().action == "show"
    assert ComponentInstance(id="x", type="text").children is None


def test_registry_imports_from_top_level():
    from pageforge import ComponentMeta, ComponentTypeRegistry, builtin_registry

    registry = builtin_registry()
    assert isinstance(registry, ComponentTypeRegistry)
    assert isinstance(registry.get("button"), ComponentMeta)


def test_builtin_registries_are_independent():
    """Each call builds a fresh catalog; there is no shared global."""
    from pageforge import ComponentMeta, builtin_registry

    a = builtin_registry()
    b = builtin_registry()
    a.register(ComponentMeta(type="only_in_a"))
    assert "only_in_a" in a
    assert "only_in_a" not in b


def test_error_imports_from_top_level():
    from pageforge import ConfigError, DocumentError, PageForgeError

    assert issubclass(ConfigError, PageForgeError)
    assert issubclass(DocumentError, PageForgeError)


def test_all_exports_resolve():
    import pageforge

    for name in pageforge.__all__:
        assert hasattr(pageforge, name), name
    assert pageforge.__version__
