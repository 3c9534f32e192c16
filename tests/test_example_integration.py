"""Integration tests for the embedded_app example.

These tests verify that the example in examples/embedded_app/ works correctly
and that the documented patterns don't regress.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add the example directory to path so we can import its modules
EXAMPLE_DIR = Path(__file__).parent.parent / "examples" / "embedded_app"
sys.path.insert(0, str(EXAMPLE_DIR))


@pytest.fixture
def example_config():
    """Load the example config, importing its custom actions."""
    from pageforge import ConfigLoader

    return ConfigLoader.load_builder_config(EXAMPLE_DIR / "builder.yaml")


@pytest.fixture
def example_builder(example_config, messages):
    from pageforge import PageBuilder

    return PageBuilder.from_config(example_config, notify=lambda t, s: messages.append((t, s)))


def test_example_actions_importable():
    """Example custom actions are importable."""
    from promo_actions import add_to_cart, mark_sold_out

    assert callable(add_to_cart)
    assert callable(mark_sold_out)


def test_example_config_loads(example_config):
    assert example_config.title == "Flash sale"
    assert example_config.history_limit == 20
    assert set(example_config.actions) == {"addToCart", "markSoldOut"}
    assert example_config.registry.default_props("productCard") == {"title": "Product name", "price": 99.0}


def test_example_page_events(example_builder, messages):
    """Firing the demo events applies every binding."""
    from app import build_promo_page

    ids = build_promo_page(example_builder)

    example_builder.fire_event("onBuy", ids["card"])
    assert messages[-1] == ("Added Product name to cart", "success")

    example_builder.fire_event("onClick", ids["buy"])
    assert example_builder.find_component(ids["card"]).props["tag"] == "In your cart"
    assert messages[-1] == ("We'll be in touch!", "success")

    example_builder.fire_event("onEnd", ids["countdown"])
    buy = example_builder.find_component(ids["buy"])
    assert buy.props["text"] == "Sold out" and buy.props["disabled"] is True
    assert example_builder.find_component(ids["countdown"]).hidden is True


def test_example_page_is_valid(example_builder):
    from app import build_promo_page

    from pageforge import explain

    build_promo_page(example_builder)
    result = explain(
        example_builder.export_page(),
        registry=example_builder.registry,
        actions=example_builder.engine.action_names(),
    )
    assert result.is_valid
    assert result.warnings == []


def test_example_page_survives_save_load(example_builder, tmp_path):
    from app import build_promo_page

    from pageforge.extras import load_page, save_page

    build_promo_page(example_builder)
    path = tmp_path / "page.json"
    save_page(example_builder.export_page(), path)

    before = example_builder.export_page_dict()
    example_builder.load_page(load_page(path, registry=example_builder.registry))
    assert example_builder.export_page_dict() == before
    assert not example_builder.can_undo
