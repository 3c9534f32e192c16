"""Custom actions for the embedded app example."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pageforge import ComponentInstance, EventBinding, EventContext


def add_to_cart(binding: "EventBinding", source: "ComponentInstance", context: "EventContext") -> None:
    """Show a confirmation naming the product card's title."""
    title = source.props.get("title", "item")
    context.show_message(f"Added {title} to cart", "success")


def mark_sold_out(binding: "EventBinding", source: "ComponentInstance", context: "EventContext") -> None:
    """Relabel the target button and hide the countdown that fired."""
    if binding.target_component:
        context.update_component_props(binding.target_component, {"text": "Sold out", "disabled": True})
    context.set_component_hidden(source.id, True)
