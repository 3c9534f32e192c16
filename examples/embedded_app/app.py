#!/usr/bin/env python
"""
Embedded PageForge Application Example

Demonstrates:
- Loading a builder config with a catalog override and custom actions
- Building a page through recorded editing commands
- Wiring event bindings and firing them
- Undo/redo of edits (fired effects are not recorded)
- Saving the page to JSON and reloading it

Run: python app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add the example directory to path so config can find promo_actions
sys.path.insert(0, str(Path(__file__).parent))

from pageforge import ConfigLoader, EventBinding, PageBuilder, SetPropPayload, explain
from pageforge.extras import load_page, save_page


def build_promo_page(builder: PageBuilder) -> dict:
    """Build the demo page and return the ids of its components by role."""
    hero = builder.add_component("container")
    countdown = builder.add_component("countdown", parent_id=hero)
    card = builder.add_component("productCard", parent_id=hero)
    buy = builder.add_component("button", parent_id=hero)
    builder.update_component_props(buy, {"text": "Buy now"})

    builder.update_component_events(card, [EventBinding(event_type="onBuy", action="addToCart")])
    builder.update_component_events(
        countdown,
        [EventBinding(event_type="onEnd", action="markSoldOut", target_component=buy)],
    )
    builder.update_component_events(
        buy,
        [
            EventBinding(
                event_type="onClick",
                action="setProp",
                target_component=card,
                payload=SetPropPayload({"tag": "In your cart"}),
            ),
            EventBinding(event_type="onClick", action="submit"),
        ],
    )
    return {"hero": hero, "countdown": countdown, "card": card, "buy": buy}


def main():
    # --- Setup ---
    config_path = Path(__file__).parent / "builder.yaml"
    page_path = Path(__file__).parent / "page.json"

    config = ConfigLoader.load_builder_config(config_path)
    builder = PageBuilder.from_config(
        config, notify=lambda text, severity: print(f"  [{severity}] {text}")
    )

    # --- Restore or Create Page ---
    if page_path.exists():
        builder.load_page(load_page(page_path, registry=builder.registry))
        print(f"Restored page: {builder.document.title}")
        by_type = {node.type: node.id for node in builder.document.walk()}
        ids = {"card": by_type["productCard"], "buy": by_type["button"], "countdown": by_type["countdown"]}
    else:
        print(f"Starting fresh: {builder.document.title}")
        ids = build_promo_page(builder)

    # --- Observability: Log Changes ---
    builder.subscribe(lambda change: print(f"  change: {change}"))

    # --- Demo: Fire Events ---
    print("\n--- Firing events ---\n")
    print("Sending: onBuy on the product card")
    builder.fire_event("onBuy", ids["card"])
    print("Sending: onClick on the buy button")
    builder.fire_event("onClick", ids["buy"])
    print("Sending: onEnd on the countdown")
    builder.fire_event("onEnd", ids["countdown"])

    # --- Demo: Undo/Redo ---
    print("\n--- Undo/redo ---\n")
    print(f"Recorded edits: {builder.history.labels()}")
    builder.set_page_title("Flash sale (ended)")
    builder.undo()
    print(f"Title after undo: {builder.document.title}")
    builder.redo()
    print(f"Title after redo: {builder.document.title}")

    # --- Check and save ---
    result = explain(builder.export_page(), registry=builder.registry, actions=builder.engine.action_names())
    print(f"\nPage valid: {result.is_valid} ({len(result.warnings)} warning(s))")

    save_page(builder.export_page(), page_path)
    print(f"\nDone. Page saved to {page_path.name}")


if __name__ == "__main__":
    main()
