from __future__ import annotations

import argparse
import os
import sys
from typing import Optional

from .builder import PageBuilder
from .config_loader import ConfigLoader
from .errors import PageForgeError
from .explain import explain
from .extras.persist_json import load_page, save_page
from .logger import get_logger, set_session_id
from .visualize import visualize


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="PageForge CLI")
    sub = p.add_subparsers(dest="command", required=True)

    cat = sub.add_parser("catalog", help="List the registered component types.")
    cat.add_argument("--config", type=str, default=None, help="Path to builder config YAML (or use PAGEFORGE_CONFIG).")

    exp = sub.add_parser("explain", help="Check a page file and print diagnostics.")
    exp.add_argument("page", type=str, help="Path to a page JSON file.")
    exp.add_argument("--config", type=str, default=None, help="Path to builder config YAML (or use PAGEFORGE_CONFIG).")

    vis = sub.add_parser("visualize", help="Print a Mermaid diagram of a page.")
    vis.add_argument("page", type=str, help="Path to a page JSON file.")

    fire = sub.add_parser("fire", help="Fire an event on a component and apply its bindings.")
    fire.add_argument("page", type=str, help="Path to a page JSON file.")
    fire.add_argument("component_id", type=str, help="Id of the component the event fires on.")
    fire.add_argument("event_type", type=str, help="Event name, e.g. onClick.")
    fire.add_argument("--config", type=str, default=None, help="Path to builder config YAML (or use PAGEFORGE_CONFIG).")
    fire.add_argument("--preview", action="store_true", help="Behave as in preview mode (navigate opens the url).")
    fire.add_argument("--write", type=str, default=None, help="Save the resulting page to this path.")

    return p


def _resolve_config_path(cli_value: Optional[str]) -> Optional[str]:
    return cli_value or os.getenv("PAGEFORGE_CONFIG")


def _make_builder(config_path: Optional[str]) -> PageBuilder:
    logger = get_logger("pageforge")
    if config_path:
        return PageBuilder.from_config(ConfigLoader.load_builder_config(config_path), logger=logger)
    return PageBuilder(logger=logger)


def cmd_catalog(args) -> int:
    builder = _make_builder(_resolve_config_path(args.config))
    registry = builder.registry
    for category in registry.categories():
        print(f"{category}:")
        for meta in registry.by_category(category):
            nesting = " [container]" if meta.allow_children else ""
            events = ", ".join(meta.events) or "-"
            print(f"  {meta.type}{nesting}  events: {events}")
    return 0


def cmd_explain(args) -> int:
    builder = _make_builder(_resolve_config_path(args.config))
    result = explain(args.page, registry=builder.registry, actions=builder.engine.action_names())
    print(result.format())
    return 0 if result.is_valid else 1


def cmd_visualize(args) -> int:
    print(visualize(args.page))
    return 0


def cmd_fire(args) -> int:
    builder = _make_builder(_resolve_config_path(args.config))
    builder.notify = lambda text, severity: print(f"[{severity}] {text}")
    builder.open_url = lambda url: print(f"open {url}")
    builder.view.set_preview_mode(args.preview)

    builder.load_page(load_page(args.page, registry=builder.registry))

    report = builder.fire_event(args.event_type, args.component_id)
    if report is None:
        print(f"Component not found: {args.component_id}", file=sys.stderr)
        return 1
    if not report.executed and not report.failed and not report.skipped:
        print(f"No bindings for {args.event_type} on {args.component_id}")
    for binding_id, error in report.failed.items():
        print(f"binding {binding_id} failed: {error}", file=sys.stderr)
    for binding_id in report.skipped:
        print(f"binding {binding_id} skipped: unknown action", file=sys.stderr)

    if args.write:
        save_page(builder.export_page(), args.write)
    return 0


COMMANDS = {
    "catalog": cmd_catalog,
    "explain": cmd_explain,
    "visualize": cmd_visualize,
    "fire": cmd_fire,
}


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    set_session_id()

    command = COMMANDS.get(args.command)
    if command is None:
        raise SystemExit(2)
    try:
        code = command(args)
    except (PageForgeError, FileNotFoundError) as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(1)
    raise SystemExit(code)


if __name__ == "__main__":
    main()
