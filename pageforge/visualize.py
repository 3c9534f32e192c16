"""Page visualization.

Generates a Mermaid flowchart of a page: solid edges for containment, dotted
edges for event bindings. Purely reads the document.

Example:
    from pageforge import visualize

    print(visualize(builder.export_page()))
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Union

from .extras.persist_json import load_page
from .model import ComponentInstance, PageDocument


def visualize(page: Union[str, Path, PageDocument], *, format: str = "mermaid") -> str:
    """Generate a diagram of ``page`` (a PageDocument or a JSON file path).

    Raises:
        ValueError: If format is not supported.
        DocumentError: If a page file cannot be decoded.
    """
    if format != "mermaid":
        raise ValueError(f"Unsupported format: {format!r}. Use 'mermaid'.")

    document = page if isinstance(page, PageDocument) else load_page(page)
    return _generate_mermaid(document)


def _generate_mermaid(document: PageDocument) -> str:
    lines: List[str] = ["flowchart TD", ""]
    lines.append("%% Solid edges: containment. Dotted edges: event -> action")
    lines.append(f"%% page: {document.id}")
    lines.append("")

    node_ids: Dict[str, str] = {}
    page_node = "page"
    lines.append(f'{page_node}(["{_escape(document.title)}"])')

    ordered: List[ComponentInstance] = list(document.walk())
    for i, node in enumerate(ordered):
        node_ids[node.id] = f"c{i}"
        style = ":::hidden" if node.hidden else ""
        lines.append(f'{node_ids[node.id]}["{_escape(node.type)}<br/>{_escape(_short(node.id))}"]{style}')
    lines.append("")

    for root in document.components:
        lines.append(f"{page_node} --> {node_ids[root.id]}")
    for node in ordered:
        for child in node.children or ():
            lines.append(f"{node_ids[node.id]} --> {node_ids[child.id]}")

    stale: Dict[str, str] = {}
    binding_lines: List[str] = []
    for node in ordered:
        for binding in node.events:
            target = binding.target_component
            if not target:
                continue
            if target in node_ids:
                target_node = node_ids[target]
            elif target in stale:
                target_node = stale[target]
            else:
                target_node = stale[target] = f"stale{len(stale)}"
                binding_lines.append(f'{target_node}["{_escape(_short(target))} (missing)"]:::stale')
            label = _escape(f"{binding.event_type or '?'}: {binding.action}")
            binding_lines.append(f'{node_ids[node.id]} -.->|"{label}"| {target_node}')

    if binding_lines:
        lines.append("")
        lines.extend(binding_lines)

    lines.append("")
    lines.append("classDef hidden stroke-dasharray: 5 5, color: #999")
    if stale:
        lines.append("classDef stale stroke: #c00, color: #c00")

    return "\n".join(lines)


def _short(instance_id: str) -> str:
    return instance_id[:8]


def _escape(text: str) -> str:
    return text.replace('"', "#quot;")
