"""JSON file persistence for pages."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..model import PageDocument
from ..registry import ComponentTypeRegistry
from ..serialize import dumps, loads


def save_page(document: PageDocument, path: str | Path) -> None:
    """
    Save a page to a JSON file, creating parent directories as needed.

    Raises:
        IOError: If file cannot be written
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dumps(document), encoding="utf-8")


def load_page(
    path: str | Path, registry: Optional[ComponentTypeRegistry] = None
) -> PageDocument:
    """
    Load a page from a JSON file.

    Args:
        path: Path to the JSON file
        registry: Optional catalog; when given, types and children are checked

    Raises:
        FileNotFoundError: If file doesn't exist
        DocumentError: If JSON is invalid or the page is malformed
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Page file not found: {path}")
    return loads(p.read_text(encoding="utf-8"), registry, source=str(p))
