"""Optional extras for PageForge."""

from .persist_json import load_page, save_page

__all__ = [
    # JSON persistence
    "save_page",
    "load_page",
]
