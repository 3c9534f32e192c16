"""Resolve ``"module:attribute"`` paths, used by configs to plug in action executors."""

from __future__ import annotations

import importlib
from typing import Any, Tuple

from .errors import (
    import_invalid_format,
    import_module_not_found,
    import_not_callable,
    import_symbol_not_found,
)


def split_dotted(dotted: str) -> Tuple[str, str]:
    """Split ``'pkg.module:name'`` into its module and attribute parts.

    Raises:
        ImportError_: If the colon is missing or either side is blank.
    """
    module_path, sep, attr = (part.strip() for part in dotted.partition(":"))
    if not sep or not module_path or not attr:
        raise import_invalid_format(dotted)
    return module_path, attr


def load_symbol(dotted: str) -> Any:
    """Import the module named by ``dotted`` and return the attribute after the colon.

    Raises:
        ImportError_: Bad format, unimportable module, or missing attribute.
    """
    module_path, attr = split_dotted(dotted)
    try:
        module = importlib.import_module(module_path)
    except Exception:
        raise import_module_not_found(module_path, dotted) from None

    if not hasattr(module, attr):
        raise import_symbol_not_found(module_path, attr, dotted)
    return getattr(module, attr)


def load_action(dotted: str) -> Any:
    """Load an action executor, checking that it is callable."""
    executor = load_symbol(dotted)
    if not callable(executor):
        raise import_not_callable(dotted, type(executor).__name__)
    return executor
