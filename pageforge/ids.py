"""Id minting for instances, bindings and documents."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Return a fresh opaque id. Ids are never reused, even after deletion."""
    return str(uuid.uuid4())
