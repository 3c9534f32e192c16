from __future__ import annotations

from typing import Any, Dict, Optional

try:
    from fastapi import FastAPI, HTTPException
except ImportError:  # optional dependency
    FastAPI = None
    HTTPException = Exception


def create_app(builder: Any):
    if FastAPI is None:
        raise RuntimeError("fastapi is not installed. Install with: pip install -e '.[api]'")

    app = FastAPI()

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/page")
    async def get_page() -> Dict[str, Any]:
        return builder.export_page_dict()

    @app.post("/components")
    async def add_component(body: Dict[str, Any]):
        type_name = body.get("type")
        parent_id: Optional[str] = body.get("parentId")
        index: Optional[int] = body.get("index")
        if not isinstance(type_name, str):
            raise HTTPException(status_code=422, detail="'type' is required")
        new_id = builder.add_component(type_name, parent_id, index)
        if new_id is None:
            raise HTTPException(status_code=400, detail="Component could not be added")
        return {"id": new_id}

    @app.delete("/components/{component_id}")
    async def remove_component(component_id: str):
        if not builder.remove_component(component_id):
            raise HTTPException(status_code=404, detail="Component not found")
        return {"status": "removed"}

    @app.post("/components/{component_id}/events/{event_type}")
    async def fire_event(component_id: str, event_type: str):
        report = builder.fire_event(event_type, component_id)
        if report is None:
            raise HTTPException(status_code=404, detail="Component not found")
        return {"executed": report.executed, "failed": report.failed, "skipped": report.skipped}

    @app.post("/undo")
    async def undo():
        return {"applied": builder.undo(), "canUndo": builder.can_undo, "canRedo": builder.can_redo}

    @app.post("/redo")
    async def redo():
        return {"applied": builder.redo(), "canUndo": builder.can_undo, "canRedo": builder.can_redo}

    return app
