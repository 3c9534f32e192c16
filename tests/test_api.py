"""Tests for the optional HTTP API."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

from pageforge import EventBinding, PageBuilder  # noqa: E402
from pageforge.api import create_app  # noqa: E402


@pytest.fixture
def builder():
    return PageBuilder()


@pytest.fixture
def client(builder):
    return TestClient(create_app(builder))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_add_and_get_page(client):
    r = client.post("/components", json={"type": "container"})
    assert r.status_code == 200
    box = r.json()["id"]

    r = client.post("/components", json={"type": "text", "parentId": box})
    assert r.status_code == 200

    page = client.get("/page").json()
    assert page["components"][0]["id"] == box
    assert page["components"][0]["children"][0]["type"] == "text"


def test_add_rejects_bad_requests(client):
    assert client.post("/components", json={}).status_code == 422
    assert client.post("/components", json={"type": "hologram"}).status_code == 400


def test_remove(client):
    text = client.post("/components", json={"type": "text"}).json()["id"]
    assert client.delete(f"/components/{text}").status_code == 200
    assert client.delete(f"/components/{text}").status_code == 404


def test_fire_event(client, builder):
    box = builder.add_component("container")
    button = builder.add_component("button")
    builder.update_component_events(
        button, [EventBinding(id="b1", event_type="onClick", action="hide", target_component=box)]
    )
    r = client.post(f"/components/{button}/events/onClick")
    assert r.json() == {"executed": ["b1"], "failed": {}, "skipped": []}
    assert builder.find_component(box).hidden is True

    assert client.post("/components/ghost/events/onClick").status_code == 404


def test_undo_redo(client):
    client.post("/components", json={"type": "text"})
    assert client.post("/undo").json() == {"applied": True, "canUndo": False, "canRedo": True}
    assert client.get("/page").json()["components"] == []
    assert client.post("/redo").json()["applied"] is True
    assert client.post("/redo").json()["applied"] is False
