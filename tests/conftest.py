from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import List, Tuple

import pytest

from pageforge import PageBuilder, builtin_registry


@pytest.fixture
def registry():
    return builtin_registry()


@pytest.fixture
def messages() -> List[Tuple[str, str]]:
    return []


@pytest.fixture
def opened() -> List[str]:
    return []


@pytest.fixture
def builder(messages, opened) -> PageBuilder:
    """A builder whose notify/open_url callbacks record into lists."""
    return PageBuilder(
        notify=lambda text, severity: messages.append((text, severity)),
        open_url=opened.append,
    )


@pytest.fixture
def page_data() -> dict:
    return {
        "id": "page-1",
        "title": "Landing",
        "globalStyles": {"backgroundColor": "#fff"},
        "components": [
            {
                "id": "box",
                "type": "container",
                "props": {"direction": "column"},
                "style": {},
                "events": [],
                "hidden": False,
                "children": [
                    {
                        "id": "btn",
                        "type": "button",
                        "props": {"text": "Hide banner"},
                        "style": {},
                        "events": [
                            {
                                "id": "b-hide",
                                "eventType": "onClick",
                                "action": "hide",
                                "targetComponent": "banner",
                            }
                        ],
                        "hidden": False,
                    }
                ],
            },
            {
                "id": "banner",
                "type": "text",
                "props": {"content": "Sale!"},
                "style": {"color": "red"},
                "events": [],
                "hidden": False,
            },
        ],
        "dataSources": [],
    }


@pytest.fixture
def page_json(tmp_path: Path, page_data: dict) -> Path:
    p = tmp_path / "page.json"
    p.write_text(json.dumps(page_data), encoding="utf-8")
    return p


@pytest.fixture
def builder_config_yaml(tmp_path: Path) -> Path:
    p = tmp_path / "builder.yaml"
    p.write_text(
        textwrap.dedent(
            """\
            history_limit: 10
            title: "Promo page"
            device_mode: desktop
            zoom: 150
            submit_message: "Thanks!"
            catalog:
              - type: video
                name: Video
                category: media
                default_props:
                  src: ""
                  autoplay: false
                events: [onPlay, onEnd]
            """
        ),
        encoding="utf-8",
    )
    return p
