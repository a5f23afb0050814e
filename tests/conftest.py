"""Common test fixtures."""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from cxd_canvas.schemas.canvas import CanvasElement, parse_element


def make_element(element_id: str = "el-1", **fields: Any) -> CanvasElement:
    """Build a canvas element from camelCase or snake_case fields (freeform by default)."""
    data: Dict[str, Any] = {"id": element_id, "type": "freeform", "x": 0, "y": 0}
    data.update(fields)
    return parse_element(data)


@pytest.fixture
def element_factory():
    return make_element


@pytest.fixture
def sample_project_data() -> Dict[str, Any]:
    """Project export with root elements, one board and a mix of task sources."""
    return {
        "id": "proj-1",
        "name": "Launch",
        "canvasElements": [
            {
                "id": "groceries",
                "type": "freeform",
                "x": 10,
                "y": 20,
                "content": "- [ ] Buy milk\n- [x] Call Bob",
                "hypercubeTags": ["State Mapping"],
            },
            {
                "id": "single",
                "type": "text",
                "x": 0,
                "y": 0,
                "content": "- [ ] Draft outline",
                "taskMetadata": {"priority": "urgent", "dueDate": "2024-03-01"},
            },
            {
                "id": "tag-only",
                "type": "freeform",
                "x": 0,
                "y": 0,
                "content": "Just a note",
                "hypercubeTags": ["Reality Planes"],
            },
            {
                "id": "explicit",
                "type": "shape",
                "x": 5,
                "y": 5,
                "shapeType": "circle",
                "content": "Plan the retro",
                "taskMetadata": {
                    "isActionable": True,
                    "priority": "low",
                    "assignee": "sam",
                },
            },
            {"id": "pic", "type": "image", "x": 0, "y": 0},
        ],
        "boards": [
            {
                "id": "board-a",
                "title": "Research",
                "nodes": [
                    {
                        "id": "board-card",
                        "type": "freeform",
                        "x": 0,
                        "y": 0,
                        "boardId": "board-a",
                        "content": "- [x] Interview users",
                        "taskMetadata": {"priority": "high"},
                    }
                ],
            }
        ],
    }


@pytest.fixture
def project_file(tmp_path: Path, sample_project_data) -> Path:
    path = tmp_path / "project.json"
    path.write_text(json.dumps(sample_project_data), encoding="utf-8")
    return path
