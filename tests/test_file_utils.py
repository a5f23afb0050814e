"""Tests for loading and writing project exports."""

import json

import pytest

from cxd_canvas.errors import ProjectLoadError
from cxd_canvas.file_utils import load_project, read_project_data, write_element_patch
from cxd_canvas.schemas.canvas import TaskMetadata
from cxd_canvas.schemas.base import TaskPriority
from cxd_canvas.tasks.updates import ElementPatch


class TestLoadProject:
    def test_load(self, project_file):
        """Test loading a project export."""
        project = load_project(project_file)
        assert project.id == "proj-1"
        assert len(project.canvas_elements) == 5
        assert project.boards[0].nodes[0].id == "board-card"

    def test_missing_file(self, tmp_path):
        """Test loading a missing file."""
        with pytest.raises(ProjectLoadError, match="Cannot read project file"):
            load_project(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Test loading invalid JSON."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ProjectLoadError, match="Invalid JSON"):
            load_project(path)

    def test_not_an_object(self, tmp_path):
        """Test loading JSON that is not an object."""
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ProjectLoadError):
            load_project(path)

    def test_invalid_elements_are_skipped(self, tmp_path, sample_project_data):
        """Test skipping invalid elements."""
        sample_project_data["canvasElements"].append({"id": "weird", "type": "hologram"})
        sample_project_data["boards"][0]["nodes"].append({"type": "freeform"})
        path = tmp_path / "project.json"
        path.write_text(json.dumps(sample_project_data), encoding="utf-8")

        project = load_project(path)

        assert [e.id for e in project.canvas_elements][-1] == "pic"
        assert len(project.boards[0].nodes) == 1

    def test_invalid_project_fields(self, tmp_path):
        """Test loading a project with invalid fields."""
        path = tmp_path / "project.json"
        path.write_text(json.dumps({"sensoryDomains": {"visual": "loud"}}), encoding="utf-8")
        with pytest.raises(ProjectLoadError, match="Invalid project"):
            load_project(path)

    def test_error_includes_path(self, tmp_path):
        missing = tmp_path / "nope.json"
        with pytest.raises(ProjectLoadError) as exc_info:
            load_project(missing)
        assert exc_info.value.path == str(missing)
        assert str(missing) in str(exc_info.value)


class TestWriteElementPatch:
    def test_writes_content(self, project_file):
        """Test writing patched content."""
        patch = ElementPatch(element_id="groceries", content="- [x] Buy milk\n- [x] Call Bob")
        assert write_element_patch(project_file, patch) is True

        project = load_project(project_file)
        assert project.canvas_elements[0].content == "- [x] Buy milk\n- [x] Call Bob"

    def test_writes_board_node_metadata(self, project_file):
        """Test writing metadata onto a board node."""
        patch = ElementPatch(
            element_id="board-card", task_metadata=TaskMetadata(priority=TaskPriority.LOW)
        )
        assert write_element_patch(project_file, patch) is True

        data = read_project_data(project_file)
        assert data["boards"][0]["nodes"][0]["taskMetadata"] == {"priority": "low"}

    def test_preserves_unmodelled_fields(self, tmp_path, sample_project_data):
        """Test keeping fields the models do not cover."""
        sample_project_data["canvasElements"][0]["color"] = "#ffcc00"
        sample_project_data["theme"] = "dark"
        path = tmp_path / "project.json"
        path.write_text(json.dumps(sample_project_data), encoding="utf-8")

        write_element_patch(path, ElementPatch(element_id="groceries", content="- [ ] x"))

        data = read_project_data(path)
        assert data["theme"] == "dark"
        assert data["canvasElements"][0]["color"] == "#ffcc00"

    def test_unknown_element(self, project_file):
        """Test writing a patch for an unknown element."""
        before = project_file.read_text(encoding="utf-8")
        assert write_element_patch(project_file, ElementPatch(element_id="ghost", content="x")) is False
        assert project_file.read_text(encoding="utf-8") == before
