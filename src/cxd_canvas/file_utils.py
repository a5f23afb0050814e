"""Reading and writing CXD project export files."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

from loguru import logger
from pydantic import ValidationError

from cxd_canvas.errors import ProjectLoadError
from cxd_canvas.schemas.canvas import parse_element
from cxd_canvas.schemas.project import CanvasProject
from cxd_canvas.tasks.updates import ElementPatch


def read_project_data(path: Union[str, Path]) -> Dict[str, Any]:
    """Read the raw JSON object of a project export.

    Raises:
        ProjectLoadError: If the file cannot be read or is not a JSON object
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectLoadError(f"Cannot read project file: {e.strerror or e}", str(path)) from e
    except json.JSONDecodeError as e:
        raise ProjectLoadError(f"Invalid JSON at line {e.lineno}: {e.msg}", str(path)) from e

    if not isinstance(data, dict):
        raise ProjectLoadError("Project export must be a JSON object", str(path))
    return data


def _element_lists(data: Dict[str, Any]) -> Iterator[List[Any]]:
    """Yield every raw element list in an export: root, canvasLayout and board nodes."""
    for key in ("canvasElements", "canvas_elements"):
        if isinstance(data.get(key), list):
            yield data[key]

    layout = data.get("canvasLayout") or data.get("canvas_layout")
    layout = layout if isinstance(layout, dict) else {}
    if isinstance(layout.get("elements"), list):
        yield layout["elements"]

    for boards in (data.get("boards"), layout.get("boards")):
        for board in boards if isinstance(boards, list) else []:
            if isinstance(board, dict) and isinstance(board.get("nodes"), list):
                yield board["nodes"]


def _drop_invalid_elements(data: Dict[str, Any], source: str) -> None:
    """Remove elements that fail validation, in place, logging each one."""
    for items in _element_lists(data):
        kept = []
        for item in items:
            try:
                parse_element(item)
            except ValidationError as e:
                item_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(
                    f"Skipping invalid canvas element {item_id or '<no id>'} in {source}: "
                    f"{e.error_count()} validation error(s)"
                )
                continue
            kept.append(item)
        items[:] = kept


def load_project(path: Union[str, Path]) -> CanvasProject:
    """Load a project export.

    Invalid canvas elements are skipped with a warning so one bad node does not hide
    the rest of the board.

    Args:
        path: Path to a project JSON export

    Returns:
        The validated project

    Raises:
        ProjectLoadError: If the file is unreadable or the project itself is invalid
    """
    data = read_project_data(path)
    _drop_invalid_elements(data, str(path))

    try:
        project = CanvasProject.model_validate(data)
    except ValidationError as e:
        raise ProjectLoadError(f"Invalid project: {e.error_count()} validation error(s)", str(path)) from e

    logger.debug(f"Loaded project {project.id or '<unnamed>'} from {path}")
    return project


def write_file_atomic(path: Union[str, Path], content: str) -> None:
    """Write file atomically using a temporary file in the same directory."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=str(path.parent))
    success = False
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        Path(temp_path).replace(path)
        success = True
    finally:
        if not success:
            try:
                Path(temp_path).unlink()
            except OSError:
                pass


def write_element_patch(path: Union[str, Path], patch: ElementPatch) -> bool:
    """Apply a patch to the matching element of an export file and save it.

    The raw JSON is edited rather than re-serialized from the model, so fields the
    engine does not model survive the round trip.

    Returns:
        True if an element with the patch's id was found and written
    """
    data = read_project_data(path)

    target = None
    for items in _element_lists(data):
        for item in items:
            if isinstance(item, dict) and item.get("id") == patch.element_id:
                target = item
                break
        if target is not None:
            break

    if target is None:
        logger.warning(f"Element {patch.element_id} not found in {path}")
        return False

    if patch.content is not None:
        target["content"] = patch.content
    if patch.task_metadata is not None:
        target["taskMetadata"] = patch.task_metadata.to_json_dict()

    try:
        write_file_atomic(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        raise ProjectLoadError(f"Cannot write project file: {e.strerror or e}", str(path)) from e

    logger.info(f"Updated element {patch.element_id} in {path}")
    return True
