"""Project export schema.

Only the slice of a CXD project the engine reads is modelled: the canvas elements
(root canvas plus nested boards) and the design sections the diagnostic engine scores.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from cxd_canvas.schemas.base import CanvasModel
from cxd_canvas.schemas.canvas import CanvasElement


class CanvasBoard(CanvasModel):
    """Nested board holding its own nodes."""

    id: str
    parent_board_id: Optional[str] = None
    title: str = ""
    nodes: List[CanvasElement] = Field(default_factory=list)


class RealityPlaneV2(CanvasModel):
    code: str
    enabled: bool = False
    interface_modality: str = ""
    priority: int = 0


class ContextAndMeaning(CanvasModel):
    world: Optional[str] = None
    story: Optional[str] = None
    magic: Optional[str] = None


class CanvasProject(CanvasModel):
    """A CXD project as exported by the web client."""

    id: str = ""
    name: str = ""
    canvas_elements: List[CanvasElement] = Field(default_factory=list)
    boards: List[CanvasBoard] = Field(default_factory=list)

    reality_planes_v2: List[RealityPlaneV2] = Field(
        default_factory=list, alias="realityPlanesV2"
    )
    sensory_domains: Dict[str, float] = Field(default_factory=dict)
    presence_types: Dict[str, float] = Field(default_factory=dict)
    state_mapping: Dict[str, Optional[str]] = Field(default_factory=dict)
    trait_mapping: Dict[str, Optional[str]] = Field(default_factory=dict)
    context_and_meaning: ContextAndMeaning = Field(default_factory=ContextAndMeaning)

    @model_validator(mode="before")
    @classmethod
    def _lift_canvas_layout(cls, data: Any) -> Any:
        """Accept elements stored under canvasLayout as well as at the top level."""
        if not isinstance(data, dict):
            return data
        layout = data.get("canvasLayout") or data.get("canvas_layout")
        if not isinstance(layout, dict):
            return data
        data = dict(data)
        if not (data.get("canvasElements") or data.get("canvas_elements")):
            data["canvasElements"] = layout.get("elements") or []
        if not data.get("boards"):
            data["boards"] = layout.get("boards") or []
        return data


def collect_elements(project: CanvasProject) -> List[CanvasElement]:
    """Return root elements followed by each board's nodes, in board order."""
    elements: List[CanvasElement] = list(project.canvas_elements)
    for board in project.boards:
        elements.extend(board.nodes)
    return elements
