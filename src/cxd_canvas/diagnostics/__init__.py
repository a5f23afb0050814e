"""Heuristic design diagnostics for CXD projects."""

from cxd_canvas.diagnostics.engine import (
    FACE_TAGS,
    DiagnosticIdGenerator,
    calculate_face_intensities,
    generate_diagnostics,
    group_by_category,
)
from cxd_canvas.diagnostics.models import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticSeverity,
    DiagnosticState,
    FaceIntensity,
)

__all__ = [
    "FACE_TAGS",
    "Diagnostic",
    "DiagnosticCategory",
    "DiagnosticIdGenerator",
    "DiagnosticSeverity",
    "DiagnosticState",
    "FaceIntensity",
    "calculate_face_intensities",
    "generate_diagnostics",
    "group_by_category",
]
