"""Heuristic diagnostics for a CXD project.

Scores each of the six design faces from the project's section data and the canvas
elements tagged with that face, then fires rules over the scores:

  Category      Looks for
  ------------------------------------------------------------
  balance       one face far ahead of the others
  coverage      developed faces with nothing on the canvas
  coherence     upstream/downstream faces out of step
  risk          combinations likely to overwhelm participants
  opportunity   strong combinations worth building on
  integration   canvas work spread across most faces

Rules are evaluated in a fixed order and ids are assigned per call, so the same
project always yields the same diagnostic ids.
"""

import re
import time
from typing import Callable, Dict, List, Optional

from loguru import logger

from cxd_canvas.diagnostics.models import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticSeverity,
    DiagnosticState,
    FaceIntensity,
)
from cxd_canvas.schemas.canvas import HYPERCUBE_FACE_TAGS, CanvasElement
from cxd_canvas.schemas.project import CanvasProject

# Face keys in hypercube order, paired with the tag used on canvas elements
FACE_KEYS = [
    "realityPlanes",
    "sensoryDomains",
    "presence",
    "stateMapping",
    "traitMapping",
    "contextAndMeaning",
]
FACE_TAGS: Dict[str, str] = dict(zip(FACE_KEYS, HYPERCUBE_FACE_TAGS))

REALITY_PLANE_COUNT = 7
SENSORY_DOMAIN_COUNT = 5
PRESENCE_TYPE_COUNT = 6


class DiagnosticIdGenerator:
    """Sequential ids (diag-0, diag-1, ...) scoped to one diagnostics run."""

    def __init__(self, prefix: str = "diag"):
        self.prefix = prefix
        self._next = 0

    def next_id(self) -> str:
        diagnostic_id = f"{self.prefix}-{self._next}"
        self._next += 1
        return diagnostic_id


def _now_ms() -> int:
    return int(time.time() * 1000)


def _face_name(face_key: str) -> str:
    """Split a camelCase face key for messages: stateMapping -> state Mapping."""
    return re.sub(r"([A-Z])", r" \1", face_key).strip()


def _tagged_count(elements: List[CanvasElement], face_tag: str) -> int:
    return sum(1 for element in elements if face_tag in element.hypercube_tags)


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def calculate_face_intensities(
    project: CanvasProject, elements: List[CanvasElement]
) -> Dict[str, FaceIntensity]:
    """Score every face of the project."""
    counts = {key: _tagged_count(elements, tag) for key, tag in FACE_TAGS.items()}
    intensities: Dict[str, FaceIntensity] = {}

    # Reality planes
    active_planes = [p for p in project.reality_planes_v2 if p.enabled]
    well_defined = [p for p in active_planes if _has_text(p.interface_modality)]
    plane_ratio = len(well_defined) / len(active_planes) if active_planes else 0.5
    if not active_planes:
        plane_state = "undeveloped"
    elif len(active_planes) < 3:
        plane_state = "emerging"
    elif plane_ratio > 0.7:
        plane_state = "coherent"
    else:
        plane_state = "active"
    intensities["realityPlanes"] = FaceIntensity(
        completion=len(active_planes) / REALITY_PLANE_COUNT,
        coherence=plane_ratio,
        element_count=counts["realityPlanes"],
        state=plane_state,
    )

    # Sensory domains
    domain_values = list(project.sensory_domains.values())
    active_domains = sum(1 for v in domain_values if v > 0)
    avg_domain = sum(domain_values) / len(domain_values) if domain_values else 0.0
    if avg_domain > 0:
        variance = sum((v - avg_domain) ** 2 for v in domain_values) / len(domain_values)
        domain_coherence = 1 - min(variance / 1000, 1)
    else:
        domain_coherence = 0.5
    if active_domains == 0:
        domain_state = "undeveloped"
    elif active_domains < 3:
        domain_state = "emerging"
    elif avg_domain > 70:
        domain_state = "active"
    else:
        domain_state = "coherent"
    intensities["sensoryDomains"] = FaceIntensity(
        completion=active_domains / SENSORY_DOMAIN_COUNT,
        coherence=domain_coherence,
        element_count=counts["sensoryDomains"],
        state=domain_state,
    )

    # Presence types
    presence_values = [v for v in project.presence_types.values() if v > 0]
    max_presence = max(presence_values) if presence_values else 0
    avg_presence = sum(presence_values) / len(presence_values) if presence_values else 0
    if not presence_values:
        presence_state = "undeveloped"
    elif len(presence_values) < 3:
        presence_state = "emerging"
    elif len(presence_values) > 4:
        presence_state = "coherent"
    else:
        presence_state = "active"
    intensities["presence"] = FaceIntensity(
        completion=len(presence_values) / PRESENCE_TYPE_COUNT,
        coherence=avg_presence / max_presence if max_presence > 0 else 0.5,
        element_count=counts["presence"],
        state=presence_state,
    )

    # State and trait mapping share one scoring rule
    for key, mapping in (
        ("stateMapping", project.state_mapping),
        ("traitMapping", project.trait_mapping),
    ):
        has_entries = any(_has_text(v) for v in mapping.values())
        tagged = counts[key]
        if not has_entries:
            state = "undeveloped"
        elif tagged == 0:
            state = "emerging"
        else:
            state = "coherent"
        intensities[key] = FaceIntensity(
            completion=0.7 if has_entries else 0,
            coherence=1 if tagged > 0 else 0.5,
            element_count=tagged,
            state=state,
        )

    # Meaning architecture
    meaning = project.context_and_meaning
    structured = sum(1 for v in (meaning.world, meaning.story, meaning.magic) if _has_text(v))
    tagged = counts["contextAndMeaning"]
    if structured == 0:
        meaning_state = "undeveloped"
    elif structured < 2:
        meaning_state = "emerging"
    elif tagged > 2:
        meaning_state = "coherent"
    else:
        meaning_state = "active"
    intensities["contextAndMeaning"] = FaceIntensity(
        completion=structured / 3,
        coherence=1 if tagged > 0 else 0.5,
        element_count=tagged,
        state=meaning_state,
    )

    return intensities


def generate_diagnostics(
    project: CanvasProject,
    elements: List[CanvasElement],
    clock: Optional[Callable[[], int]] = None,
) -> List[Diagnostic]:
    """
    Run every diagnostic rule over a project.

    Args:
        project: Project whose design sections are scored
        elements: Canvas elements (root canvas and boards) counted per face
        clock: Returns the timestamp (epoch ms) stamped on each diagnostic

    Returns:
        Diagnostics in rule order
    """
    clock = clock or _now_ms
    ids = DiagnosticIdGenerator()
    intensities = calculate_face_intensities(project, elements)
    diagnostics: List[Diagnostic] = []

    def emit(
        category: DiagnosticCategory,
        severity: DiagnosticSeverity,
        message: str,
        related_faces: List[str],
    ) -> None:
        diagnostics.append(
            Diagnostic(
                id=ids.next_id(),
                category=category,
                severity=severity,
                message=message,
                related_faces=related_faces,
                timestamp=clock(),
            )
        )

    completions = {key: value.completion for key, value in intensities.items()}
    reality = intensities["realityPlanes"]
    sensory = intensities["sensoryDomains"]
    presence = intensities["presence"]
    states = intensities["stateMapping"]
    traits = intensities["traitMapping"]
    meaning = intensities["contextAndMeaning"]

    # --- Balance ---

    max_completion = max(completions.values())
    min_completion = min(completions.values())
    if max_completion - min_completion > 0.5:
        dominant = next(key for key, value in completions.items() if value == max_completion)
        weak = [key for key, value in completions.items() if value < 0.3]
        if weak:
            weak_names = " and ".join(_face_name(key) for key in weak)
            verb = "remains" if len(weak) == 1 else "remain"
            emit(
                DiagnosticCategory.BALANCE,
                DiagnosticSeverity.CAUTION,
                f"{_face_name(dominant)} is dominant while {weak_names} {verb} underrepresented.",
                [dominant, *weak],
            )

    if sensory.completion > 0.8 and presence.completion < 0.3:
        emit(
            DiagnosticCategory.BALANCE,
            DiagnosticSeverity.CAUTION,
            "High sensory activation with minimal presence definition may fragment attention.",
            ["sensoryDomains", "presence"],
        )

    # --- Coverage ---

    for key, intensity in intensities.items():
        if intensity.completion > 0.3 and intensity.element_count == 0:
            emit(
                DiagnosticCategory.COVERAGE,
                DiagnosticSeverity.INFO,
                f"No canvas elements tagged to {_face_name(key)}.",
                [key],
            )

    if meaning.completion < 0.3 and any(v.completion > 0.5 for v in intensities.values()):
        emit(
            DiagnosticCategory.COVERAGE,
            DiagnosticSeverity.CONCERN,
            "Active experience design without grounding in Meaning Architecture.",
            ["contextAndMeaning"],
        )

    # --- Coherence ---

    if states.completion > 0.5 and traits.completion < 0.3:
        emit(
            DiagnosticCategory.COHERENCE,
            DiagnosticSeverity.CAUTION,
            "States are defined without downstream Trait Mapping for integration.",
            ["stateMapping", "traitMapping"],
        )

    if traits.completion > 0.5 and states.completion < 0.3:
        emit(
            DiagnosticCategory.COHERENCE,
            DiagnosticSeverity.INFO,
            "Trait outcomes specified without upstream State Mapping to reach them.",
            ["stateMapping", "traitMapping"],
        )

    if reality.completion > 0.5 and sensory.completion < 0.2:
        emit(
            DiagnosticCategory.COHERENCE,
            DiagnosticSeverity.INFO,
            "Technical substrate defined without sensory embodiment layer.",
            ["realityPlanes", "sensoryDomains"],
        )

    # --- Risk ---

    if sensory.completion > 0.7 and meaning.completion < 0.3:
        emit(
            DiagnosticCategory.RISK,
            DiagnosticSeverity.CONCERN,
            "High sensory load with low meaning anchoring may produce disorientation.",
            ["sensoryDomains", "contextAndMeaning"],
        )

    active_planes = sum(1 for p in project.reality_planes_v2 if p.enabled)
    if active_planes > 4:
        emit(
            DiagnosticCategory.RISK,
            DiagnosticSeverity.CONCERN,
            "More than four active reality planes may fragment coherence.",
            ["realityPlanes"],
        )

    if presence.completion < 0.3 and (states.completion > 0.5 or traits.completion > 0.5):
        emit(
            DiagnosticCategory.RISK,
            DiagnosticSeverity.CAUTION,
            "State or trait outcomes targeted without defining quality of presence.",
            ["presence", "stateMapping", "traitMapping"],
        )

    # --- Opportunity ---

    if all(0.3 < v.completion < 0.8 for v in intensities.values()):
        emit(
            DiagnosticCategory.OPPORTUNITY,
            DiagnosticSeverity.INFO,
            "All domains show activity—consider deepening one area for focus.",
            list(intensities),
        )

    if states.completion > 0.6 and traits.completion > 0.6 and meaning.completion > 0.5:
        emit(
            DiagnosticCategory.OPPORTUNITY,
            DiagnosticSeverity.INFO,
            "Strong state-to-trait pathway with narrative grounding suggests coherent design.",
            ["stateMapping", "traitMapping", "contextAndMeaning"],
        )

    if presence.completion > 0.7 and presence.coherence > 0.7:
        emit(
            DiagnosticCategory.OPPORTUNITY,
            DiagnosticSeverity.INFO,
            "Rich and balanced presence definition offers multi-modal engagement.",
            ["presence"],
        )

    # --- Integration ---

    tagged_elements = sum(1 for element in elements if element.hypercube_tags)
    if tagged_elements > 10:
        faces_with_elements = sum(1 for v in intensities.values() if v.element_count > 0)
        if faces_with_elements >= 5:
            emit(
                DiagnosticCategory.INTEGRATION,
                DiagnosticSeverity.INFO,
                "Canvas artifacts distributed across most domains—design shows systemic thinking.",
                list(intensities),
            )

    coherent_faces = [key for key, value in intensities.items() if value.coherence > 0.7]
    if len(coherent_faces) >= 4:
        emit(
            DiagnosticCategory.INTEGRATION,
            DiagnosticSeverity.INFO,
            "Multiple domains show internal coherence—experience structure is emerging.",
            coherent_faces,
        )

    logger.debug(f"Generated {len(diagnostics)} diagnostics for project {project.id or '<unnamed>'}")
    return diagnostics


def group_by_category(diagnostics: List[Diagnostic]) -> DiagnosticState:
    """Bucket diagnostics by category, keeping rule order within each bucket."""
    state = DiagnosticState()
    for diagnostic in diagnostics:
        getattr(state, diagnostic.category.value).append(diagnostic)
    return state
