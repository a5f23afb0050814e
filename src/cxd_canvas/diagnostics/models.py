"""Diagnostic data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class DiagnosticCategory(str, Enum):
    BALANCE = "balance"
    COVERAGE = "coverage"
    COHERENCE = "coherence"
    RISK = "risk"
    OPPORTUNITY = "opportunity"
    INTEGRATION = "integration"


class DiagnosticSeverity(str, Enum):
    INFO = "info"
    CAUTION = "caution"
    CONCERN = "concern"


@dataclass
class FaceIntensity:
    """How developed one design face is."""

    completion: float  # 0-1
    coherence: float  # 0-1
    element_count: int  # canvas elements tagged with the face
    state: str  # undeveloped | emerging | active | coherent


@dataclass
class Diagnostic:
    id: str
    category: DiagnosticCategory
    severity: DiagnosticSeverity
    message: str
    related_faces: List[str]  # face keys, e.g. "stateMapping"
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "relatedFaces": list(self.related_faces),
            "timestamp": self.timestamp,
        }


@dataclass
class DiagnosticState:
    """Diagnostics bucketed by category, as the diagnostic panel shows them."""

    balance: List[Diagnostic] = field(default_factory=list)
    coverage: List[Diagnostic] = field(default_factory=list)
    coherence: List[Diagnostic] = field(default_factory=list)
    risk: List[Diagnostic] = field(default_factory=list)
    opportunity: List[Diagnostic] = field(default_factory=list)
    integration: List[Diagnostic] = field(default_factory=list)
