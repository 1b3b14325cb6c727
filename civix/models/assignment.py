"""
Models produced while dispatching one issue: classification, matching,
and the assignment outcome.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union
from enum import Enum

from civix.models.issue import Issue, IssueCategory
from civix.models.technician import ScoredTechnician, Technician
from civix.models.notification import Notification


class ClassificationMethod(str, Enum):
    DIRECT = "direct"
    KEYWORD_FALLBACK = "keyword-fallback"
    EXTERNAL_MODEL = "external-model"


class ClassificationResult(BaseModel):
    category: IssueCategory
    confidence: float = Field(..., ge=0.0, le=1.0)
    method: ClassificationMethod


class ReasonCode(str, Enum):
    """Why an issue could not be assigned automatically."""
    NO_TECHNICIANS_OF_SPECIALIZATION = "no_technicians_of_specialization"
    ALL_TECHNICIANS_BUSY = "all_technicians_busy"
    SYSTEM_ERROR = "system_error"
    UNCLASSIFIED = "unclassified"


class MatchResult(BaseModel):
    """
    Matcher output.

    When requires_manual_assignment is set, candidates holds the busy pool
    (possibly empty) and reason says why the primary pool was empty.
    """
    category: IssueCategory
    candidates: List[ScoredTechnician] = Field(default_factory=list)
    busy_technicians: List[ScoredTechnician] = Field(default_factory=list)
    requires_manual_assignment: bool = False
    reason: Optional[ReasonCode] = None
    max_workload: int
    total_available: int = 0


class Assigned(BaseModel):
    kind: Literal["assigned"] = "assigned"
    technician: Technician
    issue: Issue


class PendingApproval(BaseModel):
    kind: Literal["pending_approval"] = "pending_approval"
    suggested: ScoredTechnician
    alternatives: List[ScoredTechnician] = Field(default_factory=list)


class ManualRequired(BaseModel):
    kind: Literal["manual_required"] = "manual_required"
    reason: ReasonCode
    candidates: List[ScoredTechnician] = Field(default_factory=list)
    detail: Optional[str] = None


AssignmentOutcome = Union[Assigned, PendingApproval, ManualRequired]


class DispatchResult(BaseModel):
    """What the issue-creation handler gets back from the engine."""
    issue_id: str
    category: IssueCategory
    confidence: float
    method: ClassificationMethod
    outcome: AssignmentOutcome = Field(..., discriminator="kind")
    notifications: List[Notification] = Field(default_factory=list)
