"""
Assignment Decider - one decision per issue.

DESIGN PRINCIPLES (CRITICAL):
- Automation acts ONLY on unambiguous, locally verifiable signals
- External-model classifications ALWAYS need human approval, whatever
  their confidence
- Auto-assignment needs confidence >= AUTO_ASSIGN_CONFIDENCE_THRESHOLD (0.9)
- The Assigned path is the only one that mutates, and it mutates atomically
- Any failure becomes ManualRequired(system_error); callers always get a
  usable outcome

TRANSITIONS:
1. Matcher requires manual assignment  -> ManualRequired(reason)
2. method == external-model            -> PendingApproval(top, top 5)
3. confidence >= 0.9 and a candidate   -> Assigned(top)
4. otherwise                           -> PendingApproval(top, top 5)
"""

from civix.core.settings import settings
from civix.models.assignment import (
    AssignmentOutcome,
    Assigned,
    ClassificationMethod,
    ClassificationResult,
    ManualRequired,
    MatchResult,
    PendingApproval,
    ReasonCode,
)
from civix.models.issue import Issue
from civix.services.store import DispatchStore, get_dispatch_store
from civix.services.technician_matcher import TechnicianMatcher
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class AssignmentDecider:

    MAX_ALTERNATIVES = 5

    def __init__(
        self,
        store: Optional[DispatchStore] = None,
        confidence_threshold: Optional[float] = None
    ):
        self.store = store or get_dispatch_store()
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None
            else settings.AUTO_ASSIGN_CONFIDENCE_THRESHOLD
        )

    def decide(
        self,
        issue: Issue,
        classification: ClassificationResult,
        match: MatchResult
    ) -> AssignmentOutcome:
        """
        Pure transition function. No I/O.

        An Assigned result here is a proposal carrying the pre-assignment
        records; resolve() applies it.
        """
        if match.requires_manual_assignment:
            return ManualRequired(
                reason=match.reason or ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION,
                candidates=match.candidates,
            )

        if not match.candidates:
            return ManualRequired(reason=ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION)

        top = match.candidates[0]
        alternatives = match.candidates[:self.MAX_ALTERNATIVES]

        if classification.method == ClassificationMethod.EXTERNAL_MODEL:
            return PendingApproval(suggested=top, alternatives=alternatives)

        if classification.confidence >= self.confidence_threshold:
            return Assigned(technician=top.technician, issue=issue)

        return PendingApproval(suggested=top, alternatives=alternatives)

    def resolve(
        self,
        issue: Issue,
        classification: ClassificationResult,
        matcher: TechnicianMatcher
    ) -> AssignmentOutcome:
        """
        Match, decide and, for Assigned, perform the atomic assignment.

        Never raises. Roster read failures and persistence failures both
        come back as ManualRequired(system_error); a failed assignment
        leaves neither the issue nor the technician modified.
        """
        try:
            match = matcher.match(classification.category, issue.urgency, issue.location)
            outcome = self.decide(issue, classification, match)

            if isinstance(outcome, Assigned):
                assigned_issue, technician = self.store.assign_issue(issue.id, outcome.technician.id)
                outcome = Assigned(technician=technician, issue=assigned_issue)

            logger.info(
                f"Decision for issue {issue.id}: {outcome.kind} "
                f"(category={classification.category.value}, method={classification.method.value}, "
                f"confidence={classification.confidence})"
            )
            return outcome

        except Exception as e:
            logger.error(f"Assignment failed for issue {issue.id}: {e}", exc_info=True)
            return ManualRequired(reason=ReasonCode.SYSTEM_ERROR, detail=str(e))
