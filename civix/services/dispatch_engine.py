"""
Dispatch Engine - classify, match, decide and notify for one issue.

Called by the issue-creation handler after the issue is stored. The
reporter's request never fails because of anything in here: every outcome,
including system errors, comes back as a DispatchResult, and every outcome
that needs a human lands in the admin inbox.
"""

from typing import List, Optional, Tuple
import logging

from civix.core.exceptions import IssueNotFoundError
from civix.models.assignment import (
    ClassificationResult,
    DispatchResult,
    ManualRequired,
    MatchResult,
    ReasonCode,
)
from civix.models.issue import Issue, IssueCategory
from civix.models.notification import Notification
from civix.models.technician import Technician
from civix.services.assignment_decider import AssignmentDecider
from civix.services.classification import CategoryClassifier, get_category_classifier
from civix.services.notification_service import NotificationEmitter
from civix.services.store import DispatchStore, get_dispatch_store
from civix.services.technician_matcher import TechnicianMatcher

logger = logging.getLogger(__name__)


class DispatchEngine:

    def __init__(
        self,
        store: Optional[DispatchStore] = None,
        classifier: Optional[CategoryClassifier] = None,
        matcher: Optional[TechnicianMatcher] = None,
        decider: Optional[AssignmentDecider] = None,
        emitter: Optional[NotificationEmitter] = None
    ):
        self.store = store or get_dispatch_store()
        self.classifier = classifier or get_category_classifier()
        self.matcher = matcher or TechnicianMatcher(self.store)
        self.decider = decider or AssignmentDecider(self.store)
        self.emitter = emitter or NotificationEmitter()

    def dispatch(self, issue: Issue) -> DispatchResult:
        """
        Run the full pipeline for a stored issue.

        Args:
            issue: Issue as just saved by the creation handler

        Returns:
            DispatchResult with classification, outcome and the notifications emitted
        """
        classification = self.classifier.classify(issue.title, issue.description, issue.category)
        issue = self._attach_category(issue, classification)

        if classification.category == IssueCategory.UNKNOWN:
            logger.info(f"Issue {issue.id} could not be classified, skipping technician matching")
            outcome = ManualRequired(reason=ReasonCode.UNCLASSIFIED)
        else:
            outcome = self.decider.resolve(issue, classification, self.matcher)

        notifications: List[Notification] = []
        notification = self.emitter.emit(outcome, issue)
        if notification is not None:
            notifications.append(notification)

        return DispatchResult(
            issue_id=issue.id,
            category=classification.category,
            confidence=classification.confidence,
            method=classification.method,
            outcome=outcome,
            notifications=notifications,
        )

    def _attach_category(self, issue: Issue, classification: ClassificationResult) -> Issue:
        if issue.category == classification.category:
            return issue

        updated = issue.model_copy(update={"category": classification.category})
        try:
            self.store.update_issue_category(issue.id, classification.category)
        except Exception as e:
            # The decision can still proceed on the in-memory copy; the
            # admin sees the category in the notification payload.
            logger.error(f"Failed to persist category for issue {issue.id}: {e}", exc_info=True)
        return updated

    def suggest_technicians(self, issue_id: str) -> Tuple[Issue, MatchResult]:
        """
        Re-run matching for an existing issue (admin 'suggestions' view).

        Raises:
            IssueNotFoundError
        """
        issue = self.store.get_issue(issue_id)
        if issue is None:
            raise IssueNotFoundError(issue_id)
        return issue, self.matcher.match(issue.category, issue.urgency, issue.location)

    def assign_manually(self, issue_id: str, technician_id: str) -> Tuple[Issue, Technician]:
        """
        Admin approval or override: assign through the same atomic path.

        Raises:
            IssueNotFoundError, TechnicianNotFoundError, AssignmentConflictError
        """
        issue, technician = self.store.assign_issue(issue_id, technician_id)
        logger.info(f"✅ Issue {issue_id} manually assigned to technician {technician_id}")
        return issue, technician


# Global engine instance (singleton pattern)
_engine: Optional[DispatchEngine] = None


def get_dispatch_engine() -> DispatchEngine:
    """
    Get or create DispatchEngine singleton instance.

    Returns:
        DispatchEngine: The global dispatch engine
    """
    global _engine
    if _engine is None:
        _engine = DispatchEngine()
    return _engine


def set_dispatch_engine(engine: Optional[DispatchEngine]) -> None:
    global _engine
    _engine = engine
