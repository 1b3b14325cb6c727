"""
Notification Service - admin inbox for assignment decisions that need a human.

DESIGN PRINCIPLES:
- Notifications are ADVISORY: they drive the admin action queue, nothing else
- One notification per dispatch decision, never duplicates
- The inbox is owned by a single service instance; all access goes through it
- Bounded: beyond capacity the oldest entries are evicted
- Retention: entries older than the retention window are swept on request
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import logging
import threading

from civix.core.settings import settings
from civix.models.assignment import (
    AssignmentOutcome,
    Assigned,
    ManualRequired,
    PendingApproval,
    ReasonCode,
)
from civix.models.issue import Issue, Urgency
from civix.models.notification import (
    Notification,
    NotificationFilter,
    NotificationPriority,
    NotificationType,
)
from civix.utils.ids import new_notification_id

logger = logging.getLogger(__name__)


class NotificationInbox:
    """
    Capped, newest-first notification store.

    Thread-safe: concurrent dispatches append under the inbox lock, so
    append order is consistent with list order.
    """

    def __init__(self, capacity: Optional[int] = None, retention_days: Optional[int] = None):
        self.capacity = capacity if capacity is not None else settings.NOTIFICATION_CAPACITY
        self.retention_days = (
            retention_days if retention_days is not None
            else settings.NOTIFICATION_RETENTION_DAYS
        )
        self._notifications: List[Notification] = []
        self._lock = threading.Lock()

    def append(self, notification: Notification) -> Notification:
        with self._lock:
            self._notifications.insert(0, notification)
            evicted = len(self._notifications) - self.capacity
            if evicted > 0:
                del self._notifications[self.capacity:]
                logger.debug(f"Inbox at capacity {self.capacity}, evicted {evicted} oldest notification(s)")
        return notification

    def list(self, filters: Optional[NotificationFilter] = None) -> List[Notification]:
        filters = filters or NotificationFilter()
        with self._lock:
            return [n.model_copy() for n in self._notifications if filters.matches(n)]

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            for notification in self._notifications:
                if notification.id == notification_id:
                    return notification.model_copy()
        return None

    def mark_read(self, notification_id: str) -> Optional[Notification]:
        """Returns the updated notification, or None if not found."""
        with self._lock:
            for notification in self._notifications:
                if notification.id == notification_id:
                    notification.read = True
                    notification.updated_at = datetime.now(timezone.utc)
                    return notification.model_copy()
        return None

    def mark_all_read(self) -> int:
        """Returns how many notifications changed from unread to read."""
        now = datetime.now(timezone.utc)
        changed = 0
        with self._lock:
            for notification in self._notifications:
                if not notification.read:
                    notification.read = True
                    notification.updated_at = now
                    changed += 1
        return changed

    def remove(self, notification_id: str) -> bool:
        with self._lock:
            for index, notification in enumerate(self._notifications):
                if notification.id == notification_id:
                    del self._notifications[index]
                    return True
        return False

    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._notifications if not n.read)

    def actionable_count(self) -> int:
        """Actionable notifications nobody has read yet."""
        with self._lock:
            return sum(1 for n in self._notifications if n.actionable and not n.read)

    def clear_old(self, now: Optional[datetime] = None) -> int:
        """
        Retention sweep: drop notifications older than retention_days.

        Returns:
            Number of notifications removed
        """
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=self.retention_days)
        with self._lock:
            before = len(self._notifications)
            self._notifications = [n for n in self._notifications if n.created_at > cutoff]
            removed = before - len(self._notifications)
        if removed:
            logger.info(f"Retention sweep removed {removed} notification(s) older than {self.retention_days} days")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._notifications)


# Admin actions offered with each notification type
NOTIFICATION_ACTIONS: Dict[NotificationType, List[str]] = {
    NotificationType.ISSUE_UNCLASSIFIED: ["classify_manually", "assign_manually"],
    NotificationType.LLM_ASSIGNMENT_PENDING: ["approve_assignment", "override_assignment", "manual_assignment"],
    NotificationType.NO_TECHNICIANS_AVAILABLE: ["assign_from_other_specialization", "create_technician", "escalate_issue"],
    NotificationType.MANUAL_ASSIGNMENT_REQUIRED: ["assign_manually", "escalate_issue"],
    NotificationType.ASSIGNMENT_OVERRIDE_NEEDED: ["override_assignment"],
}

DEFAULT_PRIORITY: Dict[NotificationType, NotificationPriority] = {
    NotificationType.ISSUE_UNCLASSIFIED: NotificationPriority.HIGH,
    NotificationType.LLM_ASSIGNMENT_PENDING: NotificationPriority.MEDIUM,
    NotificationType.NO_TECHNICIANS_AVAILABLE: NotificationPriority.HIGH,
    NotificationType.MANUAL_ASSIGNMENT_REQUIRED: NotificationPriority.HIGH,
    NotificationType.ASSIGNMENT_OVERRIDE_NEEDED: NotificationPriority.LOW,
}

REASON_NOTIFICATION_TYPE: Dict[ReasonCode, NotificationType] = {
    ReasonCode.UNCLASSIFIED: NotificationType.ISSUE_UNCLASSIFIED,
    ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION: NotificationType.NO_TECHNICIANS_AVAILABLE,
    ReasonCode.ALL_TECHNICIANS_BUSY: NotificationType.MANUAL_ASSIGNMENT_REQUIRED,
    ReasonCode.SYSTEM_ERROR: NotificationType.MANUAL_ASSIGNMENT_REQUIRED,
}

REASON_TEXT: Dict[ReasonCode, str] = {
    ReasonCode.UNCLASSIFIED: "issue could not be classified",
    ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION: "no technicians of this specialization",
    ReasonCode.ALL_TECHNICIANS_BUSY: "all matching technicians are over their workload limit",
    ReasonCode.SYSTEM_ERROR: "automatic assignment failed with a system error",
}


def derive_priority(notification_type: NotificationType, urgency: Urgency) -> NotificationPriority:
    """Critical issues always raise critical notifications; otherwise the type default."""
    if urgency == Urgency.CRITICAL:
        return NotificationPriority.CRITICAL
    return DEFAULT_PRIORITY[notification_type]


class NotificationEmitter:
    """
    Turns assignment outcomes into inbox notifications.

    ManualRequired and PendingApproval always produce exactly one
    notification. Assigned produces an audit record only when
    notify_on_assignment is set.
    """

    def __init__(self, inbox: Optional[NotificationInbox] = None, notify_on_assignment: Optional[bool] = None):
        self.inbox = inbox if inbox is not None else get_notification_inbox()
        self.notify_on_assignment = (
            notify_on_assignment if notify_on_assignment is not None
            else settings.NOTIFY_ON_AUTO_ASSIGNMENT
        )

    def emit(self, outcome: AssignmentOutcome, issue: Issue) -> Optional[Notification]:
        if isinstance(outcome, ManualRequired):
            notification = self._manual_required(outcome, issue)
        elif isinstance(outcome, PendingApproval):
            notification = self._pending_approval(outcome, issue)
        elif isinstance(outcome, Assigned):
            if not self.notify_on_assignment:
                return None
            notification = self._assigned(outcome, issue)
        else:
            raise TypeError(f"Unknown assignment outcome: {type(outcome).__name__}")

        self.inbox.append(notification)
        logger.info(
            f"Admin notification created: {notification.type.value} "
            f"[{notification.priority.value}] for issue {issue.id}"
        )
        return notification

    def _base_data(self, issue: Issue, notification_type: NotificationType) -> Dict:
        return {
            "issueId": issue.id,
            "issueTitle": issue.title,
            "issueCategory": issue.category.value,
            "urgency": issue.urgency.value,
            "location": issue.location.model_dump() if issue.location else None,
            "actions": list(NOTIFICATION_ACTIONS[notification_type]),
        }

    def _build(
        self,
        notification_type: NotificationType,
        issue: Issue,
        title: str,
        message: str,
        data: Dict,
        actionable: bool = True
    ) -> Notification:
        return Notification(
            id=new_notification_id(),
            type=notification_type,
            title=title,
            message=message,
            data=data,
            priority=derive_priority(notification_type, issue.urgency),
            actionable=actionable,
        )

    def _manual_required(self, outcome: ManualRequired, issue: Issue) -> Notification:
        notification_type = REASON_NOTIFICATION_TYPE[outcome.reason]
        data = self._base_data(issue, notification_type)
        data["reason"] = outcome.reason.value
        data["availableTechnicians"] = [c.summary() for c in outcome.candidates]
        if outcome.detail:
            data["detail"] = outcome.detail

        if notification_type == NotificationType.ISSUE_UNCLASSIFIED:
            data["description"] = issue.description
            return self._build(
                notification_type, issue,
                "Issue Classification Failed",
                f'Issue "{issue.title}" could not be automatically classified and requires manual assignment.',
                data,
            )

        if notification_type == NotificationType.NO_TECHNICIANS_AVAILABLE:
            data["specialization"] = issue.category.value
            return self._build(
                notification_type, issue,
                "No Available Technicians",
                f'No {issue.category.value} technicians are available for "{issue.title}". Manual assignment required.',
                data,
            )

        return self._build(
            notification_type, issue,
            "Manual Assignment Required",
            f'"{issue.title}" requires manual assignment. Reason: {REASON_TEXT[outcome.reason]}',
            data,
        )

    def _pending_approval(self, outcome: PendingApproval, issue: Issue) -> Notification:
        notification_type = NotificationType.LLM_ASSIGNMENT_PENDING
        suggested = outcome.suggested
        data = self._base_data(issue, notification_type)
        data["suggestedTechnician"] = suggested.summary()
        data["allSuggestions"] = [c.summary() for c in outcome.alternatives]
        name = suggested.technician.name or suggested.technician.id
        return self._build(
            notification_type, issue,
            "Assignment Suggestion",
            f'Suggested assignment of "{issue.title}" to {name}. Please review and approve.',
            data,
        )

    def _assigned(self, outcome: Assigned, issue: Issue) -> Notification:
        notification_type = NotificationType.ASSIGNMENT_OVERRIDE_NEEDED
        data = self._base_data(issue, notification_type)
        data["assignedTechnician"] = {
            "id": outcome.technician.id,
            "name": outcome.technician.name,
            "open_tickets": outcome.technician.open_tickets,
        }
        name = outcome.technician.name or outcome.technician.id
        return self._build(
            notification_type, issue,
            "Issue Auto-Assigned",
            f'"{issue.title}" was automatically assigned to {name}. Override if needed.',
            data,
            actionable=False,
        )


# Global inbox instance (singleton pattern)
_inbox: Optional[NotificationInbox] = None


def get_notification_inbox() -> NotificationInbox:
    """
    Get or create NotificationInbox singleton instance.

    Returns:
        NotificationInbox: The global admin inbox
    """
    global _inbox
    if _inbox is None:
        _inbox = NotificationInbox()
    return _inbox


def set_notification_inbox(inbox: Optional[NotificationInbox]) -> None:
    """Replace the singleton (tests)."""
    global _inbox
    _inbox = inbox
