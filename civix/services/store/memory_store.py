"""
In-memory dispatch store.

Used for local development (USE_MOCK_DB=true) and tests. A single lock
serializes every write, so assign_issue is atomic with respect to other
threads dispatching concurrently.
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging
import threading

from civix.core.exceptions import (
    AssignmentConflictError,
    IssueNotFoundError,
    TechnicianNotFoundError,
)
from civix.models.issue import Issue, IssueCategory, IssueStatus
from civix.models.technician import Technician, TechnicianStatus
from civix.services.store.base import DispatchStore, apply_ticket_delta, specialization_matches

logger = logging.getLogger(__name__)


class MemoryDispatchStore(DispatchStore):
    """Dict-backed store. Returns copies so callers cannot mutate stored state."""

    def __init__(self, technicians: Optional[Iterable[Technician]] = None):
        self._technicians: Dict[str, Technician] = {}
        self._issues: Dict[str, Issue] = {}
        self._lock = threading.RLock()
        for technician in technicians or []:
            self.save_technician(technician)

    def find_by_specialization_and_status(
        self,
        specialization_keywords: Iterable[str],
        status: TechnicianStatus
    ) -> List[Technician]:
        keywords = list(specialization_keywords)
        with self._lock:
            return [
                tech.model_copy(deep=True)
                for tech in self._technicians.values()
                if tech.status == status and specialization_matches(tech.specialization, keywords)
            ]

    def list_technicians(self) -> List[Technician]:
        with self._lock:
            return [tech.model_copy(deep=True) for tech in self._technicians.values()]

    def get_technician(self, technician_id: str) -> Optional[Technician]:
        with self._lock:
            tech = self._technicians.get(technician_id)
            return tech.model_copy(deep=True) if tech else None

    def save_technician(self, technician: Technician) -> Technician:
        with self._lock:
            self._technicians[technician.id] = technician.model_copy(deep=True)
        return technician

    def increment_open_tickets(self, technician_id: str, delta: int) -> Technician:
        with self._lock:
            tech = self._technicians.get(technician_id)
            if tech is None:
                raise TechnicianNotFoundError(technician_id)
            tech.open_tickets = apply_ticket_delta(tech.open_tickets, delta)
            return tech.model_copy(deep=True)

    def append_assigned_issue(self, technician_id: str, issue_id: str) -> None:
        with self._lock:
            tech = self._technicians.get(technician_id)
            if tech is None:
                raise TechnicianNotFoundError(technician_id)
            if issue_id not in tech.issues_assigned:
                tech.issues_assigned.append(issue_id)

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        with self._lock:
            issue = self._issues.get(issue_id)
            return issue.model_copy(deep=True) if issue else None

    def save_issue(self, issue: Issue) -> Issue:
        with self._lock:
            self._issues[issue.id] = issue.model_copy(deep=True)
        return issue

    def update_issue_category(self, issue_id: str, category: IssueCategory) -> Issue:
        with self._lock:
            issue = self._issues.get(issue_id)
            if issue is None:
                raise IssueNotFoundError(issue_id)
            issue.category = category
            return issue.model_copy(deep=True)

    def assign_issue(self, issue_id: str, technician_id: str) -> Tuple[Issue, Technician]:
        with self._lock:
            issue = self._issues.get(issue_id)
            if issue is None:
                raise IssueNotFoundError(issue_id)
            tech = self._technicians.get(technician_id)
            if tech is None:
                raise TechnicianNotFoundError(technician_id)
            if issue.assigned_technician:
                raise AssignmentConflictError(issue_id, issue.assigned_technician)

            # All checks passed; nothing below can fail halfway.
            issue.assigned_technician = technician_id
            issue.status = IssueStatus.IN_PROCESS
            tech.open_tickets += 1
            if issue_id not in tech.issues_assigned:
                tech.issues_assigned.append(issue_id)

            logger.info(f"Issue {issue_id} assigned to technician {technician_id} (open tickets: {tech.open_tickets})")
            return issue.model_copy(deep=True), tech.model_copy(deep=True)

    def clear(self) -> None:
        with self._lock:
            self._technicians.clear()
            self._issues.clear()
