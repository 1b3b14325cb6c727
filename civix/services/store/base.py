"""
Dispatch Store Interface.

Defines the contract for the document store the engine reads technicians
from and writes assignments to. The engine never touches Firestore (or any
other backend) directly; it only talks to this interface.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from civix.models.issue import Issue, IssueCategory
from civix.models.technician import Technician, TechnicianStatus


def specialization_matches(specialization: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive: does any keyword occur in the specialization text?"""
    text = (specialization or "").lower()
    return any(keyword.lower() in text for keyword in keywords)


def apply_ticket_delta(open_tickets: int, delta: int) -> int:
    """Open-ticket count after a delta, never below zero."""
    return max(0, (open_tickets or 0) + delta)


class DispatchStore(ABC):
    """
    Read/write surface over issues and the technician roster.

    assign_issue is the only write that spans both collections and must be
    atomic: either the issue carries the technician AND the technician's
    counter and list reflect the issue, or nothing changed.
    """

    @abstractmethod
    def find_by_specialization_and_status(
        self,
        specialization_keywords: Iterable[str],
        status: TechnicianStatus
    ) -> List[Technician]:
        """
        Technicians in the given status whose specialization matches any keyword.
        """

    @abstractmethod
    def list_technicians(self) -> List[Technician]:
        pass

    @abstractmethod
    def get_technician(self, technician_id: str) -> Optional[Technician]:
        pass

    @abstractmethod
    def save_technician(self, technician: Technician) -> Technician:
        pass

    @abstractmethod
    def increment_open_tickets(self, technician_id: str, delta: int) -> Technician:
        """
        Adjust a technician's open-ticket count (never below zero).

        Raises:
            TechnicianNotFoundError
        """

    @abstractmethod
    def append_assigned_issue(self, technician_id: str, issue_id: str) -> None:
        """
        Add an issue id to the technician's assigned list (no duplicates).

        Raises:
            TechnicianNotFoundError
        """

    @abstractmethod
    def get_issue(self, issue_id: str) -> Optional[Issue]:
        pass

    @abstractmethod
    def save_issue(self, issue: Issue) -> Issue:
        pass

    @abstractmethod
    def update_issue_category(self, issue_id: str, category: IssueCategory) -> Issue:
        """
        Raises:
            IssueNotFoundError
        """

    @abstractmethod
    def assign_issue(self, issue_id: str, technician_id: str) -> Tuple[Issue, Technician]:
        """
        Atomically link an issue to a technician.

        Sets the issue's assigned_technician and status, increments the
        technician's open tickets and appends the issue id.

        Raises:
            IssueNotFoundError, TechnicianNotFoundError, AssignmentConflictError
        """

    def health_check(self) -> dict:
        """Lightweight connectivity probe for /health/db."""
        return {"backend": type(self).__name__, "connected": True}
