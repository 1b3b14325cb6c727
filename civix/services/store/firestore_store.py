"""
Firestore-backed dispatch store.

Collections:
- technicians: one document per technician (document id == technician id)
- issues: one document per issue (document id == issue id)

assign_issue runs inside a Firestore transaction so the issue update and the
technician counter update commit together or not at all. Firestore retries
the transaction on contention.
"""

from typing import Iterable, List, Optional, Tuple
import logging

from firebase_admin import firestore

from civix.config.firebase import get_db
from civix.core.exceptions import (
    AssignmentConflictError,
    IssueNotFoundError,
    TechnicianNotFoundError,
)
from civix.models.issue import Issue, IssueCategory, IssueStatus
from civix.models.technician import Technician, TechnicianStatus
from civix.services.store.base import DispatchStore, apply_ticket_delta, specialization_matches
from civix.utils.firestore_helpers import snapshot_to_dict, where_filter

logger = logging.getLogger(__name__)

TECHNICIANS_COLLECTION = "technicians"
ISSUES_COLLECTION = "issues"


@firestore.transactional
def _assign_in_transaction(transaction, issue_ref, technician_ref, issue_id: str, technician_id: str):
    # Transactions require every read to happen before the first write.
    issue_data = snapshot_to_dict(issue_ref.get(transaction=transaction))
    if issue_data is None:
        raise IssueNotFoundError(issue_id)
    technician_data = snapshot_to_dict(technician_ref.get(transaction=transaction))
    if technician_data is None:
        raise TechnicianNotFoundError(technician_id)
    if issue_data.get("assigned_technician"):
        raise AssignmentConflictError(issue_id, issue_data["assigned_technician"])

    transaction.update(issue_ref, {
        "assigned_technician": technician_id,
        "status": IssueStatus.IN_PROCESS.value,
    })
    transaction.update(technician_ref, {
        "open_tickets": firestore.Increment(1),
        "issues_assigned": firestore.ArrayUnion([issue_id]),
    })

    issue_data.update({"assigned_technician": technician_id, "status": IssueStatus.IN_PROCESS.value})
    technician_data["open_tickets"] = technician_data.get("open_tickets", 0) + 1
    assigned = list(technician_data.get("issues_assigned", []))
    if issue_id not in assigned:
        assigned.append(issue_id)
    technician_data["issues_assigned"] = assigned
    return issue_data, technician_data


@firestore.transactional
def _increment_in_transaction(transaction, technician_ref, technician_id: str, delta: int):
    # Read and clamped write commit together or the transaction is retried.
    technician_data = snapshot_to_dict(technician_ref.get(transaction=transaction))
    if technician_data is None:
        raise TechnicianNotFoundError(technician_id)

    technician_data["open_tickets"] = apply_ticket_delta(technician_data.get("open_tickets", 0), delta)
    transaction.update(technician_ref, {"open_tickets": technician_data["open_tickets"]})
    return technician_data


class FirestoreDispatchStore(DispatchStore):

    def __init__(self, db=None):
        self.db = db or get_db()

    def _technicians(self):
        return self.db.collection(TECHNICIANS_COLLECTION)

    def _issues(self):
        return self.db.collection(ISSUES_COLLECTION)

    def find_by_specialization_and_status(
        self,
        specialization_keywords: Iterable[str],
        status: TechnicianStatus
    ) -> List[Technician]:
        # Firestore has no substring/regex filter, so status is filtered
        # server-side and specialization in Python.
        keywords = list(specialization_keywords)
        query = where_filter(self._technicians(), "status", "==", status.value)

        technicians = []
        for doc in query.stream():
            data = snapshot_to_dict(doc)
            if data and specialization_matches(data.get("specialization", ""), keywords):
                technicians.append(Technician.model_validate(data))
        return technicians

    def list_technicians(self) -> List[Technician]:
        return [Technician.model_validate(snapshot_to_dict(doc)) for doc in self._technicians().stream()]

    def get_technician(self, technician_id: str) -> Optional[Technician]:
        data = snapshot_to_dict(self._technicians().document(technician_id).get())
        return Technician.model_validate(data) if data else None

    def save_technician(self, technician: Technician) -> Technician:
        payload = technician.model_dump(mode="json", exclude={"id"})
        self._technicians().document(technician.id).set(payload)
        return technician

    def increment_open_tickets(self, technician_id: str, delta: int) -> Technician:
        technician_data = _increment_in_transaction(
            self.db.transaction(),
            self._technicians().document(technician_id),
            technician_id,
            delta,
        )
        return Technician.model_validate(technician_data)

    def append_assigned_issue(self, technician_id: str, issue_id: str) -> None:
        doc_ref = self._technicians().document(technician_id)
        if not doc_ref.get().exists:
            raise TechnicianNotFoundError(technician_id)
        doc_ref.update({"issues_assigned": firestore.ArrayUnion([issue_id])})

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        data = snapshot_to_dict(self._issues().document(issue_id).get())
        return Issue.model_validate(data) if data else None

    def save_issue(self, issue: Issue) -> Issue:
        payload = issue.model_dump(mode="json", exclude={"id"})
        self._issues().document(issue.id).set(payload)
        logger.info(f"Issue saved to Firestore: {issue.id}")
        return issue

    def update_issue_category(self, issue_id: str, category: IssueCategory) -> Issue:
        doc_ref = self._issues().document(issue_id)
        if not doc_ref.get().exists:
            raise IssueNotFoundError(issue_id)
        doc_ref.update({"category": category.value})
        return Issue.model_validate(snapshot_to_dict(doc_ref.get()))

    def assign_issue(self, issue_id: str, technician_id: str) -> Tuple[Issue, Technician]:
        transaction = self.db.transaction()
        issue_data, technician_data = _assign_in_transaction(
            transaction,
            self._issues().document(issue_id),
            self._technicians().document(technician_id),
            issue_id,
            technician_id,
        )
        logger.info(f"Issue {issue_id} assigned to technician {technician_id} (Firestore transaction committed)")
        return Issue.model_validate(issue_data), Technician.model_validate(technician_data)

    def health_check(self) -> dict:
        collections = list(self.db.collections())
        return {
            "backend": "firestore",
            "connected": True,
            "collections_count": len(collections),
        }
