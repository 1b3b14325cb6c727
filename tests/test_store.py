import pytest

from civix.core.exceptions import IssueNotFoundError, TechnicianNotFoundError
from civix.models.issue import IssueCategory
from civix.models.technician import TechnicianStatus
from civix.services.store import MemoryDispatchStore
from civix.services.store.base import apply_ticket_delta, specialization_matches

from conftest import make_issue, make_technician


def test_apply_ticket_delta_never_below_zero():
    assert apply_ticket_delta(3, 1) == 4
    assert apply_ticket_delta(3, -1) == 2
    assert apply_ticket_delta(1, -5) == 0
    assert apply_ticket_delta(None, 2) == 2


def test_specialization_matches():
    assert specialization_matches("Street LIGHTING crew", ["lighting"])
    assert not specialization_matches("", ["water"])


def test_increment_open_tickets():
    store = MemoryDispatchStore([make_technician("t1", open_tickets=2)])
    assert store.increment_open_tickets("t1", 1).open_tickets == 3
    assert store.increment_open_tickets("t1", -1).open_tickets == 2
    assert store.get_technician("t1").open_tickets == 2


def test_increment_open_tickets_clamps_at_zero():
    store = MemoryDispatchStore([make_technician("t1", open_tickets=1)])
    assert store.increment_open_tickets("t1", -3).open_tickets == 0
    assert store.get_technician("t1").open_tickets == 0


def test_append_assigned_issue_has_no_duplicates():
    store = MemoryDispatchStore([make_technician("t1")])
    store.append_assigned_issue("t1", "issue-1")
    store.append_assigned_issue("t1", "issue-1")
    store.append_assigned_issue("t1", "issue-2")
    assert store.get_technician("t1").issues_assigned == ["issue-1", "issue-2"]


def test_unknown_technician_raises():
    store = MemoryDispatchStore()
    store.save_issue(make_issue("issue-1"))
    with pytest.raises(TechnicianNotFoundError):
        store.increment_open_tickets("nobody", 1)
    with pytest.raises(TechnicianNotFoundError):
        store.append_assigned_issue("nobody", "issue-1")
    with pytest.raises(TechnicianNotFoundError):
        store.assign_issue("issue-1", "nobody")
    assert store.get_issue("issue-1").assigned_technician is None


def test_update_issue_category():
    store = MemoryDispatchStore()
    store.save_issue(make_issue("issue-1"))
    assert store.update_issue_category("issue-1", IssueCategory.WATER).category == IssueCategory.WATER
    with pytest.raises(IssueNotFoundError):
        store.update_issue_category("missing", IssueCategory.WATER)


def test_returned_records_are_copies():
    store = MemoryDispatchStore([make_technician("t1")])
    copy = store.get_technician("t1")
    copy.open_tickets = 99
    copy.status = TechnicianStatus.INACTIVE
    stored = store.get_technician("t1")
    assert stored.open_tickets == 1
    assert stored.status == TechnicianStatus.ACTIVE
