from concurrent.futures import ThreadPoolExecutor

import pytest

from civix.core.exceptions import IssueNotFoundError
from civix.models.assignment import ClassificationMethod, ReasonCode
from civix.models.issue import IssueCategory, IssueStatus, Urgency
from civix.models.notification import NotificationPriority, NotificationType
from civix.services.assignment_decider import AssignmentDecider
from civix.services.classification import CategoryClassifier
from civix.services.dispatch_engine import DispatchEngine
from civix.services.store import MemoryDispatchStore
from civix.services.technician_matcher import TechnicianMatcher

from conftest import StubProvider, make_issue, make_technician


def test_street_light_with_no_electricians(engine, store, inbox):
    issue = store.save_issue(make_issue())
    result = engine.dispatch(issue)

    assert result.category == IssueCategory.ELECTRICITY
    assert result.method == ClassificationMethod.KEYWORD_FALLBACK
    assert result.outcome.kind == "manual_required"
    assert result.outcome.reason == ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION

    assert len(result.notifications) == 1
    notification = result.notifications[0]
    assert notification.type == NotificationType.NO_TECHNICIANS_AVAILABLE
    assert notification.priority == NotificationPriority.HIGH
    assert inbox.list()[0].id == notification.id


def test_street_light_with_one_electrician_needs_approval(engine, store, inbox):
    store.save_technician(make_technician("t1", rating=4.5, total_resolved=30, open_tickets=1))
    issue = store.save_issue(make_issue())
    result = engine.dispatch(issue)

    assert result.confidence == 0.5
    assert result.outcome.kind == "pending_approval"
    assert result.outcome.suggested.id == "t1"
    assert result.notifications[0].type == NotificationType.LLM_ASSIGNMENT_PENDING
    assert store.get_issue(issue.id).assigned_technician is None
    assert store.get_technician("t1").open_tickets == 1


def test_classified_category_is_persisted(engine, store):
    issue = store.save_issue(make_issue())
    engine.dispatch(issue)
    assert store.get_issue(issue.id).category == IssueCategory.ELECTRICITY


def test_direct_category_auto_assigns(engine, store, inbox):
    store.save_technician(make_technician("t1"))
    issue = store.save_issue(make_issue(category=IssueCategory.ELECTRICITY))
    result = engine.dispatch(issue)

    assert result.method == ClassificationMethod.DIRECT
    assert result.outcome.kind == "assigned"
    assert result.notifications == []
    assert len(inbox) == 0

    stored = store.get_issue(issue.id)
    assert stored.assigned_technician == "t1"
    assert stored.status == IssueStatus.IN_PROCESS


def test_unclassifiable_issue_goes_to_admin(engine, store):
    store.save_technician(make_technician("t1"))
    issue = store.save_issue(make_issue(title="Noisy neighbours", description="loud music every night"))
    result = engine.dispatch(issue)

    assert result.category == IssueCategory.UNKNOWN
    assert result.outcome.kind == "manual_required"
    assert result.outcome.reason == ReasonCode.UNCLASSIFIED
    assert result.notifications[0].type == NotificationType.ISSUE_UNCLASSIFIED
    assert store.get_issue(issue.id).category == IssueCategory.UNKNOWN


def test_external_classification_needs_approval(store, emitter):
    store.save_technician(make_technician("w1", specialization="Water supply"))
    engine = DispatchEngine(
        store=store,
        classifier=CategoryClassifier(external_provider=StubProvider(category="water"), external_confidence=0.95),
        matcher=TechnicianMatcher(store),
        decider=AssignmentDecider(store, confidence_threshold=0.9),
        emitter=emitter,
    )
    issue = store.save_issue(make_issue(title="Tap dry", description="no supply since morning"))
    result = engine.dispatch(issue)

    assert result.method == ClassificationMethod.EXTERNAL_MODEL
    assert result.outcome.kind == "pending_approval"
    assert store.get_issue(issue.id).assigned_technician is None


def test_one_notification_per_dispatch(engine, store, inbox):
    store.save_technician(make_technician("t1", open_tickets=9))
    for i in range(3):
        issue = store.save_issue(make_issue(f"issue-{i}", urgency=Urgency.CRITICAL))
        engine.dispatch(issue)
    assert len(inbox) == 3
    assert all(n.type == NotificationType.MANUAL_ASSIGNMENT_REQUIRED for n in inbox.list())
    assert all(n.priority == NotificationPriority.CRITICAL for n in inbox.list())


def test_suggest_technicians(engine, store):
    store.save_technician(make_technician("t1"))
    issue = store.save_issue(make_issue(category=IssueCategory.ELECTRICITY))
    found, match = engine.suggest_technicians(issue.id)
    assert found.id == issue.id
    assert [c.id for c in match.candidates] == ["t1"]

    with pytest.raises(IssueNotFoundError):
        engine.suggest_technicians("missing")


def test_assign_manually(engine, store):
    store.save_technician(make_technician("t1"))
    issue = store.save_issue(make_issue())
    assigned, technician = engine.assign_manually(issue.id, "t1")
    assert assigned.assigned_technician == "t1"
    assert technician.open_tickets == 2


class BrokenRosterStore(MemoryDispatchStore):
    def find_by_specialization_and_status(self, specialization_keywords, status):
        raise RuntimeError("roster unavailable")


def test_roster_failure_is_system_error_with_one_notification(classifier, emitter, inbox):
    store = BrokenRosterStore([make_technician("t1")])
    engine = DispatchEngine(
        store=store,
        classifier=classifier,
        matcher=TechnicianMatcher(store),
        decider=AssignmentDecider(store, confidence_threshold=0.9),
        emitter=emitter,
    )
    issue = store.save_issue(make_issue(category=IssueCategory.ELECTRICITY))
    result = engine.dispatch(issue)

    assert result.outcome.kind == "manual_required"
    assert result.outcome.reason == ReasonCode.SYSTEM_ERROR
    assert "roster unavailable" in result.outcome.detail
    assert [n.type for n in result.notifications] == [NotificationType.MANUAL_ASSIGNMENT_REQUIRED]
    assert len(inbox) == 1
    assert store.get_issue(issue.id).assigned_technician is None
    assert store.get_technician("t1").open_tickets == 1


def test_concurrent_dispatches_keep_roster_consistent(engine, store, inbox):
    store.save_technician(make_technician("t1", open_tickets=0))
    issues = [
        store.save_issue(make_issue(f"issue-{i}", category=IssueCategory.ELECTRICITY, urgency=Urgency.LOW))
        for i in range(40)
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(engine.dispatch, issues))

    technician = store.get_technician("t1")
    assigned_issues = [i.id for i in issues if store.get_issue(i.id).assigned_technician == "t1"]
    assigned_results = [r.issue_id for r in results if r.outcome.kind == "assigned"]

    assert technician.open_tickets == len(technician.issues_assigned)
    assert sorted(technician.issues_assigned) == sorted(assigned_issues)
    assert sorted(assigned_results) == sorted(assigned_issues)
    assert len(assigned_issues) + len(inbox) == 40
