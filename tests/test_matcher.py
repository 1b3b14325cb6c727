from civix.models.assignment import ReasonCode
from civix.models.issue import IssueCategory, Urgency
from civix.models.technician import TechnicianStatus
from civix.services.store import MemoryDispatchStore
from civix.services.technician_matcher import TechnicianMatcher

from conftest import make_technician


def matcher_with(*technicians):
    return TechnicianMatcher(MemoryDispatchStore(technicians))


def test_empty_roster_requires_manual_assignment():
    result = matcher_with().match(IssueCategory.ELECTRICITY, Urgency.HIGH)
    assert result.requires_manual_assignment
    assert result.reason == ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION
    assert result.candidates == []


def test_specialization_match_is_case_insensitive_substring():
    result = matcher_with(
        make_technician("t1", specialization="ELECTRICAL maintenance"),
        make_technician("t2", specialization="Plumbing"),
    ).match(IssueCategory.ELECTRICITY, Urgency.LOW)
    assert [c.id for c in result.candidates] == ["t1"]


def test_only_active_technicians_are_eligible():
    result = matcher_with(
        make_technician("t1", status=TechnicianStatus.ON_LEAVE),
        make_technician("t2", status=TechnicianStatus.INACTIVE),
        make_technician("t3", status=TechnicianStatus.ON_SITE),
    ).match(IssueCategory.ELECTRICITY, Urgency.LOW)
    assert result.requires_manual_assignment
    assert result.reason == ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION


def test_workload_ceiling_depends_on_urgency():
    roster = [make_technician("t1", open_tickets=4)]
    assert matcher_with(*roster).match(IssueCategory.ELECTRICITY, Urgency.HIGH).candidates
    critical = matcher_with(*roster).match(IssueCategory.ELECTRICITY, Urgency.CRITICAL)
    assert critical.max_workload == 3
    assert critical.requires_manual_assignment


def test_ceiling_is_inclusive():
    result = matcher_with(make_technician("t1", open_tickets=3)).match(IssueCategory.ELECTRICITY, Urgency.CRITICAL)
    assert not result.requires_manual_assignment
    assert result.candidates[0].id == "t1"


def test_all_busy_returns_busy_pool():
    result = matcher_with(
        make_technician("t1", open_tickets=9),
        make_technician("t2", open_tickets=6),
    ).match(IssueCategory.ELECTRICITY, Urgency.HIGH)
    assert result.requires_manual_assignment
    assert result.reason == ReasonCode.ALL_TECHNICIANS_BUSY
    assert [c.id for c in result.candidates] == ["t2", "t1"]


def test_busy_technicians_listed_beside_primary_pool():
    result = matcher_with(
        make_technician("t1", open_tickets=1),
        make_technician("t2", open_tickets=7),
    ).match(IssueCategory.ELECTRICITY, Urgency.HIGH)
    assert [c.id for c in result.candidates] == ["t1"]
    assert [c.id for c in result.busy_technicians] == ["t2"]
    assert result.total_available == 1


def test_candidates_sorted_by_score():
    result = matcher_with(
        make_technician("low", rating=2.0, total_resolved=5, open_tickets=2),
        make_technician("high", rating=5.0, total_resolved=30, open_tickets=0),
        make_technician("mid", rating=4.0, total_resolved=10, open_tickets=1),
    ).match(IssueCategory.ELECTRICITY, Urgency.LOW)
    assert [c.id for c in result.candidates] == ["high", "mid", "low"]
    scores = [c.score for c in result.candidates]
    assert scores == sorted(scores, reverse=True)


def test_candidate_limits():
    roster = [make_technician(f"t{i:02d}", open_tickets=0) for i in range(15)]
    result = matcher_with(*roster).match(IssueCategory.ELECTRICITY, Urgency.LOW)
    assert len(result.candidates) == TechnicianMatcher.MAX_CANDIDATES
    assert result.total_available == 15

    busy = [make_technician(f"b{i:02d}", open_tickets=10) for i in range(8)]
    result = matcher_with(*busy).match(IssueCategory.ELECTRICITY, Urgency.CRITICAL)
    assert len(result.candidates) == TechnicianMatcher.MAX_BUSY_CANDIDATES


def test_unmapped_category_requires_manual_assignment():
    result = matcher_with(make_technician("t1")).match(IssueCategory.UNKNOWN, Urgency.LOW)
    assert result.requires_manual_assignment
    assert result.reason == ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION


def test_matching_does_not_mutate_roster():
    store = MemoryDispatchStore([make_technician("t1", open_tickets=2)])
    TechnicianMatcher(store).match(IssueCategory.ELECTRICITY, Urgency.HIGH)
    assert store.get_technician("t1").open_tickets == 2
