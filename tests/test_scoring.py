from civix.services.technician_scoring import (
    calculate_score,
    calculate_workload_score,
    rank_technicians,
)

from conftest import make_technician


def test_score_formula():
    # 4.5*20 + min(30*2, 50) - 1/10*100
    assert calculate_score(4.5, 30, 1) == 130.0


def test_experience_is_capped():
    assert calculate_score(0, 25, 0) == 50
    assert calculate_score(0, 500, 0) == 50


def test_score_never_negative():
    assert calculate_score(0, 0, 40) == 0.0


def test_score_monotonic_in_each_input():
    for rating in [0, 1, 2.5, 4, 5]:
        assert calculate_score(rating + 0.5 if rating < 5 else 5, 10, 3) >= calculate_score(rating, 10, 3)
    for resolved in range(0, 40, 5):
        assert calculate_score(4, resolved + 1, 3) >= calculate_score(4, resolved, 3)
    for open_tickets in range(0, 15):
        assert calculate_score(4, 10, open_tickets + 1) <= calculate_score(4, 10, open_tickets)


def test_workload_score():
    assert calculate_workload_score(0) == 0
    assert calculate_workload_score(5) == 50


def test_ranking_is_deterministic_on_ties():
    a = make_technician("b-tech", rating=4.0, total_resolved=10, open_tickets=2)
    b = make_technician("a-tech", rating=4.0, total_resolved=10, open_tickets=2)
    ranked = rank_technicians([a, b])
    assert [c.id for c in ranked] == ["a-tech", "b-tech"]


def test_ranking_prefers_fewer_open_tickets_on_equal_score():
    # 4.0*20 + 20 - 20 == 3.5*20 + 20 - 10
    busy = make_technician("busy", rating=4.0, total_resolved=10, open_tickets=2)
    idle = make_technician("idle", rating=3.5, total_resolved=10, open_tickets=1)
    ranked = rank_technicians([busy, idle])
    assert ranked[0].score == ranked[1].score
    assert ranked[0].id == "idle"
