"""
Technician Scoring - ranks candidate technicians for an issue.

DESIGN PRINCIPLES:
- Scoring is a pure function of the technician record
- Score is explainable: rating, experience, workload
- Higher score = better candidate
- Never negative

score = rating*20 + min(resolved*2, 50) - (open_tickets/10)*100, clamped at 0
"""

from civix.models.technician import ScoredTechnician, Technician
from typing import Iterable, List


# Configuration: score components
RATING_WEIGHT = 20              # rating 0-5 -> 0-100
EXPERIENCE_PER_RESOLVED = 2     # +2 per resolved issue
EXPERIENCE_CAP = 50
WORKLOAD_CAPACITY = 10          # open tickets at which the penalty reaches 100


def calculate_workload_score(open_tickets: int) -> float:
    """Workload penalty, 0 for an idle technician, 100 at full capacity (lower is better)."""
    return max(0.0, (open_tickets * 100) / WORKLOAD_CAPACITY)


def calculate_score(rating: float, total_resolved: int, open_tickets: int) -> float:
    """
    Overall candidate score (higher is better).

    Non-decreasing in rating and total_resolved, non-increasing in open_tickets.
    """
    rating_score = (rating or 0) * RATING_WEIGHT
    experience_score = min((total_resolved or 0) * EXPERIENCE_PER_RESOLVED, EXPERIENCE_CAP)
    workload_penalty = calculate_workload_score(open_tickets or 0)
    return max(0.0, rating_score + experience_score - workload_penalty)


def score_technician(technician: Technician) -> ScoredTechnician:
    return ScoredTechnician(
        technician=technician,
        score=calculate_score(technician.rating, technician.total_resolved, technician.open_tickets),
        workload_score=calculate_workload_score(technician.open_tickets),
    )


def rank_technicians(technicians: Iterable[Technician]) -> List[ScoredTechnician]:
    """
    Score and sort: score desc, then fewer open tickets, higher rating,
    and technician id so equal candidates always come out in the same order.
    """
    scored = [score_technician(tech) for tech in technicians]
    scored.sort(key=lambda c: (
        -c.score,
        c.technician.open_tickets,
        -c.technician.rating,
        c.technician.id,
    ))
    return scored
