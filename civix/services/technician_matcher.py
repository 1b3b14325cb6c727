"""
Technician Matcher - finds and ranks technicians for a classified issue.

DESIGN PRINCIPLES:
- Read-only: matching never mutates the roster
- Only ACTIVE technicians are eligible
- Workload ceiling tightens as urgency rises
- Over-ceiling technicians are kept in a "busy" pool so admins can see them
- Ordering is fully deterministic
"""

from civix.models.assignment import MatchResult, ReasonCode
from civix.models.issue import IssueCategory, Location, Urgency
from civix.models.technician import TechnicianStatus
from civix.services.store import DispatchStore, get_dispatch_store
from civix.services.technician_scoring import rank_technicians
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class TechnicianMatcher:
    """
    Matches an issue category to technicians by specialization keywords.
    """

    # Specialization keywords per service category
    SPECIALIZATION_KEYWORDS: Dict[IssueCategory, List[str]] = {
        IssueCategory.SANITATION: ["sanitation", "waste management", "cleaning"],
        IssueCategory.ELECTRICITY: ["electricity", "electrical", "power", "lighting"],
        IssueCategory.WATER: ["water", "plumbing", "drainage", "water supply"],
        IssueCategory.ROAD: ["road", "roads", "infrastructure", "traffic", "pavement"],
    }

    # Maximum open tickets a technician may hold to be offered an issue
    URGENCY_WORKLOAD_CEILING: Dict[Urgency, int] = {
        Urgency.CRITICAL: 3,
        Urgency.HIGH: 5,
        Urgency.MODERATE: 8,
        Urgency.LOW: 10,
    }

    MAX_CANDIDATES = 10
    MAX_BUSY_CANDIDATES = 5

    def __init__(self, store: Optional[DispatchStore] = None):
        self.store = store or get_dispatch_store()

    def match(
        self,
        category: IssueCategory,
        urgency: Urgency,
        location: Optional[Location] = None
    ) -> MatchResult:
        """
        Find ranked candidates for an issue.

        Args:
            category: Classified service category
            urgency: Issue urgency (sets the workload ceiling)
            location: Accepted for future distance ranking; not used yet

        Returns:
            MatchResult with candidates, or requires_manual_assignment and a reason
        """
        max_workload = self.URGENCY_WORKLOAD_CEILING.get(urgency, 8)
        keywords = self.SPECIALIZATION_KEYWORDS.get(category)

        if not keywords:
            logger.info(f"No specialization mapping for category '{category.value}'")
            return MatchResult(
                category=category,
                requires_manual_assignment=True,
                reason=ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION,
                max_workload=max_workload,
            )

        technicians = self.store.find_by_specialization_and_status(keywords, TechnicianStatus.ACTIVE)
        primary = [tech for tech in technicians if tech.open_tickets <= max_workload]
        busy = [tech for tech in technicians if tech.open_tickets > max_workload]

        ranked_busy = rank_technicians(busy)

        if primary:
            ranked = rank_technicians(primary)
            logger.info(
                f"Matched {len(ranked)} {category.value} technician(s) "
                f"(ceiling {max_workload}, {len(busy)} busy)"
            )
            return MatchResult(
                category=category,
                candidates=ranked[:self.MAX_CANDIDATES],
                busy_technicians=ranked_busy[:self.MAX_BUSY_CANDIDATES],
                max_workload=max_workload,
                total_available=len(ranked),
            )

        if busy:
            logger.info(f"All {len(busy)} {category.value} technician(s) over workload ceiling {max_workload}")
            return MatchResult(
                category=category,
                candidates=ranked_busy[:self.MAX_BUSY_CANDIDATES],
                busy_technicians=ranked_busy[:self.MAX_BUSY_CANDIDATES],
                requires_manual_assignment=True,
                reason=ReasonCode.ALL_TECHNICIANS_BUSY,
                max_workload=max_workload,
            )

        logger.info(f"No active {category.value} technicians in roster")
        return MatchResult(
            category=category,
            requires_manual_assignment=True,
            reason=ReasonCode.NO_TECHNICIANS_OF_SPECIALIZATION,
            max_workload=max_workload,
        )
