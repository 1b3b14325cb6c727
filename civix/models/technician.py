"""
Technician models - roster records read by the matcher.
"""

from pydantic import BaseModel, Field
from typing import List
from enum import Enum


class TechnicianStatus(str, Enum):
    ACTIVE = "active"
    ON_SITE = "on-site"
    ON_LEAVE = "on-leave"
    INACTIVE = "inactive"


class Technician(BaseModel):
    """Technician as stored in the roster."""
    id: str
    name: str = ""
    specialization: str = Field(..., description="Free text, e.g. 'Electrical / street lighting'")
    status: TechnicianStatus = TechnicianStatus.ACTIVE
    open_tickets: int = Field(default=0, ge=0)
    total_resolved: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    issues_assigned: List[str] = Field(default_factory=list)


class ScoredTechnician(BaseModel):
    """A matcher candidate: the technician plus its computed scores."""
    technician: Technician
    score: float
    workload_score: float

    @property
    def id(self) -> str:
        return self.technician.id

    def summary(self) -> dict:
        """Compact form used in notification payloads."""
        return {
            "id": self.technician.id,
            "name": self.technician.name,
            "specialization": self.technician.specialization,
            "open_tickets": self.technician.open_tickets,
            "rating": self.technician.rating,
            "score": round(self.score, 2),
        }
