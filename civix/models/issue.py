"""
Pydantic models for reported civic issues.
These models handle validation for issue submission and the stored issue record.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional
from enum import Enum


class IssueCategory(str, Enum):
    """
    Service categories an issue can be dispatched under.

    OTHER is what the reporter picks when no category fits; the engine
    classifies it. UNKNOWN marks an issue the engine could not classify.
    """
    SANITATION = "sanitation"
    ELECTRICITY = "electricity"
    WATER = "water"
    ROAD = "road"
    OTHER = "other"
    UNKNOWN = "unknown"


# Categories a technician can be dispatched for, in tie-break priority order
SERVICE_CATEGORIES = [
    IssueCategory.SANITATION,
    IssueCategory.ELECTRICITY,
    IssueCategory.WATER,
    IssueCategory.ROAD,
]


class Urgency(str, Enum):
    """Issue urgency. Ordered: critical > high > moderate > low."""
    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class IssueStatus(str, Enum):
    OPEN = "open"
    IN_PROCESS = "in process"


class Location(BaseModel):
    """Where the issue was reported."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)


class IssueCreate(BaseModel):
    """
    Model for reporting a new issue (incoming POST request).
    Location and urgency are required; category defaults to OTHER.
    """
    title: str = Field(..., min_length=3, max_length=200, description="Short issue title")
    description: str = Field(..., min_length=5, max_length=2000, description="What the reporter observed")
    category: IssueCategory = Field(default=IssueCategory.OTHER, description="Service category, or 'other'")
    urgency: Urgency = Field(..., description="critical | high | moderate | low")
    location: Location

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Street light not working",
                "description": "Light out for 3 days near the bus stop",
                "category": "other",
                "urgency": "high",
                "location": {"latitude": 18.5204, "longitude": 73.8567, "address": "FC Road, Pune"},
            }
        }
        extra = "ignore"


class Issue(BaseModel):
    """
    Stored issue record.

    The dispatch engine only changes category, assigned_technician and status.
    """
    id: str
    title: str
    description: str
    category: IssueCategory = IssueCategory.OTHER
    urgency: Urgency
    location: Optional[Location] = None
    status: IssueStatus = IssueStatus.OPEN
    assigned_technician: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
