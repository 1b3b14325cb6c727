"""
Admin notification models.

Serialized with the field names the admin console reads
(_id, createdAt, updatedAt).
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from enum import Enum


class NotificationType(str, Enum):
    ISSUE_UNCLASSIFIED = "issue_unclassified"
    LLM_ASSIGNMENT_PENDING = "llm_assignment_pending"
    NO_TECHNICIANS_AVAILABLE = "no_technicians_available"
    ASSIGNMENT_OVERRIDE_NEEDED = "assignment_override_needed"
    MANUAL_ASSIGNMENT_REQUIRED = "manual_assignment_required"


class NotificationPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    type: NotificationType
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    read: bool = False
    actionable: bool = True
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape served to the admin inbox."""
        return self.model_dump(mode="json", by_alias=True)


class NotificationFilter(BaseModel):
    """Optional filters for listing the inbox. None means 'any'."""
    read: Optional[bool] = None
    type: Optional[NotificationType] = None
    priority: Optional[NotificationPriority] = None
    actionable: Optional[bool] = None

    def matches(self, notification: Notification) -> bool:
        if self.read is not None and notification.read != self.read:
            return False
        if self.type is not None and notification.type != self.type:
            return False
        if self.priority is not None and notification.priority != self.priority:
            return False
        if self.actionable is not None and notification.actionable != self.actionable:
            return False
        return True
