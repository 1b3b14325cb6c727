"""
Pydantic base models for API responses.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional


class BaseResponse(BaseModel):
    """
    Base response model for API responses.
    Admin endpoints that only acknowledge an action return this.
    """
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CountResponse(BaseResponse):
    count: int = 0
