"""
Admin notification inbox endpoints.

The inbox is the admin action queue: every dispatch that needs a human
(approval, manual assignment, classification) shows up here.
"""

from fastapi import APIRouter, HTTPException, Query, status
from typing import Optional
import logging

from civix.core.settings import settings
from civix.models.base import BaseResponse, CountResponse
from civix.models.notification import (
    NotificationFilter,
    NotificationPriority,
    NotificationType,
)
from civix.services.notification_service import get_notification_inbox

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/notifications", tags=["Admin Notifications"])


@router.get("")
async def list_notifications(
    read: Optional[bool] = Query(None, description="Filter by read state"),
    notification_type: Optional[NotificationType] = Query(None, alias="type", description="Filter by notification type"),
    priority: Optional[NotificationPriority] = Query(None, description="Filter by priority"),
    actionable: Optional[bool] = Query(None, description="Filter by actionable flag"),
    limit: int = Query(
        max(1, settings.NOTIFICATION_CAPACITY),
        ge=1,
        le=max(1, settings.NOTIFICATION_CAPACITY),
        description="Max results (up to the inbox capacity)"
    )
):
    """
    List inbox notifications, newest first.

    Returns:
        Matching notifications plus unread/actionable counts
    """
    inbox = get_notification_inbox()
    filters = NotificationFilter(
        read=read,
        type=notification_type,
        priority=priority,
        actionable=actionable,
    )
    notifications = inbox.list(filters)[:limit]

    return {
        "success": True,
        "count": len(notifications),
        "unread_count": inbox.unread_count(),
        "actionable_count": inbox.actionable_count(),
        "notifications": [n.to_dict() for n in notifications],
    }


@router.get("/counts")
async def notification_counts():
    inbox = get_notification_inbox()
    return {
        "success": True,
        "total": len(inbox),
        "unread_count": inbox.unread_count(),
        "actionable_count": inbox.actionable_count(),
    }


@router.patch("/read-all", response_model=CountResponse)
async def mark_all_read():
    changed = get_notification_inbox().mark_all_read()
    logger.info(f"Marked {changed} notification(s) as read")
    return CountResponse(message="All notifications marked as read", count=changed)


@router.patch("/{notification_id}/read")
async def mark_read(notification_id: str):
    notification = get_notification_inbox().mark_read(notification_id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found"
        )
    return {
        "success": True,
        "message": "Notification marked as read",
        "notification": notification.to_dict(),
    }


@router.delete("/{notification_id}", response_model=BaseResponse)
async def delete_notification(notification_id: str):
    if not get_notification_inbox().remove(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found"
        )
    return BaseResponse(message="Notification deleted")


@router.post("/cleanup", response_model=CountResponse)
async def cleanup_notifications():
    """Retention sweep: drop notifications older than the retention window."""
    removed = get_notification_inbox().clear_old()
    return CountResponse(
        message=f"Removed notifications older than {get_notification_inbox().retention_days} days",
        count=removed
    )
