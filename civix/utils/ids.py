"""
Identifier helpers.
"""

import time
import uuid


def new_issue_id() -> str:
    return uuid.uuid4().hex


def new_notification_id() -> str:
    """notif-<epoch millis>-<9 random chars>, sortable by creation time."""
    return f"notif-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
