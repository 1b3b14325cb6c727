"""
Firestore query helpers shared by the Firestore-backed store.
"""

from typing import Any, Dict, Optional


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Uses positional arguments, which work reliably with firebase_admin.

    Usage:
        query = where_filter(collection, "status", "==", "active")
    """
    return query.where(field_path, op_string, value)


def snapshot_to_dict(snapshot) -> Optional[Dict[str, Any]]:
    """Return the document data with its id folded in, or None if missing."""
    if snapshot is None or not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data
