"""
Issue endpoints.

POST /issues stores the issue and runs the dispatch engine. The reporter
always gets a 201: pending approval, manual assignment and even engine
failures are admin concerns, surfaced through the notification inbox.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
import asyncio
import logging

from civix.core.exceptions import (
    AssignmentConflictError,
    IssueNotFoundError,
    TechnicianNotFoundError,
)
from civix.models.issue import Issue, IssueCreate
from civix.services.dispatch_engine import get_dispatch_engine
from civix.services.store import get_dispatch_store
from civix.utils.ids import new_issue_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issues", tags=["Issues"])


class AssignTechnicianRequest(BaseModel):
    """Admin approval or override of an assignment."""
    technician_id: str = Field(..., min_length=1)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_issue(payload: IssueCreate):
    """
    Report a new issue and dispatch it.

    Returns:
        The stored issue and the dispatch result (None if the engine failed)
    """
    issue = Issue(
        id=new_issue_id(),
        title=payload.title,
        description=payload.description,
        category=payload.category,
        urgency=payload.urgency,
        location=payload.location,
    )

    try:
        get_dispatch_store().save_issue(issue)
    except Exception as e:
        logger.error(f"Failed to store issue: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create issue: {str(e)}"
        )

    # Engine does blocking store and model I/O; keep it off the event loop
    loop = asyncio.get_running_loop()
    result = None
    try:
        result = await loop.run_in_executor(None, get_dispatch_engine().dispatch, issue)
        logger.info(f"Issue {issue.id} dispatched: {result.outcome.kind}")
    except Exception as e:
        logger.error(f"Dispatch failed for issue {issue.id}: {e}", exc_info=True)

    stored = get_dispatch_store().get_issue(issue.id) or issue
    return {
        "success": True,
        "message": "Issue reported successfully",
        "issue": stored,
        "dispatch": result,
    }


@router.get("/{issue_id}")
async def get_issue(issue_id: str):
    issue = get_dispatch_store().get_issue(issue_id)
    if issue is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Issue {issue_id} not found"
        )
    return {"success": True, "issue": issue}


@router.get("/{issue_id}/technician-suggestions")
async def get_technician_suggestions(issue_id: str):
    """
    Ranked technicians for an existing issue, for the admin assignment view.

    Over-ceiling technicians are listed separately as busy_technicians.
    """
    try:
        issue, match = get_dispatch_engine().suggest_technicians(issue_id)
    except IssueNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get technician suggestions: {str(e)}"
        )

    return {
        "success": True,
        "issue_id": issue.id,
        "category": issue.category,
        "urgency": issue.urgency,
        "max_workload": match.max_workload,
        "requires_manual_assignment": match.requires_manual_assignment,
        "reason": match.reason,
        "suggestions": [c.summary() for c in match.candidates],
        "busy_technicians": [c.summary() for c in match.busy_technicians],
    }


@router.put("/{issue_id}/assign")
async def assign_issue(issue_id: str, request: AssignTechnicianRequest):
    """
    Assign an issue to a chosen technician (admin approval or override).

    Returns:
        Updated issue and technician
    """
    try:
        issue, technician = get_dispatch_engine().assign_manually(issue_id, request.technician_id)
    except (IssueNotFoundError, TechnicianNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AssignmentConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to assign issue: {str(e)}"
        )

    return {
        "success": True,
        "message": f"Issue assigned to {technician.name or technician.id}",
        "issue": issue,
        "technician": technician,
    }
