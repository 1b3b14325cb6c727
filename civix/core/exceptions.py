"""
Domain exceptions for the dispatch engine.

Store implementations raise these; routes translate them into HTTP errors.
"""


class DispatchError(Exception):
    """Base class for dispatch failures."""


class IssueNotFoundError(DispatchError):
    def __init__(self, issue_id: str):
        super().__init__(f"Issue {issue_id} not found")
        self.issue_id = issue_id


class TechnicianNotFoundError(DispatchError):
    def __init__(self, technician_id: str):
        super().__init__(f"Technician {technician_id} not found")
        self.technician_id = technician_id


class AssignmentConflictError(DispatchError):
    """Raised when an issue already carries an assigned technician."""

    def __init__(self, issue_id: str, technician_id: str):
        super().__init__(f"Issue {issue_id} is already assigned to technician {technician_id}")
        self.issue_id = issue_id
        self.technician_id = technician_id
