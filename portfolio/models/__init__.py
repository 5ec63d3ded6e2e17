from portfolio.models.assignment import Assignment
from portfolio.models.assignment_draft import AssignmentDraft
from portfolio.models.audit_event import AuditEvent
from portfolio.models.user import User

__all__ = [ "Assignment", "AssignmentDraft", "AuditEvent", "User" ]
