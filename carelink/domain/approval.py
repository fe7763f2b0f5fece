"""
Name: Operator Approval Policy

Responsibilities:
  - Apply administrator-triggered approval transitions
  - Decide whether an operator may use capability-bearing operations
  - Decide whether an operator may be blocked / unblocked

Collaborators:
  - domain.entities: ElderHomeOperator, ApprovalStatus
  - application.use_cases.moderate_operator: calls approve/reject
  - guards.require_approved_operator: uses access_denial_message

Constraints:
  - Pure functions (no IO)
  - Transitions:
      pending  -> approved   (clears reason)
      rejected -> approved   (clears reason)
      approved -> approved   (idempotent, clears reason)
      pending  -> rejected   (reason required, default supplied)
    anything else is refused
"""

from .entities import ApprovalStatus, ElderHomeOperator

DEFAULT_REJECTION_REASON = "Application rejected by admin"
NO_REASON_PROVIDED = "No reason provided"


class ApprovalTransitionError(ValueError):
    """R: Raised when a transition is not allowed from the current state."""


# R: Columns an approve / reject transition writes
APPROVAL_FIELDS = ("approval_status", "rejection_reason")


def approve(operator: ElderHomeOperator) -> ElderHomeOperator:
    operator.approval_status = ApprovalStatus.APPROVED
    operator.rejection_reason = None
    return operator


def reject(operator: ElderHomeOperator, reason: str | None = None) -> ElderHomeOperator:
    if operator.approval_status != ApprovalStatus.PENDING:
        raise ApprovalTransitionError("Only pending applications can be rejected")
    operator.approval_status = ApprovalStatus.REJECTED
    operator.rejection_reason = (reason or "").strip() or DEFAULT_REJECTION_REASON
    return operator


def can_toggle_block(operator: ElderHomeOperator) -> bool:
    """R: Only approved homes may be blocked or unblocked."""
    return operator.approval_status == ApprovalStatus.APPROVED


def access_denial_message(operator: ElderHomeOperator) -> str | None:
    """
    R: Message for the approved-operator gate.

    Returns:
        None when the operator is approved, else a status-specific message
    """
    if operator.approval_status == ApprovalStatus.APPROVED:
        return None
    if operator.approval_status == ApprovalStatus.REJECTED:
        reason = operator.rejection_reason or NO_REASON_PROVIDED
        return f"Access denied. Your account application was rejected: {reason}"
    return "Access denied. Your account is pending approval."
