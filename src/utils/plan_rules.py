"""Authorization rules for study plans.

Pure predicates over a plan, the requesting identity and an action. They only
look at the plan's ``created_by`` and ``members`` as currently loaded, so
every request re-derives access from stored state.
"""

from enum import Enum
from typing import Optional

from schemas.plan import MemberRole


class PlanAction(str, Enum):
    READ = "read"
    INVITE = "invite"
    MANAGE_TASKS = "manage_tasks"
    UPDATE_TASK_STATUS = "update_task_status"
    ASSIGN_TASK = "assign_task"


def find_member(plan, user_id: str):
    """Return the membership of ``user_id`` in ``plan``, or None."""
    for member in plan.members:
        if member.user_id == user_id:
            return member
    return None


def is_creator(plan, user_id: str) -> bool:
    return plan.created_by == user_id


def is_member(plan, user_id: str) -> bool:
    return find_member(plan, user_id) is not None


def is_leader(plan, user_id: str) -> bool:
    member = find_member(plan, user_id)
    return member is not None and member.role == MemberRole.LEADER.value


def is_allowed(plan, user_id: str, action: PlanAction) -> bool:
    """Decide whether ``user_id`` may perform ``action`` on ``plan``.

    Args:
        plan: A plan exposing ``created_by`` and ``members``.
        user_id: The requesting identity.
        action: The action being attempted.

    Returns:
        True if the action is allowed.
    """
    if action == PlanAction.INVITE:
        # Only the creator sends invitations, even if other leaders exist
        return is_creator(plan, user_id)
    if action in (PlanAction.MANAGE_TASKS, PlanAction.ASSIGN_TASK):
        return is_creator(plan, user_id) or is_leader(plan, user_id)
    if action in (PlanAction.READ, PlanAction.UPDATE_TASK_STATUS):
        return is_creator(plan, user_id) or is_member(plan, user_id)
    return False


def can_respond_to_invitation(invitation, email: Optional[str]) -> bool:
    """Only the addressee of an invitation may answer it."""
    if invitation is None or not email:
        return False
    return invitation.email == email.strip().lower()
