"""Study plan routes.

Plans the caller may not see or act on are reported as 404, the same as
plans that do not exist.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user
from core.dependencies import PlanManagerDep
from core.exceptions import (
    ConcurrentModificationError,
    DuplicateInvitationError,
    InvitationAlreadyResolvedError,
    InvitationNotFoundError,
    NotAMemberError,
    PlanNotFoundError,
    StudyPlanError,
    TaskNotFoundError,
)
from schemas.plan import (
    AssignTaskRequest,
    CreatePlanRequest,
    CreateTaskRequest,
    InviteMemberRequest,
    MemberInfo,
    RespondInvitationRequest,
    StudyPlan,
    UpdateTaskRequest,
)
from schemas.user import User
from utils.converters import model_to_plan

router = APIRouter(prefix="/api/plans", tags=["Plan"])

_STATUS_BY_ERROR = {
    PlanNotFoundError: status.HTTP_404_NOT_FOUND,
    TaskNotFoundError: status.HTTP_404_NOT_FOUND,
    InvitationNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateInvitationError: status.HTTP_400_BAD_REQUEST,
    InvitationAlreadyResolvedError: status.HTTP_400_BAD_REQUEST,
    NotAMemberError: status.HTTP_400_BAD_REQUEST,
    ConcurrentModificationError: status.HTTP_409_CONFLICT,
}


def _http_error(exc: StudyPlanError) -> HTTPException:
    """Map a domain error raised by PlanManager to an HTTP error."""
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    detail = str(exc)
    if isinstance(exc, PlanNotFoundError):
        detail = "Plan not found"
    elif isinstance(exc, InvitationNotFoundError):
        detail = "Invitation not found"
    elif isinstance(exc, TaskNotFoundError):
        detail = "Task not found"
    return HTTPException(status_code=code, detail=detail)


@router.get("", response_model=List[StudyPlan], summary="List my plans")
def list_plans(
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[StudyPlan]:
    """List plans the caller created or is a member of."""
    return [model_to_plan(m) for m in plan_manager.list_plans_for_user(current_user.user_id)]


@router.post(
    "",
    response_model=StudyPlan,
    status_code=status.HTTP_201_CREATED,
    summary="Create a plan",
)
def create_plan(
    req: CreatePlanRequest,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    return model_to_plan(plan_manager.create_plan(req, current_user.user_id))


@router.get(
    "/invitations",
    response_model=List[StudyPlan],
    summary="List plans with a pending invitation for me",
)
def list_pending_invitations(
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[StudyPlan]:
    """Plans holding a pending invitation addressed to the caller's email."""
    models = plan_manager.list_plans_with_pending_invitation(current_user.email)
    return [model_to_plan(m) for m in models]


@router.get("/{plan_id}", response_model=StudyPlan, summary="Get a plan")
def get_plan(
    plan_id: str,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    try:
        return model_to_plan(plan_manager.get_plan(plan_id, current_user.user_id))
    except StudyPlanError as e:
        raise _http_error(e)


@router.get(
    "/{plan_id}/members",
    response_model=List[MemberInfo],
    summary="List plan members",
)
def list_plan_members(
    plan_id: str,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[MemberInfo]:
    try:
        members = plan_manager.list_members(plan_id, current_user.user_id)
    except StudyPlanError as e:
        raise _http_error(e)
    return [MemberInfo(**member) for member in members]


@router.post("/{plan_id}/invite", response_model=StudyPlan, summary="Invite a member")
def invite_member(
    plan_id: str,
    req: InviteMemberRequest,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    """Invite an email address to the plan.

    Only the plan creator may invite. At most one invitation per email can
    be pending at a time.

    Raises:
        HTTPException: 404 if the plan is missing or the caller is not its
            creator; 400 if the email already has a pending invitation.
    """
    try:
        model = plan_manager.invite_member(plan_id, current_user.user_id, req.email)
    except StudyPlanError as e:
        raise _http_error(e)
    return model_to_plan(model)


@router.post(
    "/{plan_id}/invitations/{invitation_id}",
    response_model=StudyPlan,
    summary="Accept or reject an invitation",
)
def respond_to_invitation(
    plan_id: str,
    invitation_id: str,
    req: RespondInvitationRequest,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    """Answer an invitation addressed to the caller's email.

    Accepting adds the caller to the plan with role ``member``.

    Raises:
        HTTPException: 404 if the plan or invitation is missing, or the
            invitation was sent to another email; 400 if it was already
            answered.
    """
    try:
        model = plan_manager.respond_to_invitation(
            plan_id, invitation_id, current_user, req.status
        )
    except StudyPlanError as e:
        raise _http_error(e)
    return model_to_plan(model)


@router.post(
    "/{plan_id}/tasks",
    response_model=StudyPlan,
    status_code=status.HTTP_201_CREATED,
    summary="Add a task",
)
def create_task(
    plan_id: str,
    req: CreateTaskRequest,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    try:
        model = plan_manager.create_task(plan_id, current_user.user_id, req)
    except StudyPlanError as e:
        raise _http_error(e)
    return model_to_plan(model)


@router.patch(
    "/{plan_id}/tasks/{task_id}",
    response_model=StudyPlan,
    summary="Update a task",
)
def update_task(
    plan_id: str,
    task_id: str,
    req: UpdateTaskRequest,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    """Update a task. Members may change its status; leaders anything."""
    try:
        model = plan_manager.update_task(plan_id, task_id, current_user.user_id, req)
    except StudyPlanError as e:
        raise _http_error(e)
    return model_to_plan(model)


@router.post(
    "/{plan_id}/tasks/{task_id}/assign",
    response_model=StudyPlan,
    summary="Assign a task to a member",
)
def assign_task(
    plan_id: str,
    task_id: str,
    req: AssignTaskRequest,
    plan_manager: PlanManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudyPlan:
    """Assign a task to a current member of the plan.

    Raises:
        HTTPException: 404 if the plan or task is missing or the caller is
            neither the creator nor a leader; 400 if the target user is not
            a member.
    """
    try:
        model = plan_manager.assign_task(plan_id, task_id, current_user.user_id, req.userId)
    except StudyPlanError as e:
        raise _http_error(e)
    return model_to_plan(model)
