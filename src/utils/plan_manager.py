"""Study plan management utilities.

This module provides the plan store: plans and their tasks, members and
invitations. Every mutating method loads the plan, checks the caller against
``utils.plan_rules``, changes it and commits once.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import (
    ConcurrentModificationError,
    DuplicateInvitationError,
    InvitationAlreadyResolvedError,
    InvitationNotFoundError,
    NotAMemberError,
    PlanNotFoundError,
    TaskNotFoundError,
)
from models.plan_invitation import PlanInvitationModel
from models.plan_member import PlanMemberModel
from models.plan_task import PlanTaskModel
from models.study_plan import StudyPlanModel
from models.user import UserModel
from schemas.plan import (
    CreatePlanRequest,
    CreateTaskRequest,
    InvitationStatus,
    MemberRole,
    UpdateTaskRequest,
)
from schemas.user import User
from utils.plan_rules import PlanAction, can_respond_to_invitation, is_allowed, is_member

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(pytz.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


class PlanManager:
    """Manages study plan, task, membership, and invitation operations."""

    def __init__(self, db: Session):
        self.db = db

    # --- Loading ---

    def _query(self):
        return self.db.query(StudyPlanModel).options(
            selectinload(StudyPlanModel.tasks),
            selectinload(StudyPlanModel.members),
            selectinload(StudyPlanModel.invitations),
        )

    def _get_model(self, plan_id: str) -> StudyPlanModel:
        model = self._query().filter(StudyPlanModel.plan_id == plan_id).first()
        if not model:
            raise PlanNotFoundError(plan_id)
        return model

    def _get_authorized(
        self, plan_id: str, user_id: str, action: PlanAction
    ) -> StudyPlanModel:
        """Load a plan the caller may act on.

        Raises:
            PlanNotFoundError: If the plan is missing or the action is denied.
        """
        model = self._get_model(plan_id)
        if not is_allowed(model, user_id, action):
            logger.info(
                "Denied %s on plan %s for user %s", action.value, plan_id, user_id
            )
            raise PlanNotFoundError(plan_id)
        return model

    def _commit(self, model: StudyPlanModel) -> StudyPlanModel:
        """Bump the plan version and commit.

        Raises:
            ConcurrentModificationError: If another request wrote the plan
                after it was loaded.
        """
        plan_id = model.plan_id
        model.updated_at = _now()
        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            logger.warning("Concurrent modification of plan %s", plan_id)
            raise ConcurrentModificationError(plan_id) from e
        self.db.refresh(model)
        return model

    # --- Plans ---

    def create_plan(self, req: CreatePlanRequest, owner_id: str) -> StudyPlanModel:
        """Create a new plan with the owner as its sole leader."""
        now = _now()
        plan = StudyPlanModel(
            plan_id=_new_id(),
            title=req.title,
            description=req.description,
            start_date=req.startDate.isoformat(),
            end_date=req.endDate.isoformat(),
            created_by=owner_id,
            created_at=now,
            updated_at=now,
        )
        plan.members.append(
            PlanMemberModel(
                member_id=_new_id(),
                user_id=owner_id,
                position=0,
                role=MemberRole.LEADER.value,
                joined_at=now,
            )
        )
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        logger.info("Created plan %s for user %s", plan.plan_id, owner_id)
        return plan

    def get_plan(self, plan_id: str, user_id: str) -> StudyPlanModel:
        return self._get_authorized(plan_id, user_id, PlanAction.READ)

    def list_plans_for_user(self, user_id: str) -> List[StudyPlanModel]:
        """Plans created by the user or having the user as a member."""
        member_plan_ids = select(PlanMemberModel.plan_id).where(
            PlanMemberModel.user_id == user_id
        )
        return (
            self._query()
            .filter(
                or_(
                    StudyPlanModel.created_by == user_id,
                    StudyPlanModel.plan_id.in_(member_plan_ids),
                )
            )
            .order_by(StudyPlanModel.created_at.desc())
            .all()
        )

    def list_members(self, plan_id: str, user_id: str) -> List[dict]:
        self._get_authorized(plan_id, user_id, PlanAction.READ)
        query = (
            self.db.query(PlanMemberModel, UserModel)
            .join(UserModel, UserModel.user_id == PlanMemberModel.user_id)
            .filter(PlanMemberModel.plan_id == plan_id)
            .order_by(PlanMemberModel.position)
        )
        results = []
        for member, user in query.all():
            results.append(
                {
                    "id": member.member_id,
                    "user": user.user_id,
                    "name": user.name,
                    "email": user.email,
                    "college": user.college or "",
                    "role": member.role,
                    "joinedAt": member.joined_at,
                }
            )
        return results

    # --- Invitations ---

    def invite_member(self, plan_id: str, inviter_id: str, email: str) -> StudyPlanModel:
        """Add a pending invitation for ``email``.

        Raises:
            PlanNotFoundError: If the plan is missing or the caller is not
                its creator.
            DuplicateInvitationError: If ``email`` already has a pending
                invitation to this plan.
        """
        model = self._get_authorized(plan_id, inviter_id, PlanAction.INVITE)
        email = email.strip().lower()
        if any(
            inv.email == email and inv.status == InvitationStatus.PENDING.value
            for inv in model.invitations
        ):
            raise DuplicateInvitationError(email)

        model.invitations.append(
            PlanInvitationModel(
                invitation_id=_new_id(),
                position=len(model.invitations),
                email=email,
                status=InvitationStatus.PENDING.value,
                invited_by=inviter_id,
                invited_at=_now(),
            )
        )
        model = self._commit(model)
        logger.info("User %s invited %s to plan %s", inviter_id, email, plan_id)
        return model

    def respond_to_invitation(
        self,
        plan_id: str,
        invitation_id: str,
        user: User,
        status: InvitationStatus,
    ) -> StudyPlanModel:
        """Accept or reject an invitation addressed to ``user``.

        Raises:
            PlanNotFoundError: If the plan does not exist.
            InvitationNotFoundError: If the invitation is missing or
                addressed to another email.
            InvitationAlreadyResolvedError: If it is no longer pending.
        """
        model = self._get_model(plan_id)
        invitation = next(
            (inv for inv in model.invitations if inv.invitation_id == invitation_id),
            None,
        )
        if not can_respond_to_invitation(invitation, user.email):
            raise InvitationNotFoundError(invitation_id)
        if invitation.status != InvitationStatus.PENDING.value:
            raise InvitationAlreadyResolvedError(invitation_id, invitation.status)

        invitation.status = status.value
        if status == InvitationStatus.ACCEPTED and not is_member(model, user.user_id):
            model.members.append(
                PlanMemberModel(
                    member_id=_new_id(),
                    user_id=user.user_id,
                    position=len(model.members),
                    role=MemberRole.MEMBER.value,
                    joined_at=_now(),
                )
            )
        model = self._commit(model)
        logger.info(
            "User %s %s invitation %s to plan %s",
            user.user_id,
            status.value,
            invitation_id,
            plan_id,
        )
        return model

    def list_plans_with_pending_invitation(self, email: str) -> List[StudyPlanModel]:
        invited_plan_ids = select(PlanInvitationModel.plan_id).where(
            PlanInvitationModel.email == email.strip().lower(),
            PlanInvitationModel.status == InvitationStatus.PENDING.value,
        )
        return (
            self._query()
            .filter(StudyPlanModel.plan_id.in_(invited_plan_ids))
            .order_by(StudyPlanModel.created_at.desc())
            .all()
        )

    # --- Tasks ---

    @staticmethod
    def _find_task(model: StudyPlanModel, task_id: str) -> PlanTaskModel:
        for task in model.tasks:
            if task.task_id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    @staticmethod
    def _check_assignee(model: StudyPlanModel, assignee_id: Optional[str]) -> None:
        if assignee_id is not None and not is_member(model, assignee_id):
            raise NotAMemberError(assignee_id)

    def create_task(
        self, plan_id: str, user_id: str, req: CreateTaskRequest
    ) -> StudyPlanModel:
        """Append a task; the creator and leaders may do this.

        Raises:
            PlanNotFoundError: If the plan is missing or the caller may not
                manage its tasks.
            NotAMemberError: If ``req.assignedTo`` is not a member.
        """
        model = self._get_authorized(plan_id, user_id, PlanAction.MANAGE_TASKS)
        self._check_assignee(model, req.assignedTo)
        model.tasks.append(
            PlanTaskModel(
                task_id=_new_id(),
                position=len(model.tasks),
                title=req.title,
                description=req.description,
                due_date=req.dueDate.isoformat(),
                priority=req.priority.value,
                assigned_to=req.assignedTo,
                created_at=_now(),
            )
        )
        model = self._commit(model)
        logger.info("User %s added a task to plan %s", user_id, plan_id)
        return model

    def update_task(
        self, plan_id: str, task_id: str, user_id: str, req: UpdateTaskRequest
    ) -> StudyPlanModel:
        """Update task fields.

        Any member may change the status; other fields need leader rights.

        Raises:
            PlanNotFoundError: If the plan is missing or the caller lacks the
                required rights.
            TaskNotFoundError: If the task is not in the plan.
        """
        changes = req.model_dump(exclude_unset=True, exclude_none=True)
        action = (
            PlanAction.UPDATE_TASK_STATUS
            if set(changes) <= {"status"}
            else PlanAction.MANAGE_TASKS
        )
        model = self._get_authorized(plan_id, user_id, action)
        task = self._find_task(model, task_id)

        if req.title is not None:
            task.title = req.title
        if req.description is not None:
            task.description = req.description
        if req.dueDate is not None:
            task.due_date = req.dueDate.isoformat()
        if req.status is not None:
            task.status = req.status.value
        if req.priority is not None:
            task.priority = req.priority.value
        return self._commit(model)

    def assign_task(
        self, plan_id: str, task_id: str, user_id: str, assignee_id: str
    ) -> StudyPlanModel:
        """Assign a task to a plan member.

        Raises:
            PlanNotFoundError: If the plan is missing or the caller is neither
                the creator nor a leader.
            TaskNotFoundError: If the task is not in the plan.
            NotAMemberError: If ``assignee_id`` is not a member of the plan.
        """
        model = self._get_authorized(plan_id, user_id, PlanAction.ASSIGN_TASK)
        task = self._find_task(model, task_id)
        self._check_assignee(model, assignee_id)
        task.assigned_to = assignee_id
        model = self._commit(model)
        logger.info(
            "User %s assigned task %s in plan %s to %s",
            user_id,
            task_id,
            plan_id,
            assignee_id,
        )
        return model
