"""Conversions between ORM models and pydantic schemas."""

from models.user import UserModel
from models.study_plan import StudyPlanModel
from schemas.plan import Invitation, Member, StudyPlan, Task
from schemas.user import User


def user_to_model(user: User) -> UserModel:
    return UserModel(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        college=user.college,
        password_hash=user.password_hash,
        created_at=user.create_at,
    )


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        name=model.name,
        email=model.email,
        college=model.college or "",
        password_hash=model.password_hash,
        create_at=model.created_at,
    )


def model_to_plan(model: StudyPlanModel) -> StudyPlan:
    """Flatten a plan row and its collections into the wire format."""
    return StudyPlan(
        id=model.plan_id,
        title=model.title,
        description=model.description or "",
        startDate=model.start_date,
        endDate=model.end_date,
        tasks=[
            Task(
                id=task.task_id,
                title=task.title,
                description=task.description or "",
                dueDate=task.due_date,
                status=task.status,
                priority=task.priority,
                assignedTo=task.assigned_to,
                createdAt=task.created_at,
            )
            for task in model.tasks
        ],
        members=[
            Member(
                id=member.member_id,
                user=member.user_id,
                role=member.role,
                joinedAt=member.joined_at,
            )
            for member in model.members
        ],
        invitations=[
            Invitation(
                id=inv.invitation_id,
                email=inv.email,
                status=inv.status,
                invitedBy=inv.invited_by,
                invitedAt=inv.invited_at,
            )
            for inv in model.invitations
        ],
        createdBy=model.created_by,
        createdAt=model.created_at,
    )
