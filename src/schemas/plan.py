"""Study plan schema definitions.

Wire format of plans and their tasks, members and invitations, plus the
request bodies of the plan endpoints. Field names are camelCase because that
is what API clients send and receive.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from schemas.user import normalize_email


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MemberRole(str, Enum):
    LEADER = "leader"
    MEMBER = "member"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# --- Responses ---

class Task(BaseModel):
    id: str
    title: str
    description: str
    dueDate: str
    status: TaskStatus
    priority: TaskPriority
    assignedTo: Optional[str] = None
    createdAt: str


class Member(BaseModel):
    id: str
    user: str = Field(description="The user_id of the member.")
    role: MemberRole
    joinedAt: str


class Invitation(BaseModel):
    id: str
    email: str
    status: InvitationStatus
    invitedBy: str
    invitedAt: str


class StudyPlan(BaseModel):
    """Serialized plan with its owned collections."""
    id: str
    title: str
    description: str
    startDate: str
    endDate: str
    tasks: List[Task] = Field(default_factory=list)
    members: List[Member] = Field(default_factory=list)
    invitations: List[Invitation] = Field(default_factory=list)
    createdBy: str
    createdAt: str


class MemberInfo(BaseModel):
    """A plan member joined with the public profile of the user."""
    id: str
    user: str
    name: str
    email: str
    college: str
    role: MemberRole
    joinedAt: str


# --- Requests ---

class CreatePlanRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    startDate: date
    endDate: date

    @field_validator("title", mode="after")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty.")
        return v

    @model_validator(mode="after")
    def check_date_range(self):
        if self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate.")
        return self


class InviteMemberRequest(BaseModel):
    email: EmailStr

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class RespondInvitationRequest(BaseModel):
    # A pending status is not a valid answer
    status: InvitationStatus

    @field_validator("status", mode="after")
    @classmethod
    def must_resolve(cls, v: InvitationStatus) -> InvitationStatus:
        if v == InvitationStatus.PENDING:
            raise ValueError("status must be 'accepted' or 'rejected'.")
        return v


class CreateTaskRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    dueDate: date
    priority: TaskPriority = TaskPriority.MEDIUM
    assignedTo: Optional[str] = None

    @field_validator("title", mode="after")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty.")
        return v


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    dueDate: Optional[date] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @field_validator("title", mode="after")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty.")
        return v


class AssignTaskRequest(BaseModel):
    userId: str = Field(min_length=1)
