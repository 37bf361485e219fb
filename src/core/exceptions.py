"""Custom exception classes for the Study Plan Tracker.

This module defines application-specific exceptions following Google Python
Style Guide. Managers raise them; route handlers translate them into HTTP
responses.
"""


class StudyPlanError(Exception):
    """Base exception for all Study Plan Tracker errors."""

    pass


class UserAlreadyExistsError(StudyPlanError):
    """Raised when registering an email that is already taken."""

    def __init__(self, email: str):
        """Initialize the exception.

        Args:
            email: The email address that is already registered.
        """
        self.email = email
        super().__init__("Email already registered")


class InvalidCredentialsError(StudyPlanError):
    """Raised when an email/password pair does not authenticate."""

    def __init__(self):
        super().__init__("Invalid credentials")


class UserNotFoundError(StudyPlanError):
    """Raised when a requested user cannot be found."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")


class PlanNotFoundError(StudyPlanError):
    """Raised when a plan does not exist or the caller may not act on it.

    Both cases share one error so that responses never reveal whether a plan
    the caller cannot access exists.
    """

    def __init__(self, plan_id: str):
        """Initialize the exception.

        Args:
            plan_id: The ID of the plan that was not found.
        """
        self.plan_id = plan_id
        super().__init__(f"Plan '{plan_id}' not found")


class TaskNotFoundError(StudyPlanError):
    """Raised when a task is not part of the plan."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found")


class InvitationNotFoundError(StudyPlanError):
    """Raised when an invitation is missing or addressed to another email."""

    def __init__(self, invitation_id: str):
        self.invitation_id = invitation_id
        super().__init__(f"Invitation '{invitation_id}' not found")


class InvitationAlreadyResolvedError(StudyPlanError):
    """Raised when responding to an invitation that is no longer pending."""

    def __init__(self, invitation_id: str, status: str):
        self.invitation_id = invitation_id
        self.status = status
        super().__init__(f"Invitation has already been {status}")


class DuplicateInvitationError(StudyPlanError):
    """Raised when the email already has a pending invitation to the plan."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User already invited")


class NotAMemberError(StudyPlanError):
    """Raised when a task is assigned to a user outside the plan."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("User is not a member of this plan")


class ConcurrentModificationError(StudyPlanError):
    """Raised when a plan changed between read and write."""

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__("Plan was modified by another request, please retry")
