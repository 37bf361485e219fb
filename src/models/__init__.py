from .base import Base
from .user import UserModel
from .study_plan import StudyPlanModel
from .plan_task import PlanTaskModel
from .plan_member import PlanMemberModel
from .plan_invitation import PlanInvitationModel

__all__ = [
    "Base",
    "UserModel",
    "StudyPlanModel",
    "PlanTaskModel",
    "PlanMemberModel",
    "PlanInvitationModel",
]
