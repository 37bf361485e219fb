from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class PlanInvitationModel(Base):
    __tablename__ = "plan_invitations"

    invitation_id = Column(String, primary_key=True, index=True)
    plan_id = Column(String, ForeignKey("study_plans.plan_id", ondelete="CASCADE"), index=True)
    position = Column(Integer, nullable=False, default=0)
    email = Column(String, index=True, nullable=False)  # lower-cased
    status = Column(String, nullable=False, default="pending")
    invited_by = Column(String, nullable=False)
    invited_at = Column(String, nullable=False)

    plan = relationship("StudyPlanModel", back_populates="invitations")
