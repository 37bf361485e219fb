from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class PlanMemberModel(Base):
    __tablename__ = "plan_members"

    member_id = Column(String, primary_key=True, index=True)
    plan_id = Column(String, ForeignKey("study_plans.plan_id", ondelete="CASCADE"), index=True)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True)
    position = Column(Integer, nullable=False, default=0)
    role = Column(String, nullable=False)  # 'leader' or 'member'
    joined_at = Column(String, nullable=False)

    plan = relationship("StudyPlanModel", back_populates="members")
