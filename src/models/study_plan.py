"""Study plan database model.

A plan owns its tasks, members and invitations; they are stored in their own
tables and deleted together with the plan.
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import Base


class StudyPlanModel(Base):
    """Study plan database model."""

    __tablename__ = "study_plans"

    plan_id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    end_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    created_by = Column(String, index=True, nullable=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
    # Bumped on every write; a stale write raises StaleDataError on flush
    version = Column(Integer, nullable=False)

    tasks = relationship(
        "PlanTaskModel",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="PlanTaskModel.position",
    )
    members = relationship(
        "PlanMemberModel",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="PlanMemberModel.position",
    )
    invitations = relationship(
        "PlanInvitationModel",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="PlanInvitationModel.position",
    )

    __mapper_args__ = {"version_id_col": version}
