from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class PlanTaskModel(Base):
    __tablename__ = "plan_tasks"

    task_id = Column(String, primary_key=True, index=True)
    plan_id = Column(String, ForeignKey("study_plans.plan_id", ondelete="CASCADE"), index=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    due_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    status = Column(String, nullable=False, default="pending")
    priority = Column(String, nullable=False, default="medium")
    assigned_to = Column(String, nullable=True)
    created_at = Column(String, nullable=False)

    plan = relationship("StudyPlanModel", back_populates="tasks")
