# backend/models/training_history.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer

from db import Base


class TrainingHistory(Base):
    """Append-only record of a course completion."""
    __tablename__ = "training_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    score = Column(Integer, nullable=False)
    certificate = Column(Boolean, nullable=False, default=True)
