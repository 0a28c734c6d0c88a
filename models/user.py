# backend/models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func

from db import Base, JSONType

DEFAULT_SKILLS = {
    "leadership": 10,
    "data_analysis": 10,
    "project_management": 10,
    "communication": 10,
    "technical": 10,
}


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    role = Column(String, nullable=False, index=True, default="user")
    # skill name -> proficiency 0..100
    skills = Column(JSONType, nullable=False, default=dict)

    completed_count = Column(Integer, nullable=False, default=0)
    in_progress_count = Column(Integer, nullable=False, default=0)
    training_hours = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def stats(self) -> dict:
        return {
            "completed": self.completed_count or 0,
            "inProgress": self.in_progress_count or 0,
            "hours": self.training_hours or 0,
        }
