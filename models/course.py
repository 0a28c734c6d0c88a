# backend/models/course.py
from sqlalchemy import Column, DateTime, Integer, String, Text, func

from db import Base, JSONType


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    instructor = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # minutes
    image_path = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # [{"title": ..., "duration": ...}, ...]
    modules = Column(JSONType, nullable=False, default=list)
    learning_outcomes = Column(JSONType, nullable=False, default=list)
    recommended_roles = Column(JSONType, nullable=False, default=list)
    recommended_skills = Column(JSONType, nullable=False, default=list)

    rating = Column(Integer, default=0)
    review_count = Column(Integer, default=0)
