import os
import tempfile
from datetime import datetime, timedelta, timezone

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="trainsphere-logs-"))

import pytest
from fastapi.testclient import TestClient

from db import Base, SessionLocal, engine, get_db
from main import app
from models.course import Course
from models.training_history import TrainingHistory  # noqa: F401  registers the table
from models.user import User
from models.user_progress import UserCourseProgress  # noqa: F401

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="manager", skills=None, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            username=kwargs.pop("username", f"user{n}"),
            name=kwargs.pop("name", f"User {n}"),
            email=kwargs.pop("email", f"user{n}@example.com"),
            role=role,
            skills=dict(skills or {}),
            completed_count=0,
            in_progress_count=0,
            training_hours=0,
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_course(db):
    counter = {"n": 0}

    def _make(roles=None, skills=None, outcomes=None, duration=120, days=0, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        course = Course(
            title=kwargs.pop("title", f"Course {n}"),
            description=kwargs.pop("description", "A course"),
            instructor=kwargs.pop("instructor", "Instructor"),
            category=kwargs.pop("category", "General"),
            duration=duration,
            image_path="",
            created_at=BASE_TIME + timedelta(days=days),
            modules=[],
            learning_outcomes=list(outcomes or []),
            recommended_roles=list(roles or []),
            recommended_skills=list(skills or []),
            **kwargs,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture
def auth():
    def _headers(user):
        return {"X-User-Id": str(user.id)}

    return _headers
