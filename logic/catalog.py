# backend/logic/catalog.py
"""
Users and the course catalog: registration, profiles, course listings.
"""

from sqlalchemy import or_
from sqlalchemy.orm import Session

from config import SETTINGS
from logic.errors import ConflictError, NotFoundError
from models.course import Course
from models.user import DEFAULT_SKILLS, User
from models.user_progress import COMPLETED, IN_PROGRESS, NOT_STARTED, UserCourseProgress
from utils.setup_logger import setup_logger

logger = setup_logger(
    __name__,
    log_dir=SETTINGS.log_dir,
    log_file="catalog.log",
    console_level=SETTINGS.console_level,
)

# in_progress first, completed last
STATUS_ORDER = {IN_PROGRESS: 0, NOT_STARTED: 1, COMPLETED: 2}


def _iso(value):
    return value.isoformat() if value is not None else None


def course_to_dict(course: Course) -> dict:
    return {
        "id": course.id,
        "title": course.title,
        "description": course.description,
        "instructor": course.instructor,
        "category": course.category,
        "duration": course.duration,
        "image_path": course.image_path,
        "created_at": _iso(course.created_at),
        "modules": course.modules or [],
        "learning_outcomes": course.learning_outcomes or [],
        "recommended_roles": course.recommended_roles or [],
        "recommended_skills": course.recommended_skills or [],
        "rating": course.rating,
        "review_count": course.review_count,
    }


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "skills": user.skills or {},
        "stats": user.stats,
    }


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def get_user(db: Session, user_id: int) -> dict:
    return user_to_dict(get_user_or_404(db, user_id))


def get_skills(db: Session, user_id: int) -> dict:
    return dict(get_user_or_404(db, user_id).skills or {})


def register_user(db: Session, username: str, name: str, email: str, role: str = None) -> dict:
    existing = (
        db.query(User)
        .filter(or_(User.username == username, User.email == email))
        .first()
    )
    if existing is not None:
        raise ConflictError("Username or email already exists")

    user = User(
        username=username,
        name=name,
        email=email,
        role=role or "user",
        skills=dict(DEFAULT_SKILLS),
        completed_count=0,
        in_progress_count=0,
        training_hours=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return user_to_dict(user)


def get_course(db: Session, course_id: int) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    return course_to_dict(course)


def list_courses(db: Session, user_id: int) -> list:
    """All courses with the caller's progress on each."""
    rows = (
        db.query(Course, UserCourseProgress)
        .outerjoin(
            UserCourseProgress,
            (UserCourseProgress.course_id == Course.id) & (UserCourseProgress.user_id == user_id),
        )
        .all()
    )

    def sort_key(row):
        course, record = row
        status = record.status if record is not None else None
        accessed = record.last_accessed_at if record is not None else None
        return (
            STATUS_ORDER.get(status, 1),
            # last_accessed_at desc, nulls last
            accessed is None,
            -accessed.timestamp() if accessed is not None else 0,
            course.title,
        )

    result = []
    for course, record in sorted(rows, key=sort_key):
        item = course_to_dict(course)
        item["progress"] = record.progress if record is not None else 0
        item["status"] = record.status if record is not None else NOT_STARTED
        item["last_accessed_at"] = _iso(record.last_accessed_at) if record is not None else None
        item["completed_at"] = _iso(record.completed_at) if record is not None else None
        result.append(item)
    return result
