# backend/logic/progress.py
"""
Progress tracking and course dismissal.

Every call is one read-modify-write on the store, committed once. The user
row is locked first so concurrent updates for the same user are serialized
and completion side effects (history entry, stats, skills) happen once.
"""

import math
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import SETTINGS
from logic.errors import NotFoundError, ValidationError
from logic.skills import apply_course_outcomes
from models.course import Course
from models.training_history import TrainingHistory
from models.user import User
from models.user_progress import COMPLETED, IN_PROGRESS, NOT_STARTED, UserCourseProgress
from utils.setup_logger import setup_logger

logger = setup_logger(
    __name__,
    log_dir=SETTINGS.log_dir,
    log_file="progress.log",
    console_level=SETTINGS.console_level,
)

# Fixed until course scoring exists
DEFAULT_COMPLETION_SCORE = 100


def derive_status(progress: int) -> str:
    if progress == 100:
        return COMPLETED
    if progress > 0:
        return IN_PROGRESS
    return NOT_STARTED


def minutes_to_hours(minutes: int) -> int:
    """Round half up, 90 min -> 2 h."""
    return int(math.floor(minutes / 60 + 0.5))


def validate_progress(progress) -> int:
    if isinstance(progress, bool) or not isinstance(progress, int):
        raise ValidationError("Progress must be an integer")
    if progress < 0 or progress > 100:
        raise ValidationError("Progress must be between 0 and 100")
    return progress


def _load_user_for_update(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).with_for_update().first()
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def _load_course(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    return course


def _find_record(db: Session, user_id: int, course_id: int):
    return (
        db.query(UserCourseProgress)
        .filter_by(user_id=user_id, course_id=course_id)
        .first()
    )


def update_progress(db: Session, user_id: int, course_id: int, progress: int) -> UserCourseProgress:
    progress = validate_progress(progress)

    try:
        user = _load_user_for_update(db, user_id)
        course = _load_course(db, course_id)
        record = _find_record(db, user_id, course_id)

        previous = record.progress if record is not None else None
        now = datetime.now(timezone.utc)

        if record is None:
            record = UserCourseProgress(user_id=user_id, course_id=course_id, dismissed=False)
            db.add(record)

        record.progress = progress
        record.status = derive_status(progress)
        record.last_accessed_at = now
        record.completed_at = now if progress == 100 else None

        if progress == 100 and (previous is None or previous < 100):
            db.add(TrainingHistory(
                user_id=user_id,
                course_id=course_id,
                completed_at=now,
                duration=course.duration,
                score=DEFAULT_COMPLETION_SCORE,
                certificate=True,
            ))
            user.completed_count = (user.completed_count or 0) + 1
            user.training_hours = (user.training_hours or 0) + minutes_to_hours(course.duration)
            apply_course_outcomes(user, course)
            logger.info(f"User {user_id} completed course {course_id}")

        # Counters are not decremented when progress goes back down
        if 0 < progress < 100 and not previous:
            user.in_progress_count = (user.in_progress_count or 0) + 1

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Progress update failed for user {user_id}, course {course_id}")
        raise
    except NotFoundError:
        db.rollback()
        raise

    db.refresh(record)
    logger.debug(f"User {user_id} course {course_id}: {previous} -> {progress}")
    return record


def dismiss_course(db: Session, user_id: int, course_id: int) -> UserCourseProgress:
    try:
        _load_user_for_update(db, user_id)
        _load_course(db, course_id)
        record = _find_record(db, user_id, course_id)
        now = datetime.now(timezone.utc)

        if record is None:
            record = UserCourseProgress(
                user_id=user_id,
                course_id=course_id,
                progress=0,
                status=NOT_STARTED,
            )
            db.add(record)

        record.dismissed = True
        record.last_accessed_at = now
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Dismiss failed for user {user_id}, course {course_id}")
        raise
    except NotFoundError:
        db.rollback()
        raise

    db.refresh(record)
    logger.info(f"User {user_id} dismissed course {course_id}")
    return record


def progress_to_dict(record: UserCourseProgress) -> dict:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "course_id": record.course_id,
        "progress": record.progress,
        "status": record.status,
        "last_accessed_at": record.last_accessed_at.isoformat() if record.last_accessed_at else None,
        "completed_at": record.completed_at.isoformat() if record.completed_at else None,
        "score": record.score,
        "dismissed": record.dismissed,
    }
