# backend/logic/recommendation.py
"""
Skill-gap driven course recommendations.

A course is a candidate when the user has not completed or dismissed it and
either its recommended roles contain the user's role or one of its
recommended skills is tracked by the user below ``GAP_THRESHOLD``.

``relevance`` ordering (all descending):
    1. role match
    2. number of recommended skills below ``STRONG_GAP_THRESHOLD``
    3. no progress record yet (courses already started rank lower)
    4. course creation time
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import false, or_
from sqlalchemy.orm import Session

from config import SETTINGS
from logic.catalog import course_to_dict, get_user_or_404
from logic.errors import ValidationError
from models.course import Course
from models.user_progress import NOT_STARTED, UserCourseProgress
from utils.setup_logger import setup_logger

logger = setup_logger(
    __name__,
    log_dir=SETTINGS.log_dir,
    log_file="recommendation.log",
    console_level=SETTINGS.console_level,
)

SORT_RELEVANCE = "relevance"
SORT_NEWEST = "newest"
SORT_MODES = (SORT_RELEVANCE, SORT_NEWEST)

GAP_THRESHOLD = 70
STRONG_GAP_THRESHOLD = 50
CANDIDATE_BATCH = 100


def role_matches(role: str, recommended_roles: Optional[Iterable[str]]) -> bool:
    return role in (recommended_roles or [])


def count_skill_gaps(skills: Dict[str, int], recommended_skills: Optional[Iterable[str]], threshold: int) -> int:
    """Recommended skills the user tracks with proficiency below ``threshold``."""
    skills = skills or {}
    return sum(
        1 for skill in (recommended_skills or [])
        if skill in skills and int(skills[skill]) < threshold
    )


def _created_ts(course: Course) -> float:
    return course.created_at.timestamp() if course.created_at is not None else float("-inf")


def _candidate_query(db: Session, user_id: int):
    """Courses not completed and not dismissed by the user, with the progress record if any."""
    return (
        db.query(Course, UserCourseProgress)
        .outerjoin(
            UserCourseProgress,
            (UserCourseProgress.course_id == Course.id) & (UserCourseProgress.user_id == user_id),
        )
        .filter(
            or_(
                UserCourseProgress.id.is_(None),
                (UserCourseProgress.dismissed == false()) & (UserCourseProgress.progress < 100),
            )
        )
    )


def _score(user, skills, course, record):
    role_match = role_matches(user.role, course.recommended_roles)
    if not role_match and count_skill_gaps(skills, course.recommended_skills, GAP_THRESHOLD) == 0:
        return None
    return {
        "course": course,
        "record": record,
        "role_match": role_match,
        "skill_gaps": count_skill_gaps(skills, course.recommended_skills, STRONG_GAP_THRESHOLD),
    }


def recommend_courses(
    db: Session,
    user_id: int,
    sort_by: str = SORT_RELEVANCE,
    limit: int = SETTINGS.recommendation_limit,
) -> List[dict]:
    if sort_by not in SORT_MODES:
        raise ValidationError(f"sortBy must be one of: {', '.join(SORT_MODES)}")
    if limit < 1:
        raise ValidationError("limit must be a positive integer")

    user = get_user_or_404(db, user_id)
    skills = user.skills or {}
    query = _candidate_query(db, user_id)

    scored = []
    if sort_by == SORT_NEWEST:
        # Pages arrive in final order, stop reading once the limit is filled
        ordered = query.order_by(Course.created_at.desc(), Course.id.desc())
        offset = 0
        while len(scored) < limit:
            rows = ordered.offset(offset).limit(CANDIDATE_BATCH).all()
            for course, record in rows:
                candidate = _score(user, skills, course, record)
                if candidate is not None and len(scored) < limit:
                    scored.append(candidate)
            if len(rows) < CANDIDATE_BATCH:
                break
            offset += CANDIDATE_BATCH
    else:
        for course, record in query.all():
            candidate = _score(user, skills, course, record)
            if candidate is not None:
                scored.append(candidate)
        scored.sort(
            key=lambda c: (
                c["role_match"],
                c["skill_gaps"],
                c["record"] is None,
                _created_ts(c["course"]),
                c["course"].id,
            ),
            reverse=True,
        )

    result = []
    for candidate in scored[:limit]:
        record = candidate["record"]
        item = course_to_dict(candidate["course"])
        item["progress"] = record.progress if record is not None else 0
        item["status"] = record.status if record is not None else NOT_STARTED
        result.append(item)

    logger.debug(f"User {user_id}: {len(result)} candidates returned ({sort_by})")
    return result
