# backend/logic/reports.py
"""
Aggregate reports: skill gaps, course popularity and per-user activity.
"""

from collections import Counter

from sqlalchemy import case, false, func
from sqlalchemy.orm import Session

from logic.catalog import course_to_dict, get_user_or_404
from logic.recommendation import GAP_THRESHOLD
from models.course import Course
from models.user_progress import COMPLETED, IN_PROGRESS, UserCourseProgress


def skill_gap_report(db: Session, user_id: int) -> list:
    """Tracked skills below the gap threshold, weakest first, with courses that address them."""
    user = get_user_or_404(db, user_id)

    # Courses the user has not completed and not dismissed
    open_courses = (
        db.query(Course)
        .outerjoin(
            UserCourseProgress,
            (UserCourseProgress.course_id == Course.id) & (UserCourseProgress.user_id == user_id),
        )
        .filter(
            (UserCourseProgress.id.is_(None))
            | ((UserCourseProgress.status != COMPLETED) & (UserCourseProgress.dismissed == false()))
        )
        .order_by(Course.id)
        .all()
    )

    gaps = [
        (skill, int(value))
        for skill, value in (user.skills or {}).items()
        if int(value) < GAP_THRESHOLD
    ]
    gaps.sort(key=lambda g: (g[1], g[0]))

    report = []
    for skill, value in gaps:
        matching = [c for c in open_courses if skill in (c.recommended_skills or [])]
        report.append({
            "skill_name": skill,
            "skill_value": value,
            "recommended_course_ids": [c.id for c in matching],
            "recommended_course_titles": [c.title for c in matching],
        })
    return report


def popular_courses(db: Session, limit: int = 10) -> list:
    enrollments = func.count(func.distinct(UserCourseProgress.user_id))
    completions = func.coalesce(
        func.sum(case((UserCourseProgress.status == COMPLETED, 1), else_=0)), 0
    )
    rows = (
        db.query(Course, enrollments.label("enrollments"), completions.label("completions"))
        .outerjoin(UserCourseProgress, UserCourseProgress.course_id == Course.id)
        .group_by(Course.id)
        .all()
    )

    result = []
    for course, total, done in rows:
        rate = round(done * 100 / total) if total else 0
        item = course_to_dict(course)
        item["total_enrollments"] = total
        item["completions"] = int(done)
        item["completion_rate"] = rate
        result.append(item)

    result.sort(
        key=lambda c: (c["total_enrollments"], c["completion_rate"], c["created_at"] or "", c["id"]),
        reverse=True,
    )
    return result[:limit]


def activity_report(db: Session, user_id: int) -> dict:
    user = get_user_or_404(db, user_id)
    rows = (
        db.query(UserCourseProgress, Course)
        .join(Course, UserCourseProgress.course_id == Course.id)
        .filter(UserCourseProgress.user_id == user_id)
        .all()
    )

    categories = Counter(course.category for _, course in rows)
    last_activity = max(
        (record.last_accessed_at for record, _ in rows if record.last_accessed_at is not None),
        default=None,
    )

    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "courses_enrolled": len(rows),
        "courses_completed": sum(1 for record, _ in rows if record.status == COMPLETED),
        "courses_in_progress": sum(1 for record, _ in rows if record.status == IN_PROGRESS),
        "total_training_minutes": sum(course.duration for record, course in rows if record.status == COMPLETED),
        "last_activity": last_activity.isoformat() if last_activity is not None else None,
        "category_distribution": dict(categories),
    }
