# backend/logic/history.py
from sqlalchemy.orm import Session

from models.course import Course
from models.training_history import TrainingHistory


def get_training_history(db: Session, user_id: int) -> list:
    rows = (
        db.query(TrainingHistory, Course.title, Course.category)
        .join(Course, TrainingHistory.course_id == Course.id)
        .filter(TrainingHistory.user_id == user_id)
        .order_by(TrainingHistory.completed_at.desc(), TrainingHistory.id.desc())
        .all()
    )

    result = []
    for entry, title, category in rows:
        result.append({
            "id": entry.id,
            "user_id": entry.user_id,
            "course_id": entry.course_id,
            "completed_at": entry.completed_at.isoformat(),
            "duration": entry.duration,
            "score": entry.score,
            "certificate": entry.certificate,
            "course_title": title,
            "course_category": category,
        })
    return result
