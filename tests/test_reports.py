from datetime import datetime, timedelta, timezone

from logic.catalog import list_courses
from logic.history import get_training_history
from logic.progress import dismiss_course, update_progress
from logic.reports import activity_report, popular_courses, skill_gap_report
from models.training_history import TrainingHistory

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_history_newest_first_with_course_details(db, make_user, make_course):
    user = make_user()
    old = make_course(title="Old", category="Leadership")
    new = make_course(title="New", category="Data")
    db.add(TrainingHistory(user_id=user.id, course_id=old.id, completed_at=BASE_TIME,
                           duration=60, score=90, certificate=True))
    db.add(TrainingHistory(user_id=user.id, course_id=new.id, completed_at=BASE_TIME + timedelta(days=3),
                           duration=90, score=100, certificate=True))
    db.commit()

    entries = get_training_history(db, user.id)

    assert [e["course_title"] for e in entries] == ["New", "Old"]
    assert entries[0]["course_category"] == "Data"
    assert entries[1]["score"] == 90


def test_history_only_for_requested_user(db, make_user, make_course):
    user = make_user()
    other = make_user()
    course = make_course()
    update_progress(db, other.id, course.id, 100)

    assert get_training_history(db, user.id) == []
    assert len(get_training_history(db, other.id)) == 1


def test_list_courses_orders_by_status(db, make_user, make_course):
    user = make_user()
    done = make_course(title="Done")
    make_course(title="Untouched")
    started = make_course(title="Started")
    update_progress(db, user.id, done.id, 100)
    update_progress(db, user.id, started.id, 20)

    courses = list_courses(db, user.id)

    assert [c["title"] for c in courses] == ["Started", "Untouched", "Done"]
    assert courses[1]["status"] == "not_started"
    assert courses[1]["last_accessed_at"] is None
    assert courses[2]["completed_at"] is not None


def test_skill_gap_report(db, make_user, make_course):
    user = make_user(skills={"leadership": 75, "communication": 40, "technical": 20})
    comm = make_course(title="Talk", skills=["communication"])
    both = make_course(title="Both", skills=["communication", "technical"])
    gone = make_course(title="Gone", skills=["technical"])
    dismiss_course(db, user.id, gone.id)

    report = skill_gap_report(db, user.id)

    assert [r["skill_name"] for r in report] == ["technical", "communication"]
    assert report[0]["recommended_course_ids"] == [both.id]
    assert report[1]["recommended_course_ids"] == [comm.id, both.id]
    assert report[1]["recommended_course_titles"] == ["Talk", "Both"]


def test_popular_courses(db, make_user, make_course):
    first, second, third = make_user(), make_user(), make_user()
    hot = make_course(title="Hot")
    warm = make_course(title="Warm")
    make_course(title="Cold")
    for user in (first, second, third):
        update_progress(db, user.id, hot.id, 50)
    update_progress(db, first.id, hot.id, 100)
    update_progress(db, first.id, warm.id, 100)

    courses = popular_courses(db)

    assert [c["title"] for c in courses] == ["Hot", "Warm", "Cold"]
    assert courses[0]["total_enrollments"] == 3
    assert courses[0]["completions"] == 1
    assert courses[0]["completion_rate"] == 33
    assert courses[1]["completion_rate"] == 100
    assert courses[2]["total_enrollments"] == 0
    assert courses[2]["completion_rate"] == 0


def test_activity_report(db, make_user, make_course):
    user = make_user()
    lead = make_course(category="Leadership", duration=120)
    data = make_course(category="Data", duration=60)
    lead_two = make_course(category="Leadership", duration=30)
    update_progress(db, user.id, lead.id, 100)
    update_progress(db, user.id, data.id, 30)
    dismiss_course(db, user.id, lead_two.id)

    report = activity_report(db, user.id)

    assert report["courses_enrolled"] == 3
    assert report["courses_completed"] == 1
    assert report["courses_in_progress"] == 1
    assert report["total_training_minutes"] == 120
    assert report["category_distribution"] == {"Leadership": 2, "Data": 1}
    assert report["last_activity"] is not None
