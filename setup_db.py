# setup_db.py
"""
Recreate the schema and load the demo data set.

    python setup_db.py            # drop, create, seed
    python setup_db.py --no-seed  # drop and create only
"""
import argparse
from datetime import datetime, timedelta, timezone

from config import SETTINGS
from db import Base, SessionLocal, engine
from models.course import Course
from models.training_history import TrainingHistory
from models.user import User
from models.user_progress import IN_PROGRESS, UserCourseProgress
from utils.setup_logger import setup_logger

logger = setup_logger(
    __name__,
    log_dir=SETTINGS.log_dir,
    log_file="setup_db.log",
    console_level=SETTINGS.console_level,
)

DEMO_USER = {
    "username": "alex",
    "name": "Alex Morgan",
    "email": "alex@example.com",
    "role": "manager",
    "skills": {
        "leadership": 75,
        "data_analysis": 45,
        "project_management": 60,
        "communication": 80,
        "technical": 50,
    },
    "completed_count": 1,
    "in_progress_count": 1,
    "training_hours": 4,
}

DEMO_COURSES = [
    {
        "title": "Data Analysis Fundamentals",
        "description": "Learn the essential skills of data analysis, including statistical methods and visualization techniques.",
        "instructor": "Dr. Sarah Johnson",
        "category": "Data Analysis",
        "duration": 120,
        "image_path": "/images/courses/data-analysis.jpg",
        "modules": [
            {"title": "Introduction to Data Analysis", "duration": 20},
            {"title": "Statistical Methods", "duration": 40},
            {"title": "Data Visualization", "duration": 30},
            {"title": "Analysis Tools and Software", "duration": 30},
        ],
        "learning_outcomes": ["data_analysis", "Statistical analysis", "Data visualization"],
        "recommended_roles": ["analyst", "manager", "data_scientist"],
        "recommended_skills": ["data_analysis", "technical"],
    },
    {
        "title": "Leadership Essentials",
        "description": "Develop key leadership skills needed to inspire and guide teams to success.",
        "instructor": "Michael Chen",
        "category": "Leadership",
        "duration": 180,
        "image_path": "/images/courses/leadership.jpg",
        "modules": [
            {"title": "Understanding Leadership Styles", "duration": 45},
            {"title": "Effective Communication", "duration": 45},
            {"title": "Team Building", "duration": 45},
            {"title": "Conflict Resolution", "duration": 45},
        ],
        "learning_outcomes": ["leadership", "communication", "Conflict resolution"],
        "recommended_roles": ["manager", "team_lead", "director"],
        "recommended_skills": ["leadership", "communication"],
    },
    {
        "title": "Project Management Fundamentals",
        "description": "Learn the core principles of project management including planning, execution, and closure.",
        "instructor": "Jessica Alvarez",
        "category": "Project Management",
        "duration": 150,
        "image_path": "/images/courses/project-management.jpg",
        "modules": [
            {"title": "Project Initiation", "duration": 30},
            {"title": "Project Planning", "duration": 40},
            {"title": "Project Execution", "duration": 40},
            {"title": "Project Monitoring", "duration": 20},
            {"title": "Project Closure", "duration": 20},
        ],
        "learning_outcomes": ["project_management", "Risk management", "Resource allocation"],
        "recommended_roles": ["project_manager", "team_lead", "product_owner"],
        "recommended_skills": ["project_management", "leadership"],
    },
    {
        "title": "Communication Skills for Professionals",
        "description": "Enhance your ability to communicate effectively in any professional environment.",
        "instructor": "Dr. Robert Martinez",
        "category": "Communication",
        "duration": 90,
        "image_path": "/images/courses/communication.jpg",
        "modules": [
            {"title": "Verbal Communication", "duration": 30},
            {"title": "Non-verbal Communication", "duration": 20},
            {"title": "Written Communication", "duration": 20},
            {"title": "Active Listening", "duration": 20},
        ],
        "learning_outcomes": ["communication", "Active listening", "Persuasive writing"],
        "recommended_roles": ["all_roles"],
        "recommended_skills": ["communication"],
    },
]


def create_schema():
    logger.info("Dropping tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("Creating tables...")
    Base.metadata.create_all(bind=engine)


def seed(db):
    now = datetime.now(timezone.utc)
    user = User(**DEMO_USER)
    db.add(user)

    courses = []
    # Stagger creation times so "newest" ordering is meaningful
    for offset, data in enumerate(DEMO_COURSES):
        course = Course(created_at=now - timedelta(days=len(DEMO_COURSES) - offset), **data)
        db.add(course)
        courses.append(course)
    db.flush()

    leadership, communication = courses[1], courses[3]
    db.add(UserCourseProgress(
        user_id=user.id,
        course_id=leadership.id,
        progress=45,
        status=IN_PROGRESS,
        last_accessed_at=now,
    ))
    db.add(TrainingHistory(
        user_id=user.id,
        course_id=communication.id,
        completed_at=now - timedelta(days=90),
        duration=communication.duration,
        score=95,
        certificate=True,
    ))
    db.commit()
    logger.info(f"Seeded user {user.username} and {len(courses)} courses")


def main():
    parser = argparse.ArgumentParser(description="Recreate the TrainSphere database")
    parser.add_argument("--no-seed", action="store_true", help="create empty tables only")
    args = parser.parse_args()

    create_schema()
    if not args.no_seed:
        db = SessionLocal()
        try:
            seed(db)
        finally:
            db.close()
    logger.info("Done.")


if __name__ == "__main__":
    main()
