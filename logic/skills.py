# backend/logic/skills.py
"""
Skill proficiency merge applied when a course is completed.

Only skills the user already tracks are raised; outcome tags the user
has never been scored on are left out of the map.
"""

from typing import Dict, Iterable

from models.course import Course
from models.user import User

SKILL_STEP = 10
SKILL_CAP = 100


def merge_outcome_skills(
    skills: Dict[str, int],
    outcomes: Iterable[str],
    step: int = SKILL_STEP,
    cap: int = SKILL_CAP,
) -> Dict[str, int]:
    outcome_set = set(outcomes or [])
    merged = {}
    for skill, value in (skills or {}).items():
        value = int(value)
        if skill in outcome_set:
            # never lower a value that is already above the cap
            merged[skill] = max(value, min(cap, value + step))
        else:
            merged[skill] = value
    return merged


def apply_course_outcomes(user: User, course: Course) -> Dict[str, int]:
    # Assign a new dict so the JSON column is flagged dirty
    user.skills = merge_outcome_skills(user.skills, course.learning_outcomes)
    return user.skills
