"""
Progress Presenter
Display-ready views over a learner's completion history.
A course that can no longer be resolved is shown as "Unnamed Course" instead of failing the view.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from inspira import config
from inspira.courses.catalog import find_courses_by_ids
from inspira.learners.profiles import get_profile

logger = logging.getLogger(__name__)

TREND_LABEL_FORMAT = "%d %b %Y"


def _course_label(course_id: str, courses: Mapping[str, dict]) -> str:
    course = courses.get(course_id)
    if not course or not course.get("title"):
        return config.UNNAMED_COURSE
    return course["title"]


def _completed_at(record: dict) -> datetime:
    value = record["completed_at"]
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def completion_rows(completions: List[dict], courses: Mapping[str, dict]) -> List[dict]:
    """One row per completion record, labelled with the course title and subject"""
    rows = []
    for record in completions:
        course_id = str(record["course_id"])
        course = courses.get(course_id) or {}
        rows.append({
            "course_id": course_id,
            "course_name": _course_label(course_id, courses),
            "subject": course.get("subject") or config.UNKNOWN_SUBJECT,
            "score": record.get("score") or 0,
        })
    return rows


def aggregate_by_course(completions: List[dict], courses: Mapping[str, dict]) -> List[dict]:
    """
    Mean score per course, first-seen course first
    e.g. two completions of C scoring 80 and 100 -> average_score 90
    """
    totals: Dict[str, Tuple[int, int]] = {}
    for record in completions:
        course_id = str(record["course_id"])
        total, count = totals.get(course_id, (0, 0))
        totals[course_id] = (total + (record.get("score") or 0), count + 1)

    return [
        {
            "course_id": course_id,
            "course_label": _course_label(course_id, courses),
            "average_score": total / count,
            "completions": count,
        }
        for course_id, (total, count) in totals.items()
    ]


def chronological_trend(completions: List[dict], courses: Mapping[str, dict] = None) -> List[dict]:
    """One point per completion record (repeats included), oldest first"""
    courses = courses or {}
    points = []
    for record in sorted(completions, key=_completed_at):
        completed_at = _completed_at(record)
        points.append({
            "timestamp_label": completed_at.strftime(TREND_LABEL_FORMAT),
            "completed_at": completed_at,
            "course_label": _course_label(str(record["course_id"]), courses),
            "score": record.get("score") or 0,
        })
    return points


async def load_history(db: AsyncIOMotorDatabase, user_id: str) -> Tuple[List[dict], Dict[str, dict]]:
    """A learner's completion records and the courses they reference"""
    profile = await get_profile(db, user_id)
    completions = profile.get("completed_courses", [])
    courses = await find_courses_by_ids(db, [str(c["course_id"]) for c in completions])

    missing = {str(c["course_id"]) for c in completions} - set(courses)
    if missing:
        logger.warning("User %s has completions for %d unresolved course(s)", user_id, len(missing))

    return completions, courses
