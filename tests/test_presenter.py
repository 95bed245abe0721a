"""
Tests for the progress presenter views.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from inspira.courses import catalog
from inspira.courses.models import CourseCreate
from inspira.errors import NotFoundError
from inspira.learners import profiles
from inspira.progress import presenter

C1 = str(ObjectId())
C2 = str(ObjectId())
GONE = str(ObjectId())

COURSES = {
    C1: {"_id": ObjectId(C1), "title": "Algebra", "subject": "Math"},
    C2: {"_id": ObjectId(C2), "title": "History", "subject": ""},
}

T0 = datetime(2025, 1, 5, 12, 0, tzinfo=timezone.utc)


def record(course_id, score, days):
    return {"course_id": course_id, "score": score, "completed_at": T0 + timedelta(days=days)}


class TestAggregateByCourse:

    def test_average_of_repeats(self):
        view = presenter.aggregate_by_course([record(C1, 80, 0), record(C1, 100, 1)], COURSES)
        assert view == [{"course_id": C1, "course_label": "Algebra", "average_score": 90, "completions": 2}]

    def test_discovery_order(self):
        completions = [record(C2, 50, 3), record(C1, 70, 2), record(C2, 100, 1)]
        view = presenter.aggregate_by_course(completions, COURSES)
        assert [v["course_label"] for v in view] == ["History", "Algebra"]
        assert view[0]["average_score"] == 75

    def test_unresolved_course_gets_placeholder(self):
        view = presenter.aggregate_by_course([record(GONE, 40, 0)], COURSES)
        assert view[0]["course_label"] == "Unnamed Course"

    def test_empty_history(self):
        assert presenter.aggregate_by_course([], COURSES) == []


class TestChronologicalTrend:

    def test_sorted_ascending_regardless_of_input(self):
        completions = [record(C1, 30, 2), record(C2, 10, 0), record(C1, 20, 1)]
        trend = presenter.chronological_trend(completions, COURSES)
        assert [p["score"] for p in trend] == [10, 20, 30]
        assert [p["completed_at"] for p in trend] == sorted(p["completed_at"] for p in trend)

    def test_one_point_per_record(self):
        completions = [record(C1, 50, 0), record(C1, 50, 0)]
        assert len(presenter.chronological_trend(completions)) == 2

    def test_labels(self):
        trend = presenter.chronological_trend([record(GONE, 70, 0)])
        assert trend[0]["timestamp_label"] == "05 Jan 2025"
        assert trend[0]["course_label"] == "Unnamed Course"

    def test_naive_timestamps_treated_as_utc(self):
        naive = {"course_id": C1, "score": 1, "completed_at": datetime(2025, 1, 1)}
        aware = record(C1, 2, 0)
        trend = presenter.chronological_trend([aware, naive], COURSES)
        assert [p["score"] for p in trend] == [1, 2]


class TestCompletionRows:

    def test_placeholders(self):
        rows = presenter.completion_rows([record(C2, 60, 0), record(GONE, None, 1)], COURSES)
        assert rows[0] == {"course_id": C2, "course_name": "History", "subject": "Unknown", "score": 60}
        assert rows[1] == {"course_id": GONE, "course_name": "Unnamed Course", "subject": "Unknown", "score": 0}


@pytest.mark.asyncio
class TestLoadHistory:

    async def test_loads_completions_and_courses(self, db):
        course_id = await catalog.create_course(db, CourseCreate(title="Algebra"))
        await profiles.record_completion(db, "u1", course_id, 80)
        await profiles.record_completion(db, "u1", GONE, 50)

        completions, courses = await presenter.load_history(db, "u1")
        assert len(completions) == 2
        assert list(courses) == [course_id]

    async def test_missing_learner(self, db):
        with pytest.raises(NotFoundError):
            await presenter.load_history(db, "nobody")
