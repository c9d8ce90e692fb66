"""
Tests for Visit Service
Validation, scheduling conflicts, routes and statistics
"""

from datetime import datetime, timedelta, timezone

import pytest

from negobi.core.config import settings
from negobi.core.exceptions import ValidationError
from negobi.schemas.visits import Visit, VisitCreate, VisitLocation, VisitStatus
from negobi.services.visits import (
    VisitService,
    calculate_distance,
    calculate_route_distance,
    optimize_visit_route,
)

from tests.conftest import NOW

NEW_YORK = [-74.006, 40.7128]
PARIS = [2.3522, 48.8566]

TOMORROW_10 = datetime(2025, 6, 12, 10, 0, tzinfo=timezone.utc)


def make_visit(visit_id: int, when: datetime, coordinates) -> Visit:
    return Visit(
        id=visit_id,
        date=when,
        location=VisitLocation(coordinates=coordinates),
        status=VisitStatus.PENDING,
        description=f"visit {visit_id}",
    )


def seed_visit(backend, when: datetime, status: str = "pending", **fields):
    return backend.seed(
        "visits",
        date=when.isoformat(),
        location={"type": "Point", "coordinates": [-74.0, 40.7]},
        status=status,
        description="Scheduled visit",
        **fields,
    )


class TestVisitValidation:
    """Local validation reports every broken rule"""

    def test_valid_payload(self, visit_service, visit_payload):
        result = visit_service.validate_visit_data(visit_payload)
        assert result.is_valid is True
        assert result.errors == []

    def test_accepts_model_input(self, visit_service, visit_payload):
        assert visit_service.validate_visit_data(VisitCreate(**visit_payload)).is_valid is True

    def test_description_length_limit(self, visit_service, visit_payload):
        visit_payload["description"] = "x" * 500
        assert visit_service.validate_visit_data(visit_payload).is_valid is True

        visit_payload["description"] = "x" * 501
        result = visit_service.validate_visit_data(visit_payload)
        assert result.is_valid is False
        assert result.errors == ["Description cannot exceed 500 characters"]

    def test_all_errors_are_reported(self, visit_service, visit_payload):
        visit_payload["date"] = (NOW - timedelta(days=1)).isoformat()
        visit_payload["location"]["coordinates"] = [200, 40]
        visit_payload["description"] = "   "
        result = visit_service.validate_visit_data(visit_payload)
        assert result.errors == [
            "Visit date cannot be in the past",
            "Longitude must be between -180 and 180",
            "Visit description is required",
        ]

    def test_missing_fields(self, visit_service):
        result = visit_service.validate_visit_data({})
        assert result.errors == [
            "Visit date is required",
            "Location is required",
            "Visit status is required",
            "Visit description is required",
        ]

    def test_bad_coordinates(self, visit_service, visit_payload):
        visit_payload["location"]["coordinates"] = [1, 2, 3]
        result = visit_service.validate_visit_data(visit_payload)
        assert result.errors == ["Location coordinates must be [longitude, latitude]"]

        visit_payload["location"]["coordinates"] = [10, -95]
        result = visit_service.validate_visit_data(visit_payload)
        assert result.errors == ["Latitude must be between -90 and 90"]

    def test_unparseable_payload(self, visit_service, visit_payload):
        visit_payload["status"] = "postponed"
        result = visit_service.validate_visit_data(visit_payload)
        assert result.is_valid is False
        assert result.errors[0].startswith("status")

    def test_invalid_visit_is_not_sent(self, visit_service, backend, visit_payload):
        visit_payload["description"] = ""
        with pytest.raises(ValidationError) as exc_info:
            visit_service.create_validated_visit(visit_payload)
        assert exc_info.value.errors == ["Visit description is required"]
        assert backend.calls("POST", "visits") == []

    def test_valid_visit_is_created(self, visit_service, backend, visit_payload):
        visit = visit_service.create_validated_visit(visit_payload)
        assert visit.client_id == 7
        assert backend.get("visits", visit.id)["clientId"] == 7


class TestVisitRoutes:
    """Distances and greedy route ordering"""

    def test_new_york_to_paris(self):
        assert calculate_distance(NEW_YORK, PARIS) == pytest.approx(5837, rel=0.01)

    def test_same_point(self):
        assert calculate_distance(PARIS, PARIS) == 0

    def test_distance_is_symmetric(self):
        assert calculate_distance(NEW_YORK, PARIS) == calculate_distance(PARIS, NEW_YORK)

    def test_short_routes_unchanged(self):
        assert optimize_visit_route([]) == []
        single = [make_visit(1, TOMORROW_10, [0, 0])]
        assert optimize_visit_route(single) == single

    def test_nearest_neighbour_from_earliest(self):
        first = make_visit(1, TOMORROW_10, [0, 0])
        far = make_visit(2, TOMORROW_10 + timedelta(hours=1), [10, 0])
        near = make_visit(3, TOMORROW_10 + timedelta(hours=2), [1, 0])
        route = optimize_visit_route([far, near, first])
        assert [visit.id for visit in route] == [1, 3, 2]

    def test_route_distance(self):
        visits = [
            make_visit(1, TOMORROW_10, [0, 0]),
            make_visit(2, TOMORROW_10, [1, 0]),
            make_visit(3, TOMORROW_10, [10, 0]),
        ]
        expected = calculate_distance([0, 0], [1, 0]) + calculate_distance([1, 0], [10, 0])
        assert calculate_route_distance(visits) == pytest.approx(expected)
        assert calculate_route_distance(visits[:1]) == 0

    def test_visit_without_location_cannot_be_routed(self):
        located = make_visit(1, TOMORROW_10, [0, 0])
        unlocated = Visit(id=2, date=TOMORROW_10, status=VisitStatus.PENDING, description="visit 2")

        with pytest.raises(ValidationError) as exc_info:
            optimize_visit_route([located, unlocated])
        assert exc_info.value.errors == ["Visits without a location cannot be routed: 2"]

        with pytest.raises(ValidationError):
            calculate_route_distance([located, unlocated])

    def test_single_visit_without_location(self):
        unlocated = Visit(id=2, date=TOMORROW_10, status=VisitStatus.PENDING, description="visit 2")
        assert optimize_visit_route([unlocated]) == [unlocated]
        assert calculate_route_distance([unlocated]) == 0


class TestScheduleConflicts:
    """Overlap against existing visits, assumed to last one hour"""

    def test_overlapping_start(self, visit_service, backend):
        existing = seed_visit(backend, TOMORROW_10)
        conflicts = visit_service.find_schedule_conflicts(TOMORROW_10 + timedelta(minutes=30))
        assert [visit.id for visit in conflicts] == [existing["id"]]

    def test_overlapping_end(self, visit_service, backend):
        seed_visit(backend, TOMORROW_10)
        assert visit_service.check_schedule_conflict(TOMORROW_10 - timedelta(minutes=30)) is True

    def test_enclosing_slot(self, visit_service, backend):
        seed_visit(backend, TOMORROW_10)
        assert visit_service.check_schedule_conflict(TOMORROW_10 - timedelta(minutes=30), duration=180) is True

    def test_back_to_back_is_free(self, visit_service, backend):
        seed_visit(backend, TOMORROW_10)
        assert visit_service.check_schedule_conflict(TOMORROW_10 + timedelta(hours=1)) is False
        assert visit_service.check_schedule_conflict(TOMORROW_10 - timedelta(hours=1)) is False

    def test_excluded_visit(self, visit_service, backend):
        existing = seed_visit(backend, TOMORROW_10)
        assert visit_service.check_schedule_conflict(TOMORROW_10, exclude_visit_id=existing["id"]) is False

    def test_range_filter_is_sent(self, visit_service, backend):
        visit_service.find_schedule_conflicts(TOMORROW_10)
        params = backend.calls("GET", "visits")[-1]["params"]
        assert "date_from" in params and "date_to" in params


class TestVisitUpdates:
    """Status and schedule changes"""

    def test_mark_completed_and_cancelled(self, visit_service, backend):
        visit = seed_visit(backend, TOMORROW_10)
        assert visit_service.mark_visit_as_completed(visit["id"]).status == VisitStatus.COMPLETED
        assert visit_service.mark_visit_as_cancelled(visit["id"]).status == VisitStatus.CANCELLED
        assert backend.get("visits", visit["id"])["status"] == "cancelled"

    def test_reschedule(self, visit_service, backend):
        visit = seed_visit(backend, TOMORROW_10)
        updated = visit_service.reschedule_visit(visit["id"], TOMORROW_10 + timedelta(days=2))
        assert updated.date == TOMORROW_10 + timedelta(days=2)

    def test_calendar_range(self, visit_service, backend):
        inside = seed_visit(backend, TOMORROW_10)
        seed_visit(backend, TOMORROW_10 + timedelta(days=40))
        visits = visit_service.get_visits_for_calendar(TOMORROW_10 - timedelta(days=1), TOMORROW_10 + timedelta(days=1))
        assert [visit.id for visit in visits] == [inside["id"]]

    def test_lookups(self, visit_service, backend):
        seed_visit(backend, TOMORROW_10, clientId=7)
        seed_visit(backend, TOMORROW_10 + timedelta(days=10), status="completed", clientId=8)
        assert len(visit_service.get_visits_by_client(7)) == 1
        assert len(visit_service.get_visits_by_status("completed")) == 1
        assert len(visit_service.get_upcoming_visits()) == 1
        assert len(visit_service.get_upcoming_visits(days=30)) == 2


class TestVisitStatistics:
    """Counts by status and calendar period"""

    def test_statistics(self, visit_service, backend):
        seed_visit(backend, NOW + timedelta(hours=3))
        seed_visit(backend, datetime(2025, 6, 9, 9, 0, tzinfo=timezone.utc), status="completed")
        seed_visit(backend, datetime(2025, 6, 20, 9, 0, tzinfo=timezone.utc), status="cancelled")
        seed_visit(backend, datetime(2025, 5, 30, 9, 0, tzinfo=timezone.utc))

        stats = visit_service.get_visit_statistics()

        assert stats.total == 4
        assert stats.pending == 2
        assert stats.completed == 1
        assert stats.cancelled == 1
        assert stats.today == 1
        assert stats.this_week == 2
        assert stats.this_month == 3

    def test_statistics_with_default_workers(self, api_client, backend):
        service = VisitService(api_client, now=lambda: NOW)
        assert service.max_workers == settings.STATISTICS_MAX_WORKERS
        seed_visit(backend, NOW + timedelta(hours=3))
        seed_visit(backend, NOW + timedelta(hours=5), status="completed")
        seed_visit(backend, datetime(2025, 6, 20, 9, 0, tzinfo=timezone.utc), status="cancelled")

        stats = service.get_visit_statistics()

        assert (stats.total, stats.pending, stats.completed, stats.cancelled) == (3, 1, 1, 1)
        assert stats.today == 2
        assert stats.this_month == 3

    def test_statistics_without_visits(self, visit_service):
        stats = visit_service.get_visit_statistics()
        assert stats.total == 0
        assert stats.this_month == 0
