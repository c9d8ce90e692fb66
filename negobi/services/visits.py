"""
Visit Service
Field visits: local validation, scheduling, route ordering and statistics
"""
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from negobi.core.config import settings
from negobi.core.dates import day_bounds, ensure_aware, month_bounds, to_iso, utc_now, week_bounds
from negobi.core.exceptions import ValidationError
from negobi.core.logging import get_logger
from negobi.schemas.visits import (
    Visit,
    VisitCreate,
    VisitStatistics,
    VisitStatus,
    VisitValidationResult,
)
from negobi.schemas.common import validation_messages
from .base import ResourceService

logger = get_logger("visits")

EARTH_RADIUS_KM = 6371
Coordinates = Sequence[float]


def calculate_distance(origin: Coordinates, destination: Coordinates) -> float:
    """
    Great-circle distance in km between two ``[lon, lat]`` points

    Haversine formula on a spherical earth, rounded to 2 decimals.
    """
    lon1, lat1 = origin[0], origin[1]
    lon2, lat2 = destination[0], destination[1]

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 2)


def optimize_visit_route(visits: List[Visit]) -> List[Visit]:
    """
    Order visits by greedy nearest neighbour

    Starts from the earliest visit; each next stop is the closest one not yet
    visited (ties keep date order). Not an optimal tour.

    Raises:
        ValidationError: a visit has no location
    """
    if len(visits) <= 1:
        return visits
    _require_locations(visits)

    remaining = sorted(visits, key=lambda visit: _visit_timestamp(visit))
    route = [remaining.pop(0)]

    while remaining:
        last = route[-1]
        closest_index = 0
        closest_distance = math.inf
        for index, visit in enumerate(remaining):
            distance = calculate_distance(last.location.coordinates, visit.location.coordinates)
            if distance < closest_distance:
                closest_distance = distance
                closest_index = index
        route.append(remaining.pop(closest_index))

    return route


def calculate_route_distance(visits: List[Visit]) -> float:
    """Sum of the legs between consecutive visits"""
    if len(visits) > 1:
        _require_locations(visits)
    total = sum(
        calculate_distance(current.location.coordinates, following.location.coordinates)
        for current, following in zip(visits, visits[1:])
    )
    return round(total, 2)


def _visit_timestamp(visit: Visit) -> float:
    return visit.date.timestamp() if visit.date else math.inf


def _require_locations(visits: List[Visit]) -> None:
    missing = [visit.id for visit in visits if visit.location is None or len(visit.location.coordinates) < 2]
    if missing:
        ids = ", ".join(str(visit_id) for visit_id in missing)
        raise ValidationError(f"Visits without a location cannot be routed: {ids}")


class VisitService(ResourceService[Visit]):
    """
    Field visits

    Filters: date_from, date_to, status, description, clientId.
    """

    path = "/visits"
    model = Visit
    resource_name = "visit"

    def __init__(self, client, now=None, max_workers: Optional[int] = None):
        super().__init__(client)
        self._now = now or utc_now
        self.max_workers = max_workers or settings.STATISTICS_MAX_WORKERS

    def now(self) -> datetime:
        return ensure_aware(self._now())

    # Validation

    def validate_visit_data(self, data: Union[VisitCreate, Dict[str, Any]]) -> VisitValidationResult:
        """
        Check a visit before it is sent

        Every broken rule is reported, not only the first one.
        """
        if not isinstance(data, VisitCreate):
            try:
                data = VisitCreate.model_validate(data)
            except PydanticValidationError as e:
                return VisitValidationResult(is_valid=False, errors=validation_messages(e))

        errors: List[str] = []

        if data.date is None:
            errors.append("Visit date is required")
        elif data.date < self.now():
            errors.append("Visit date cannot be in the past")

        if data.location is None or not data.location.coordinates:
            errors.append("Location is required")
        elif len(data.location.coordinates) != 2:
            errors.append("Location coordinates must be [longitude, latitude]")
        else:
            longitude, latitude = data.location.coordinates
            if not -180 <= longitude <= 180:
                errors.append("Longitude must be between -180 and 180")
            if not -90 <= latitude <= 90:
                errors.append("Latitude must be between -90 and 90")

        if data.status is None:
            errors.append("Visit status is required")

        max_length = settings.VISIT_DESCRIPTION_MAX_LENGTH
        if not data.description or not data.description.strip():
            errors.append("Visit description is required")
        elif len(data.description) > max_length:
            errors.append(f"Description cannot exceed {max_length} characters")

        return VisitValidationResult(is_valid=not errors, errors=errors)

    def create_validated_visit(self, data: Union[VisitCreate, Dict[str, Any]]) -> Visit:
        """Validate locally, then create; nothing is sent when a rule is broken"""
        result = self.validate_visit_data(data)
        if not result.is_valid:
            raise ValidationError("; ".join(result.errors), errors=result.errors)
        return self.create(data)

    # Lookups

    def get_visits_by_status(self, status: Union[VisitStatus, str]) -> List[Visit]:
        return self.fetch_all(status=VisitStatus(status))

    def get_visits_by_client(self, client_id: int) -> List[Visit]:
        return self.fetch_all(clientId=client_id)

    def get_visits_by_date_range(self, start: datetime, end: datetime) -> List[Visit]:
        return self.fetch_all(date_from=to_iso(start), date_to=to_iso(end))

    def get_visits_for_calendar(self, start: datetime, end: datetime) -> List[Visit]:
        return self.get_visits_by_date_range(start, end)

    def get_today_visits(self) -> List[Visit]:
        return self.get_visits_by_date_range(*day_bounds(self.now()))

    def get_upcoming_visits(self, days: Optional[int] = None) -> List[Visit]:
        days = settings.VISIT_UPCOMING_DAYS if days is None else days
        now = self.now()
        return self.get_visits_by_date_range(now, now + timedelta(days=days))

    # Status and schedule changes

    def update_visit_status(self, visit_id: int, status: Union[VisitStatus, str]) -> Visit:
        visit = self.update(visit_id, {"status": VisitStatus(status).value})
        logger.info("Visit %s marked %s", visit_id, VisitStatus(status).value)
        return visit

    def mark_visit_as_completed(self, visit_id: int) -> Visit:
        return self.update_visit_status(visit_id, VisitStatus.COMPLETED)

    def mark_visit_as_cancelled(self, visit_id: int) -> Visit:
        return self.update_visit_status(visit_id, VisitStatus.CANCELLED)

    def reschedule_visit(self, visit_id: int, new_date: datetime) -> Visit:
        return self.update(visit_id, {"date": to_iso(new_date)})

    # Conflicts

    def find_schedule_conflicts(
        self,
        date: datetime,
        duration: Optional[int] = None,
        exclude_visit_id: Optional[int] = None,
    ) -> List[Visit]:
        """
        Visits overlapping ``[date, date + duration)``

        Candidates are fetched within a window of VISIT_CONFLICT_WINDOW_HOURS
        around the slot. Existing visits are taken to last
        VISIT_ASSUMED_DURATION_MINUTES whatever ``duration`` is.
        """
        duration = settings.VISIT_DEFAULT_DURATION_MINUTES if duration is None else duration
        start = ensure_aware(date)
        end = start + timedelta(minutes=duration)
        window = timedelta(hours=settings.VISIT_CONFLICT_WINDOW_HOURS)
        occupied = timedelta(minutes=settings.VISIT_ASSUMED_DURATION_MINUTES)

        conflicts = []
        for visit in self.get_visits_by_date_range(start - window, end + window):
            if exclude_visit_id is not None and visit.id == exclude_visit_id:
                continue
            if visit.date is None:
                continue
            existing_start = visit.date
            existing_end = existing_start + occupied
            if (
                existing_start <= start < existing_end
                or existing_start < end <= existing_end
                or (start <= existing_start and end >= existing_end)
            ):
                conflicts.append(visit)
        return conflicts

    def check_schedule_conflict(
        self,
        date: datetime,
        duration: Optional[int] = None,
        exclude_visit_id: Optional[int] = None,
    ) -> bool:
        return bool(self.find_schedule_conflicts(date, duration, exclude_visit_id))

    # Routes

    calculate_distance = staticmethod(calculate_distance)
    calculate_route_distance = staticmethod(calculate_route_distance)
    optimize_visit_route = staticmethod(optimize_visit_route)

    # Statistics

    def get_visit_statistics(self) -> VisitStatistics:
        """
        Counts by status and by calendar period

        The five list requests run in parallel; week and month counts are
        taken from the full list.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            all_future = executor.submit(self.fetch_all)
            pending_future = executor.submit(self.get_visits_by_status, VisitStatus.PENDING)
            completed_future = executor.submit(self.get_visits_by_status, VisitStatus.COMPLETED)
            cancelled_future = executor.submit(self.get_visits_by_status, VisitStatus.CANCELLED)
            today_future = executor.submit(self.get_today_visits)

            all_visits = all_future.result()
            pending = pending_future.result()
            completed = completed_future.result()
            cancelled = cancelled_future.result()
            today = today_future.result()

        now = self.now()
        week_start, week_end = week_bounds(now)
        month_start, month_end = month_bounds(now)

        def count_between(start: datetime, end: datetime) -> int:
            return sum(1 for visit in all_visits if visit.date and start <= visit.date <= end)

        return VisitStatistics(
            total=len(all_visits),
            pending=len(pending),
            completed=len(completed),
            cancelled=len(cancelled),
            today=len(today),
            this_week=count_between(week_start, week_end),
            this_month=count_between(month_start, month_end),
        )

    def create_multiple_visits(self, items) -> List[Visit]:
        return self.create_many(items)
