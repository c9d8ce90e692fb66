"""
Visit API Endpoints
Validation, scheduling checks, route ordering and statistics
"""

from fastapi import APIRouter, Depends, status

from negobi.api.deps import get_visit_service
from negobi.schemas.visits import (
    DistanceRequest,
    DistanceResponse,
    RouteRequest,
    RouteResponse,
    ScheduleConflictRequest,
    ScheduleConflictResponse,
    Visit,
    VisitCreate,
    VisitStatistics,
    VisitValidationResult,
)
from negobi.services.visits import VisitService

router = APIRouter()


@router.post("/validate", response_model=VisitValidationResult)
def validate_visit(visit: VisitCreate, service: VisitService = Depends(get_visit_service)):
    """Report every broken rule of a visit without creating it"""
    return service.validate_visit_data(visit)


@router.post("/", response_model=Visit, status_code=status.HTTP_201_CREATED)
def create_visit(visit: VisitCreate, service: VisitService = Depends(get_visit_service)):
    """Create a visit after local validation (422 with the broken rules otherwise)"""
    return service.create_validated_visit(visit)


@router.post("/conflicts", response_model=ScheduleConflictResponse)
def check_conflicts(request: ScheduleConflictRequest, service: VisitService = Depends(get_visit_service)):
    conflicts = service.find_schedule_conflicts(request.date, request.duration, request.exclude_visit_id)
    return ScheduleConflictResponse(has_conflict=bool(conflicts), conflicts=conflicts)


@router.post("/route", response_model=RouteResponse)
def optimize_route(request: RouteRequest, service: VisitService = Depends(get_visit_service)):
    visits = [service.get_by_id(visit_id) for visit_id in request.visit_ids]
    route = service.optimize_visit_route(visits)
    return RouteResponse(visits=route, total_distance_km=service.calculate_route_distance(route))


@router.post("/distance", response_model=DistanceResponse)
def calculate_distance(request: DistanceRequest, service: VisitService = Depends(get_visit_service)):
    return DistanceResponse(distance_km=service.calculate_distance(request.origin, request.destination))


@router.get("/statistics", response_model=VisitStatistics)
def get_statistics(service: VisitService = Depends(get_visit_service)):
    return service.get_visit_statistics()
