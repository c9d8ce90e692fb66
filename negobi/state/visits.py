"""Visit state"""
from typing import Any, Dict, List, Optional, Union

from negobi.core.exceptions import BusinessLogicError
from negobi.schemas.visits import Visit, VisitCreate, VisitStatistics, VisitStatus
from negobi.services.visits import VisitService
from .base import ResourceState

SCHEDULE_CONFLICT_MESSAGE = "A visit is already scheduled at this time"


class VisitsState(ResourceState[Visit]):
    service_class = VisitService
    service: VisitService

    def __init__(self, client=None, default_filters=None, service=None):
        super().__init__(client, default_filters, service)
        self.statistics: Optional[VisitStatistics] = None

    def load_by_status(self, status: VisitStatus) -> List[Visit]:
        try:
            status = VisitStatus(status)
        except ValueError:
            self._fail_validation([f"Unknown visit status: {status}"])
            self.items = []
            return []
        return self.load(status=status)

    def load_by_client(self, client_id: int) -> List[Visit]:
        return self.load(clientId=client_id)

    def create(self, data: Union[VisitCreate, Dict[str, Any]]) -> Optional[Visit]:
        """
        Validate, check the schedule, then create

        Broken rules are reported without touching the backend.
        """
        self.error = None
        validation = self.service.validate_visit_data(data)
        if not validation.is_valid:
            self._fail_validation(validation.errors)
            return None
        if not isinstance(data, VisitCreate):
            data = VisitCreate.model_validate(data)

        def action():
            if self.service.check_schedule_conflict(data.date):
                raise BusinessLogicError(SCHEDULE_CONFLICT_MESSAGE)
            visit = self.service.create(data)
            self.items.append(visit)
            return visit

        return self._run(action)

    def _set_status(self, visit_id: int, status: VisitStatus) -> Optional[Visit]:
        def action():
            visit = self.service.update_visit_status(visit_id, status)
            self._replace(visit)
            return visit

        return self._run(action)

    def mark_completed(self, visit_id: int) -> Optional[Visit]:
        return self._set_status(visit_id, VisitStatus.COMPLETED)

    def mark_cancelled(self, visit_id: int) -> Optional[Visit]:
        return self._set_status(visit_id, VisitStatus.CANCELLED)

    def _set_status_many(self, visit_ids: List[int], status: VisitStatus) -> bool:
        errors = []
        for visit_id in visit_ids:
            if self._set_status(visit_id, status) is None:
                errors.append(f"Visit {visit_id}: {self.error}")
        self.error = "; ".join(errors) if errors else None
        return not errors

    def complete_multiple(self, visit_ids: List[int]) -> bool:
        """True only when every visit was updated; failures do not stop the others"""
        return self._set_status_many(visit_ids, VisitStatus.COMPLETED)

    def cancel_multiple(self, visit_ids: List[int]) -> bool:
        return self._set_status_many(visit_ids, VisitStatus.CANCELLED)

    def reschedule(self, visit_id: int, new_date) -> Optional[Visit]:
        def action():
            visit = self.service.reschedule_visit(visit_id, new_date)
            self._replace(visit)
            return visit

        return self._run(action)

    def load_statistics(self) -> Optional[VisitStatistics]:
        self.statistics = self._run(self.service.get_visit_statistics)
        return self.statistics

    def optimized_route(self) -> List[Visit]:
        """Loaded visits in greedy nearest-neighbour order"""
        return self._run(lambda: self.service.optimize_visit_route(list(self.items)), fallback=[])
