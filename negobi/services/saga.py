"""
Compensating Sequences
Multi-step remote updates with recorded undo actions
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Saga:
    """
    Records a compensation for every completed step

    Usage::

        saga = Saga("transfer 5 units")
        source = saga.step(lambda: deduct(), lambda result: restore(result))
        saga.step(lambda: add_to_destination())

    When a step raises, ``compensate`` runs the recorded undo actions in
    reverse order. Nothing here is transactional: a compensation that fails
    is logged and the saga reports that it could not be fully undone.
    """

    def __init__(self, name: str):
        self.name = name
        self._compensations: List[Tuple[str, Callable[[], Any]]] = []

    def step(
        self,
        action: Callable[[], Any],
        compensation: Optional[Callable[[Any], Any]] = None,
        description: str = "",
    ) -> Any:
        result = action()
        if compensation is not None:
            self._compensations.append(
                (description or f"step {len(self._compensations) + 1}", lambda: compensation(result))
            )
        return result

    def compensate(self) -> bool:
        """Undo completed steps newest first; False if any undo failed"""
        fully_undone = True
        while self._compensations:
            description, undo = self._compensations.pop()
            try:
                undo()
                logger.warning("Saga '%s': compensated %s", self.name, description)
            except Exception as e:
                fully_undone = False
                logger.error("Saga '%s': compensation of %s failed: %s", self.name, description, e)
        return fully_undone
