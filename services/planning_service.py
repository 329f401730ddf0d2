"""
Planning service: edits to a machine's plan, end to end.

Every edit follows the same path:

    load machine + active day → mutation helper (recalculates) → save plan

Positions are validated here, before the helpers run, so a request for a
row that does not exist is rejected instead of silently ignored.
"""

from datetime import date
from typing import Any, Callable, Optional
import structlog

from models.fabric import FabricDefinition
from models.machine import Machine, MachineSummary
from models.work_item import WorkItem, WorkItemCreate, WorkItemKind, WorkItemUpdate
from services import plan_mutations
from services.schedule_engine import (
    recalculate_schedule,
    total_planned_quantity,
    plan_end_date,
)
from services.machine_service import get_machine_service
from services.fabric_service import get_fabric_service
from services.settings_service import get_settings_service
from exceptions import WorkItemNotFoundError

logger = structlog.get_logger(__name__)

PlanTransform = Callable[[list[WorkItem], Machine, date], list[WorkItem]]


class PlanningService:
    """
    Plan editing business logic.

    Wraps the pure mutation helpers with loading, validation and
    persistence.
    """

    def __init__(self):
        self.machine_service = get_machine_service()
        self.fabric_service = get_fabric_service()
        self.settings_service = get_settings_service()

    # ===================
    # READ OPERATIONS
    # ===================

    def list_machines(self) -> list[Machine]:
        """Get every machine with its stored plan."""
        return self.machine_service.get_all()

    def get_summary(self, machine_id: str) -> MachineSummary:
        """
        Get a machine with headline figures of its plan.

        The plan is recalculated on the fly (not saved) so the end date
        reflects the current active day.
        """
        machine = self.machine_service.get_by_id(machine_id)
        active_day = self.settings_service.get_active_day()
        plans = recalculate_schedule(machine.future_plans, machine, active_day)

        return MachineSummary(
            machine=machine.model_copy(update={"future_plans": plans}),
            planned_quantity=total_planned_quantity(plans),
            plan_end_date=plan_end_date(plans),
        )

    # ===================
    # PLAN EDITS
    # ===================

    def recalculate(self, machine_id: str) -> Machine:
        """Re-run the schedule for a machine and save the result."""
        return self._apply(
            machine_id,
            "recalculate",
            lambda items, machine, day: recalculate_schedule(items, machine, day),
        )

    def add_item(self, machine_id: str, data: WorkItemCreate) -> Machine:
        """
        Append a work item.

        Fields left out of the request take the blank-row defaults for the
        requested kind. A production row without a rate gets the fabric's
        rate on the machine when the fabric is on file.
        """
        fabric = None
        if data.kind == WorkItemKind.PRODUCTION and not data.rate:
            fabric = self._find_fabric(data.fabric)

        def transform(items: list[WorkItem], machine: Machine, day: date) -> list[WorkItem]:
            item = plan_mutations.new_work_item(machine, data.kind, fabric)
            fields = data.model_dump(exclude_unset=True, exclude={"kind"}, exclude_none=True)
            if fields:
                item = WorkItem.model_validate({**item.model_dump(), **fields})
            return plan_mutations.append_item(items, item, machine, day)

        return self._apply(machine_id, "add_item", transform, kind=data.kind.value)

    def add_parsed_item(self, machine_id: str, parsed: Optional[dict[str, Any]]) -> Machine:
        """Append the plan-parsing assistant's candidate (no-op on "no match")."""
        fabric = self._find_fabric(parsed.get("fabric")) if parsed else None
        return self._apply(
            machine_id,
            "add_parsed_item",
            lambda items, machine, day: plan_mutations.append_parsed_item(
                items, parsed, machine, day, fabric
            ),
            matched=bool(parsed),
        )

    def update_item(self, machine_id: str, index: int, data: WorkItemUpdate) -> Machine:
        """Edit fields of the item at index."""
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        return self._apply(
            machine_id,
            "update_item",
            lambda items, machine, day: plan_mutations.update_item(items, index, changes, machine, day),
            indexes=(index,),
            fields=sorted(changes),
        )

    def delete_item(self, machine_id: str, index: int) -> Machine:
        """Remove the item at index."""
        return self._apply(
            machine_id,
            "delete_item",
            lambda items, machine, day: plan_mutations.remove_item(items, index, machine, day),
            indexes=(index,),
        )

    def move_item_up(self, machine_id: str, index: int) -> Machine:
        """Swap the item at index with the previous one."""
        return self._apply(
            machine_id,
            "move_item_up",
            lambda items, machine, day: plan_mutations.move_item_up(items, index, machine, day),
            indexes=(index,),
        )

    def move_item_down(self, machine_id: str, index: int) -> Machine:
        """Swap the item at index with the next one."""
        return self._apply(
            machine_id,
            "move_item_down",
            lambda items, machine, day: plan_mutations.move_item_down(items, index, machine, day),
            indexes=(index,),
        )

    def reorder_item(self, machine_id: str, from_index: int, to_index: int) -> Machine:
        """Drag the item at from_index to to_index."""
        return self._apply(
            machine_id,
            "reorder_item",
            lambda items, machine, day: plan_mutations.move_item(
                items, from_index, to_index, machine, day
            ),
            indexes=(from_index, to_index),
        )

    def activate_item(self, machine_id: str, index: int) -> Machine:
        """
        Start the item at index on the machine.

        Writes the machine's live state and the shortened plan together.
        """
        machine = self.machine_service.get_by_id(machine_id)
        self._check_index(machine, index)
        active_day = self.settings_service.get_active_day()

        activated = plan_mutations.activate_item(machine, index, active_day)

        logger.info(
            "work_item_activated",
            machine_id=machine_id,
            index=index,
            fabric=activated.fabric,
            client=activated.client,
            remaining_mfg=activated.remaining_mfg,
        )

        return self.machine_service.save_state(activated)

    # ===================
    # HELPERS
    # ===================

    def _find_fabric(self, name: Any) -> Optional[FabricDefinition]:
        if not name or not isinstance(name, str):
            return None
        return self.fabric_service.find_by_name(name)

    def _check_index(self, machine: Machine, index: int) -> None:
        if not 0 <= index < len(machine.future_plans):
            raise WorkItemNotFoundError(machine.id, index, len(machine.future_plans))

    def _apply(
        self,
        machine_id: str,
        operation: str,
        transform: PlanTransform,
        indexes: tuple[int, ...] = (),
        **log_context: Any,
    ) -> Machine:
        """Load, validate, transform and save a machine's plan."""
        machine = self.machine_service.get_by_id(machine_id)
        for index in indexes:
            self._check_index(machine, index)

        active_day = self.settings_service.get_active_day()
        plans = transform(machine.future_plans, machine, active_day)

        logger.info(
            "plan_updated",
            machine_id=machine_id,
            operation=operation,
            items=len(plans),
            active_day=active_day.isoformat(),
            **log_context,
        )

        return self.machine_service.save_plans(machine_id, plans)


# Singleton instance
_planning_service: Optional[PlanningService] = None


def get_planning_service() -> PlanningService:
    """Get or create PlanningService instance."""
    global _planning_service
    if _planning_service is None:
        _planning_service = PlanningService()
    return _planning_service
