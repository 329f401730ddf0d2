"""
Machine service for reading machines and writing back their plans.

A machine row is the unit of storage: the in-progress job lives in its
columns and the plan in the `future_plans` JSON column. Writes always
replace the whole plan together with `last_updated`.
"""

from datetime import datetime
from typing import Optional
import structlog

from config import get_supabase_client
from models.machine import Machine
from models.work_item import WorkItem
from exceptions import DatabaseError, MachineNotFoundError

logger = structlog.get_logger(__name__)

# Live-state columns written when a planned item is started on a machine
STATE_COLUMNS = (
    "status",
    "client",
    "fabric",
    "order_reference",
    "order_name",
    "remaining_mfg",
    "day_production",
)


class MachineService:
    """
    Machine store access.

    Handles read operations for the roster and plan replacement.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "machines"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(self) -> list[Machine]:
        """
        Get every machine, in roster order.

        Returns:
            List of machines
        """
        logger.info("getting_all_machines")

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .order("id")
                .execute()
            )

            machines = [self._row_to_machine(row) for row in result.data]

            logger.info("machines_retrieved", count=len(machines))
            return machines

        except Exception as e:
            logger.error("get_all_machines_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, machine_id: str) -> Machine:
        """
        Get a single machine by ID.

        Args:
            machine_id: Machine identifier

        Returns:
            Machine

        Raises:
            MachineNotFoundError: If machine doesn't exist
        """
        logger.debug("getting_machine", machine_id=machine_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", machine_id)
                .execute()
            )

            if not result.data:
                raise MachineNotFoundError(machine_id)

            return self._row_to_machine(result.data[0])

        except MachineNotFoundError:
            raise
        except Exception as e:
            logger.error("get_machine_failed", machine_id=machine_id, error=str(e))
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def save_plans(self, machine_id: str, plans: list[WorkItem]) -> Machine:
        """
        Replace a machine's plan.

        Args:
            machine_id: Machine identifier
            plans: Recalculated work items, stored verbatim

        Returns:
            Updated machine

        Raises:
            MachineNotFoundError: If machine doesn't exist
        """
        logger.info("saving_machine_plans", machine_id=machine_id, items=len(plans))

        return self._update(machine_id, {
            "future_plans": [plan.model_dump(mode="json") for plan in plans],
            "last_updated": datetime.utcnow().isoformat(),
        })

    def save_state(self, machine: Machine) -> Machine:
        """
        Write a machine's live state and plan in one update.

        Used when a planned item is started, which moves it out of the
        plan and into the machine's in-progress columns.
        """
        logger.info(
            "saving_machine_state",
            machine_id=machine.id,
            status=machine.status.value,
            items=len(machine.future_plans)
        )

        data = machine.model_dump(mode="json", include=set(STATE_COLUMNS))
        data["future_plans"] = [plan.model_dump(mode="json") for plan in machine.future_plans]
        data["last_updated"] = datetime.utcnow().isoformat()

        return self._update(machine.id, data)

    def _update(self, machine_id: str, data: dict) -> Machine:
        try:
            result = (
                self.db.table(self.table)
                .update(data)
                .eq("id", machine_id)
                .execute()
            )

            if not result.data:
                raise MachineNotFoundError(machine_id)

            logger.info("machine_updated", machine_id=machine_id, fields=sorted(data))
            return self._row_to_machine(result.data[0])

        except MachineNotFoundError:
            raise
        except Exception as e:
            logger.error("update_machine_failed", machine_id=machine_id, error=str(e))
            raise DatabaseError("update", str(e))

    def _row_to_machine(self, row: dict) -> Machine:
        """Convert database row to Machine."""
        return Machine(
            id=row["id"],
            name=row.get("name"),
            machine_type=row.get("machine_type"),
            construction_class=row.get("construction_class"),
            status=row.get("status"),
            client=row.get("client"),
            fabric=row.get("fabric"),
            daily_rate=row.get("daily_rate"),
            day_production=row.get("day_production"),
            remaining_mfg=row.get("remaining_mfg"),
            gauge=row.get("gauge"),
            diameter=row.get("diameter"),
            order_reference=row.get("order_reference"),
            order_name=row.get("order_name"),
            future_plans=row.get("future_plans") or [],
            last_updated=row.get("last_updated"),
        )


# Singleton instance
_service: Optional[MachineService] = None


def get_machine_service() -> MachineService:
    """Get or create MachineService instance."""
    global _service
    if _service is None:
        _service = MachineService()
    return _service
