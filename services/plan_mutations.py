"""
Plan mutation helpers.

Every edit the planning grid can make to a machine's plan: add a row,
delete it, nudge it up or down, drag it somewhere else, edit a field, or
start it on the machine. Each helper builds a new list and hands it
straight to the schedule engine, so what comes back is always fully
time-phased and ready to be saved as-is.

Out-of-range positions leave the order untouched; rejecting them is the
caller's job (see PlanningService).
"""

from datetime import date
from typing import Any, Optional
import structlog

from models.base import coerce_number
from models.fabric import FabricDefinition
from models.machine import Machine, MachineStatus
from models.work_item import WorkItem, WorkItemKind
from services.schedule_engine import recalculate_schedule

logger = structlog.get_logger(__name__)


def _in_range(items: list[WorkItem], index: int) -> bool:
    return 0 <= index < len(items)


def order_reference_for(client: str, fabric: str) -> str:
    """
    Generate an order reference from client and fabric initials.

    Examples:
        ("OR", "Single Jersey")      → "OR-SJ"
        ("Zara", "Rib 1x1-Lycra")    → "Zara-R1L"
    """
    initials = "".join(word[0] for word in fabric.replace("-", " ").split() if word)
    return f"{client}-{initials}"


def fabric_production_rate(fabric: Optional[FabricDefinition], machine: Machine) -> float:
    """
    Expected kg/day for a fabric on a machine.

    Picks the first that is set: the fabric's rate on this machine, the
    fabric's average, the machine's average.
    """
    if fabric is None:
        return machine.daily_rate
    override = fabric.machine_overrides.get(str(machine.id), 0)
    if override > 0:
        return override
    if fabric.avg_production_per_day > 0:
        return fabric.avg_production_per_day
    return machine.daily_rate


def new_work_item(
    machine: Machine,
    kind: WorkItemKind = WorkItemKind.PRODUCTION,
    fabric: Optional[FabricDefinition] = None,
) -> WorkItem:
    """
    Blank row for the planning grid.

    Production rows start at the fabric's rate on this machine when the
    fabric is known, else the machine's average; settings rows default to
    one day.
    """
    if kind == WorkItemKind.SETTINGS:
        return WorkItem(kind=kind, rate=0, days=1)
    return WorkItem(kind=kind, rate=fabric_production_rate(fabric, machine))


def append_item(
    items: list[WorkItem],
    item: WorkItem,
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """Add an item at the end of the plan."""
    return recalculate_schedule([*items, item], machine, active_day)


def remove_item(
    items: list[WorkItem],
    index: int,
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """Delete the item at index. Later items simply move up in time."""
    remaining = [item for i, item in enumerate(items) if i != index]
    return recalculate_schedule(remaining, machine, active_day)


def move_item(
    items: list[WorkItem],
    from_index: int,
    to_index: int,
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """
    Drag an item to a new position.

    The item is taken out and re-inserted at to_index (clamped to the end
    of the list).
    """
    reordered = list(items)
    if _in_range(reordered, from_index) and from_index != to_index and to_index >= 0:
        moved = reordered.pop(from_index)
        reordered.insert(min(to_index, len(reordered)), moved)
    return recalculate_schedule(reordered, machine, active_day)


def move_item_up(
    items: list[WorkItem],
    index: int,
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """Swap an item with the one before it."""
    if index <= 0:
        return recalculate_schedule(list(items), machine, active_day)
    return move_item(items, index, index - 1, machine, active_day)


def move_item_down(
    items: list[WorkItem],
    index: int,
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """Swap an item with the one after it."""
    if index >= len(items) - 1:
        return recalculate_schedule(list(items), machine, active_day)
    return move_item(items, index, index + 1, machine, active_day)


def update_item(
    items: list[WorkItem],
    index: int,
    changes: dict[str, Any],
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """
    Edit fields of one item.

    - A new quantity resets `remaining` to it (fresh, unconsumed run).
    - An explicit `remaining` marks the run as partially consumed.
    - A new client or fabric regenerates the order reference.
    """
    updated = list(items)
    if not _in_range(updated, index):
        return recalculate_schedule(updated, machine, active_day)

    current = updated[index]
    data = current.model_dump()
    data.update(changes)

    if "quantity" in changes and "remaining" not in changes:
        data["remaining"] = data["quantity"]
        data["partially_consumed"] = False
    if "remaining" in changes:
        data["partially_consumed"] = True

    if ("client" in changes or "fabric" in changes) and "order_reference" not in changes:
        client = str(data.get("client") or "").strip()
        fabric = str(data.get("fabric") or "").strip()
        if client and fabric:
            data["order_reference"] = order_reference_for(client, fabric)

    updated[index] = WorkItem.model_validate(data)
    return recalculate_schedule(updated, machine, active_day)


def item_from_parsed(
    parsed: Optional[dict[str, Any]],
    machine: Machine,
    fabric: Optional[FabricDefinition] = None,
) -> Optional[WorkItem]:
    """
    Turn the plan-parsing assistant's output into a work item.

    The assistant's record is untrusted and often partial: missing fields
    take their defaults and the kind is always PRODUCTION. A missing or
    zero rate falls back to the fabric's rate on this machine (see
    fabric_production_rate).

    Returns:
        WorkItem, or None when the assistant found no match
    """
    if not parsed:
        return None

    # Accept the assistant's camelCase names as well as our own
    aliases = {
        "productionPerDay": "rate",
        "orderName": "order_name",
        "orderReference": "order_reference",
        "orderId": "order_id",
        "fabricId": "fabric_id",
        "originalSampleMachine": "original_sample_machine",
    }
    data = {aliases.get(key, key): value for key, value in parsed.items()}
    allowed = set(WorkItem.model_fields) - {
        "start_date", "end_date", "days", "changeover_days", "partially_consumed",
    }
    data = {key: value for key, value in data.items() if key in allowed}
    data["kind"] = WorkItemKind.PRODUCTION

    rate = coerce_number(data.get("rate"), 0)
    data["rate"] = rate if rate > 0 else fabric_production_rate(fabric, machine)

    item = WorkItem.model_validate(data)

    if not item.order_reference and item.client and item.fabric:
        item = item.model_copy(update={
            "order_reference": order_reference_for(item.client, item.fabric)
        })

    return item


def append_parsed_item(
    items: list[WorkItem],
    parsed: Optional[dict[str, Any]],
    machine: Machine,
    active_day: date,
    fabric: Optional[FabricDefinition] = None,
) -> list[WorkItem]:
    """Append the assistant's candidate item; "no match" leaves the plan as it is."""
    item = item_from_parsed(parsed, machine, fabric)
    if item is None:
        logger.info("parsed_plan_no_match", machine_id=machine.id)
        return recalculate_schedule(list(items), machine, active_day)
    return append_item(items, item, machine, active_day)


def activate_item(
    machine: Machine,
    index: int,
    active_day: date,
) -> Machine:
    """
    Start a planned item on the machine.

    The item leaves the plan and becomes the machine's in-progress job:
    status Working, its client/fabric/reference and order name,
    remaining_mfg = the item's remaining quantity, and no production logged
    yet for the day. The rest of the plan is recalculated behind the new job.

    Returns:
        Updated copy of the machine (unchanged copy if index is out of range)
    """
    if not _in_range(machine.future_plans, index):
        return machine.model_copy(update={
            "future_plans": recalculate_schedule(machine.future_plans, machine, active_day)
        })

    item = machine.future_plans[index]
    reference = item.order_reference
    if not reference and item.client and item.fabric:
        reference = order_reference_for(item.client, item.fabric)

    activated = machine.model_copy(update={
        "status": MachineStatus.WORKING,
        "client": item.client,
        "fabric": item.fabric,
        "order_reference": reference,
        "order_name": item.order_name,
        "remaining_mfg": item.remaining,
        "day_production": 0,
    })
    rest = [plan for i, plan in enumerate(machine.future_plans) if i != index]

    return activated.model_copy(update={
        "future_plans": recalculate_schedule(rest, activated, active_day)
    })
