"""
Schedule recalculation engine.

Re-derives the time-phasing of a machine's future plan:

    anchor    = active_day (+ days left on the in-progress job)
    start     = anchor + changeover gap
    days      = ceil(quantity / max(rate, 1))   (SETTINGS: user-set)
    end       = start + days
    anchor    = end

The engine is a pure function of its inputs. It keeps no state between
runs, never touches the database and never mutates the list or the items
it is given; reorders and deletions are simply a new list run through it.
"""

import math
from datetime import date
from typing import Optional
import structlog

from models.machine import Machine
from models.work_item import WorkItem
from services.changeover_policy import changeover_days
from utils.calendar_utils import add_days, to_iso

logger = structlog.get_logger(__name__)


def _job_key(fabric: str, client: str) -> tuple[str, str]:
    """Identity used to decide whether two consecutive jobs are the same."""
    return (fabric or "").strip().casefold(), (client or "").strip().casefold()


def days_to_produce(quantity: float, rate: float) -> int:
    """
    Whole days needed to knit a quantity at a daily rate.

    Rates below 1 are floored to 1 so a missing rate can never divide by
    zero or produce an endless run.

    Examples:
        days_to_produce(1000, 150) → 7
        days_to_produce(40, 0)     → 40
    """
    if quantity <= 0:
        return 0
    return math.ceil(quantity / max(rate, 1))


def item_days(item: WorkItem) -> int:
    """Day count of a work item: computed for production, user-set for SETTINGS."""
    if item.is_settings:
        return item.days if item.days > 0 else 1
    return days_to_produce(item.quantity, item.rate)


def first_start_date(machine: Machine, active_day: date) -> str:
    """
    Date the first planned item can start on.

    A machine with a job in progress is busy until that job finishes at its
    current rate; an idle machine is free on the active day.
    """
    anchor = to_iso(active_day)
    if not machine.has_job_in_progress:
        return anchor
    return add_days(anchor, days_to_produce(machine.remaining_mfg, machine.schedule_rate))


def recalculate_schedule(
    items: list[WorkItem],
    machine: Machine,
    active_day: date,
) -> list[WorkItem]:
    """
    Recompute dates, day counts and remaining quantities of a plan.

    Args:
        items: Work items in the order they will run
        machine: Machine the plan belongs to (live state, construction class)
        active_day: Simulated "today" the schedule is anchored on

    Returns:
        New list of new WorkItem objects, same length and order as items
    """
    anchor = first_start_date(machine, active_day)
    gap = changeover_days(machine.construction_class)

    previous: Optional[tuple[str, str]] = None
    if machine.has_job_in_progress:
        previous = _job_key(machine.fabric, machine.client)

    after_settings = False
    updated: list[WorkItem] = []

    for item in items:
        if item.is_settings:
            changeover = 0
        else:
            key = _job_key(item.fabric, item.client)
            needs_changeover = (
                previous is not None
                and key != previous
                and not after_settings
            )
            changeover = gap if needs_changeover else 0
            previous = key

        start_date = add_days(anchor, changeover)
        days = item_days(item)
        end_date = add_days(start_date, days)

        updated.append(item.model_copy(update={
            "changeover_days": changeover,
            "start_date": start_date,
            "days": days,
            "end_date": end_date,
            "remaining": item.remaining if item.partially_consumed else item.quantity,
        }))

        anchor = end_date
        after_settings = item.is_settings

    logger.debug(
        "schedule_recalculated",
        machine_id=machine.id,
        items=len(updated),
        first_start=updated[0].start_date if updated else None,
        last_end=anchor if updated else None,
    )

    return updated


def total_planned_quantity(items: list[WorkItem]) -> float:
    """Sum of production quantities. SETTINGS rows never count."""
    return sum(item.quantity for item in items if not item.is_settings)


def plan_end_date(items: list[WorkItem]) -> Optional[str]:
    """End date of the last item of an already recalculated plan."""
    if not items:
        return None
    return items[-1].end_date or None
