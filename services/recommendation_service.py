"""
Recommendation service: "which machine should knit this order?"

Ranks every machine in the roster against a target order:

1. History filter: machines the fabric was knitted on (+100), or machines
   of the same group as those (+50). Anything else is out. A group is the
   construction class, or the type label for unclassified machines.
2. Spec filter: gauge/diameter must fit one of the allowed pairs.
3. Availability: up to +50, losing 5 points per day until the machine's
   queue is empty.

Incompatible machines stay in the list (the planner may override) but
always sort below every compatible one.
"""

import math
from datetime import date
from typing import Optional
import structlog

from models.machine import ConstructionClass, Machine
from models.fabric import FabricDefinition, SpecPair
from models.recommendation import (
    MachineRecommendation,
    RecommendationList,
    TargetOrder,
)
from services.schedule_engine import total_planned_quantity
from services.machine_service import get_machine_service
from services.fabric_service import get_fabric_service
from services.settings_service import get_settings_service
from utils.calendar_utils import add_days, to_iso

logger = structlog.get_logger(__name__)


# Constants
PROVEN_MACHINE_SCORE = 100
GROUP_MATCH_SCORE = 50
HISTORY_MISMATCH_SCORE = -2000
SPEC_MISMATCH_SCORE = -1000
AVAILABILITY_MAX_SCORE = 50
AVAILABILITY_PENALTY_PER_DAY = 5


def _normalize_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def _spec_value_matches(wanted: Optional[str], actual: Optional[str]) -> bool:
    """Unset on either side matches anything."""
    if not wanted or not actual:
        return True
    return wanted.strip() == actual.strip()


def matches_any_spec(machine: Machine, allowed_specs: list[SpecPair]) -> bool:
    """
    Check a machine's gauge/diameter against the allowed spec pairs.

    Gauge and diameter are compared independently; the machine passes if
    any single pair fits on both.
    """
    return any(
        _spec_value_matches(spec.gauge, machine.gauge)
        and _spec_value_matches(spec.diameter, machine.diameter)
        for spec in allowed_specs
    )


def days_until_free(machine: Machine) -> int:
    """
    Days until the machine has worked through its in-progress job and plan.

    total = remaining_mfg + production quantities of future_plans
    days  = ceil(total / max(daily_rate, 1))
    """
    total_remaining = machine.remaining_mfg + total_planned_quantity(machine.future_plans)
    return math.ceil(total_remaining / max(machine.daily_rate, 1))


def availability_score(free_in_days: int) -> int:
    """
    Availability term: 50 when free now, minus 5 per day, never negative.

    Examples:
        availability_score(0)  → 50
        availability_score(3)  → 35
        availability_score(10) → 0
    """
    if free_in_days <= 0:
        return AVAILABILITY_MAX_SCORE
    penalty = min(free_in_days * AVAILABILITY_PENALTY_PER_DAY, AVAILABILITY_MAX_SCORE)
    return max(0, AVAILABILITY_MAX_SCORE - penalty)


def machine_group(machine: Machine) -> Optional[str]:
    """
    Group a machine is compared on for the history filter.

    Known construction classes group together; anything else only groups
    with machines carrying the same type label. Untyped machines have no
    group.

    Examples:
        "Single Jersey" → "single_knit"
        "MELTON"        → "type:melton"
        ""              → None
    """
    label = _normalize_name(machine.machine_type)
    if not label:
        return None
    if machine.construction_class != ConstructionClass.OTHER:
        return machine.construction_class.value
    return f"type:{label}"


def _history_groups(
    roster: list[Machine],
    history_names: set[str],
) -> set[str]:
    """Groups of the roster machines that appear in the fabric's history."""
    groups = {
        machine_group(machine)
        for machine in roster
        if _normalize_name(machine.name) in history_names
    }
    groups.discard(None)
    return groups


def score_machine(
    machine: Machine,
    target: TargetOrder,
    history_names: set[str],
    history_groups: set[str],
    active_day: date,
) -> MachineRecommendation:
    """Run the filters and the availability term for one machine."""
    score = 0
    reasons: list[str] = []
    compatible = True

    # Step 1: history filter
    if history_names:
        if _normalize_name(machine.name) in history_names:
            score += PROVEN_MACHINE_SCORE
            reasons.append(f"History: proven machine (+{PROVEN_MACHINE_SCORE})")
        elif machine_group(machine) in history_groups:
            score += GROUP_MATCH_SCORE
            reasons.append(
                f"History: same group as proven machines "
                f"({machine_group(machine)}) (+{GROUP_MATCH_SCORE})"
            )
        else:
            compatible = False
            score = HISTORY_MISMATCH_SCORE
            reasons.append(f"History: not in proven history ({HISTORY_MISMATCH_SCORE})")

    # Step 2: spec filter
    if compatible and target.allowed_specs:
        if not matches_any_spec(machine, target.allowed_specs):
            compatible = False
            score = SPEC_MISMATCH_SCORE
            reasons.append(
                f"Specs: gauge/diameter mismatch "
                f"(gauge={machine.gauge or '-'}, dia={machine.diameter or '-'}) ({SPEC_MISMATCH_SCORE})"
            )

    # Step 3: availability
    free_in_days = days_until_free(machine)
    if compatible:
        points = availability_score(free_in_days)
        score += points
        if free_in_days <= 0:
            reasons.append(f"Available now (+{points})")
        else:
            reasons.append(f"Free in {free_in_days} days (+{points})")

    return MachineRecommendation(
        machine_id=machine.id,
        machine_name=machine.name,
        score=score,
        reasons=reasons,
        compatible=compatible,
        days_until_free=free_in_days,
        free_date=add_days(to_iso(active_day), free_in_days),
    )


def recommend_machines(
    roster: list[Machine],
    target: TargetOrder,
    active_day: date,
) -> list[MachineRecommendation]:
    """
    Rank the whole roster for a target order.

    Args:
        roster: All machines, in display order
        target: Fabric with its history and allowed specs
        active_day: Simulated "today" for free-date projection

    Returns:
        One recommendation per machine, highest score first. Ties keep
        roster order.
    """
    history_names = {
        _normalize_name(name)
        for name in target.historical_machine_names
        if _normalize_name(name)
    }
    history_groups = _history_groups(roster, history_names)

    scored = [
        score_machine(machine, target, history_names, history_groups, active_day)
        for machine in roster
    ]
    scored.sort(key=lambda r: r.score, reverse=True)

    return scored


def build_target_order(
    fabric: Optional[FabricDefinition],
    roster: list[Machine],
    fabric_name: str = "",
) -> TargetOrder:
    """
    Build the target order for a fabric from its master record.

    Allowed specs are the fabric's own gauge/diameter (if any) plus the
    distinct gauge/diameter pairs of the roster machines it has been
    knitted on. An unknown fabric constrains nothing.
    """
    if fabric is None:
        return TargetOrder(fabric=fabric_name)

    history_names = {_normalize_name(name) for name in fabric.work_centers}
    allowed_specs: list[SpecPair] = []

    if fabric.specs and not fabric.specs.is_empty:
        allowed_specs.append(fabric.specs)

    for machine in roster:
        if _normalize_name(machine.name) not in history_names:
            continue
        if not machine.gauge and not machine.diameter:
            continue
        already_listed = any(
            spec.gauge == machine.gauge and spec.diameter == machine.diameter
            for spec in allowed_specs
        )
        if not already_listed:
            allowed_specs.append(SpecPair(gauge=machine.gauge, diameter=machine.diameter))

    return TargetOrder(
        fabric=fabric.name,
        historical_machine_names=list(fabric.work_centers),
        allowed_specs=allowed_specs,
    )


class RecommendationService:
    """
    Machine placement recommendations.

    Loads the roster and the active day from the store and runs the
    ranking. Nothing is written back.
    """

    def __init__(self):
        self.machine_service = get_machine_service()
        self.fabric_service = get_fabric_service()
        self.settings_service = get_settings_service()

    def recommend(
        self,
        target: TargetOrder,
        active_day: Optional[date] = None,
    ) -> RecommendationList:
        """
        Rank all machines for an explicit target order.

        Args:
            target: Fabric, history and spec constraints
            active_day: Override the stored active day

        Returns:
            RecommendationList with all machines, best first
        """
        logger.info(
            "generating_machine_recommendations",
            fabric=target.fabric,
            history_machines=len(target.historical_machine_names),
            allowed_specs=len(target.allowed_specs),
        )

        day = active_day or self.settings_service.get_active_day()
        roster = self.machine_service.get_all()

        return self._build_response(target, roster, day)

    def recommend_for_fabric(
        self,
        fabric_name: str,
        active_day: Optional[date] = None,
    ) -> RecommendationList:
        """
        Rank all machines for a fabric looked up by name.

        Unknown fabrics are ranked on availability only.
        """
        logger.info("generating_fabric_recommendations", fabric=fabric_name)

        day = active_day or self.settings_service.get_active_day()
        roster = self.machine_service.get_all()
        fabric = self.fabric_service.find_by_name(fabric_name)

        if fabric is None:
            logger.warning("fabric_definition_missing", fabric=fabric_name)

        target = build_target_order(fabric, roster, fabric_name=fabric_name)
        return self._build_response(target, roster, day)

    def _build_response(
        self,
        target: TargetOrder,
        roster: list[Machine],
        active_day: date,
    ) -> RecommendationList:
        recommendations = recommend_machines(roster, target, active_day)
        compatible_count = sum(1 for r in recommendations if r.compatible)

        logger.info(
            "recommendations_generated",
            fabric=target.fabric,
            machines=len(recommendations),
            compatible=compatible_count,
            top_machine=recommendations[0].machine_name if recommendations else None,
        )

        return RecommendationList(
            target=target,
            active_day=active_day,
            recommendations=recommendations,
            compatible_count=compatible_count,
        )


# Singleton instance
_recommendation_service: Optional[RecommendationService] = None


def get_recommendation_service() -> RecommendationService:
    """Get or create RecommendationService instance."""
    global _recommendation_service
    if _recommendation_service is None:
        _recommendation_service = RecommendationService()
    return _recommendation_service
