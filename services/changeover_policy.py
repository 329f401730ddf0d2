"""
Changeover policy.

Idle days a machine needs between two dissimilar jobs, by construction
class. Double-knit and jacquard machines take longer to re-thread and
re-set than single-knit ones.
"""

from models.machine import ConstructionClass

DEFAULT_CHANGEOVER_DAYS = 2

CHANGEOVER_DAYS: dict[ConstructionClass, int] = {
    ConstructionClass.SINGLE_KNIT: 2,
    ConstructionClass.DOUBLE_KNIT: 4,
    ConstructionClass.JACQUARD: 4,
}


def changeover_days(construction_class: ConstructionClass) -> int:
    """
    Get changeover duration for a construction class.

    Classes without an entry (OTHER) get DEFAULT_CHANGEOVER_DAYS.
    """
    return CHANGEOVER_DAYS.get(construction_class, DEFAULT_CHANGEOVER_DAYS)
