"""
Fabric service for read-only lookups on the fabrics table.

Fabric records are maintained from the fabrics screen; planning only
needs to find one by name.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.fabric import FabricDefinition, SpecPair
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class FabricService:
    """
    Fabric lookups.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "fabrics"

    def find_by_name(self, name: str) -> Optional[FabricDefinition]:
        """
        Find a fabric by name, ignoring case and surrounding whitespace.

        Args:
            name: Fabric name as written on the order

        Returns:
            FabricDefinition if found, None otherwise
        """
        if not name or not name.strip():
            return None

        logger.debug("finding_fabric_by_name", name=name)

        try:
            result = self.db.table(self.table).select("*").execute()

            wanted = name.strip().lower()
            for row in result.data:
                if str(row.get("name") or "").strip().lower() == wanted:
                    logger.debug("fabric_found", fabric_id=row.get("id"), name=row.get("name"))
                    return self._row_to_fabric(row)

            logger.debug("fabric_not_found", name=name)
            return None

        except Exception as e:
            logger.error("find_fabric_failed", name=name, error=str(e))
            raise DatabaseError("select", str(e))

    def _row_to_fabric(self, row: dict) -> FabricDefinition:
        """Convert database row to FabricDefinition."""
        specs = row.get("specs") or {}
        return FabricDefinition(
            id=row.get("id"),
            name=row["name"],
            work_centers=row.get("work_centers") or [],
            specs=SpecPair(
                gauge=specs.get("gauge"),
                diameter=specs.get("diameter"),
            ),
            avg_production_per_day=row.get("avg_production_per_day"),
            machine_overrides=row.get("machine_overrides") or {},
        )


# Singleton instance
_service: Optional[FabricService] = None


def get_fabric_service() -> FabricService:
    """Get or create FabricService instance."""
    global _service
    if _service is None:
        _service = FabricService()
    return _service
