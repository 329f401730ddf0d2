"""
Settings service.

Holds the planning clock: the "active day" every schedule is anchored on.
It can be moved independently of the wall clock to replay or preview a
day; when nothing valid is stored, today's date is used.
"""

from datetime import date
from typing import Optional, Union
import structlog

from config import get_supabase_client
from models.settings import SettingResponse, ActiveDayResponse
from exceptions import DatabaseError, InvalidActiveDayError
from utils.calendar_utils import parse_iso_date, to_iso

logger = structlog.get_logger(__name__)

ACTIVE_DAY_KEY = "active_day"


class SettingsService:
    """
    Settings business logic.

    Handles reads and writes of key-value settings.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "settings"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_by_key(self, key: str) -> Optional[SettingResponse]:
        """
        Get setting by key.

        Returns:
            Setting, or None if it was never stored
        """
        logger.debug("getting_setting", key=key)

        try:
            response = (
                self.db.table(self.table)
                .select("*")
                .eq("key", key)
                .execute()
            )

            if not response.data:
                return None

            return SettingResponse(**response.data[0])

        except Exception as e:
            logger.error("setting_get_failed", key=key, error=str(e))
            raise DatabaseError("select", str(e))

    def get_active_day_status(self) -> ActiveDayResponse:
        """
        Get the active day and whether it comes from a stored value.

        A missing or malformed stored value falls back to today.
        """
        setting = self.get_by_key(ACTIVE_DAY_KEY)
        if setting is None:
            return ActiveDayResponse(active_day=date.today(), is_override=False)

        parsed = parse_iso_date(setting.value)
        if parsed is None:
            logger.warning("active_day_invalid", value=setting.value)
            return ActiveDayResponse(active_day=date.today(), is_override=False)

        return ActiveDayResponse(active_day=parsed, is_override=True)

    def get_active_day(self) -> date:
        """Get the date schedules are anchored on."""
        return self.get_active_day_status().active_day

    # ===================
    # UPDATE OPERATIONS
    # ===================

    def set_active_day(self, active_day: Union[str, date]) -> ActiveDayResponse:
        """
        Move the planning clock.

        Args:
            active_day: New simulated "today" (date or YYYY-MM-DD)

        Returns:
            The stored active day

        Raises:
            InvalidActiveDayError: If the value is not a calendar date
        """
        parsed = parse_iso_date(active_day)
        if parsed is None:
            raise InvalidActiveDayError(str(active_day))

        value = to_iso(parsed)
        logger.info("updating_active_day", active_day=value)

        try:
            if self.get_by_key(ACTIVE_DAY_KEY) is None:
                self.db.table(self.table).insert({
                    "key": ACTIVE_DAY_KEY,
                    "value": value,
                    "description": "Simulated 'today' used as the scheduling anchor",
                }).execute()
            else:
                (
                    self.db.table(self.table)
                    .update({"value": value})
                    .eq("key", ACTIVE_DAY_KEY)
                    .execute()
                )

        except DatabaseError:
            raise
        except Exception as e:
            logger.error("active_day_update_failed", error=str(e))
            raise DatabaseError("update", str(e))

        logger.info("active_day_updated", active_day=value)
        return ActiveDayResponse(active_day=parsed, is_override=True)


# Singleton instance
_settings_service: Optional[SettingsService] = None


def get_settings_service() -> SettingsService:
    """Get or create SettingsService instance."""
    global _settings_service
    if _settings_service is None:
        _settings_service = SettingsService()
    return _settings_service
