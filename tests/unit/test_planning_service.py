"""
Unit tests for PlanningService.

The store is mocked at the service level: save_plans/save_state echo
back what they were given.

Run: pytest tests/unit/test_planning_service.py -v
"""

import pytest
from unittest.mock import MagicMock, patch
from datetime import date

from services.planning_service import PlanningService
from models.fabric import FabricDefinition
from models.machine import MachineStatus
from models.work_item import WorkItemCreate, WorkItemKind, WorkItemUpdate
from exceptions import MachineNotFoundError, WorkItemNotFoundError
from tests.factories import MachineFactory, WorkItemFactory


# ===================
# FIXTURES
# ===================

@pytest.fixture
def machine():
    """Idle single-knit machine with two dissimilar runs planned."""
    return MachineFactory.create_model(
        id="m-1",
        name="M-01",
        machine_type="Single Jersey",
        future_plans=[
            WorkItemFactory.create(fabric="Single Jersey", client="OR", quantity=1000),
            WorkItemFactory.create(fabric="Rib", client="Zara", quantity=300),
        ],
    )


@pytest.fixture
def mock_machine_service(machine):
    """Mock MachineService returning `machine` and echoing saves."""
    with patch("services.planning_service.get_machine_service") as mock:
        service = MagicMock()
        service.get_by_id.return_value = machine
        service.get_all.return_value = [machine]
        service.save_plans.side_effect = lambda machine_id, plans: machine.model_copy(
            update={"future_plans": plans}
        )
        service.save_state.side_effect = lambda updated: updated
        mock.return_value = service
        yield service


@pytest.fixture
def mock_settings_service():
    """Mock SettingsService with the clock on 2025-03-01."""
    with patch("services.planning_service.get_settings_service") as mock:
        service = MagicMock()
        service.get_active_day.return_value = date(2025, 3, 1)
        mock.return_value = service
        yield service


@pytest.fixture
def mock_fabric_service():
    """Mock FabricService knowing only "Pique" (90 kg/day, 120 on m-1)."""
    pique = FabricDefinition(
        name="Pique",
        avg_production_per_day=90,
        machine_overrides={"m-1": 120},
    )
    with patch("services.planning_service.get_fabric_service") as mock:
        service = MagicMock()
        service.find_by_name.side_effect = (
            lambda name: pique if name.strip().lower() == "pique" else None
        )
        mock.return_value = service
        yield service


@pytest.fixture
def service(mock_machine_service, mock_fabric_service, mock_settings_service):
    return PlanningService()


# ===================
# READ
# ===================

class TestPlanningServiceRead:
    """Tests for list_machines() and get_summary()"""

    def test_list_machines(self, service, machine):
        assert service.list_machines() == [machine]

    def test_summary_recalculates_without_saving(self, service, mock_machine_service):
        # Act
        result = service.get_summary("m-1")

        # Assert
        assert result.planned_quantity == 1300
        assert result.plan_end_date == "2025-03-12"
        assert result.machine.future_plans[0].start_date == "2025-03-01"
        mock_machine_service.save_plans.assert_not_called()

    def test_unknown_machine_propagates(self, service, mock_machine_service):
        mock_machine_service.get_by_id.side_effect = MachineNotFoundError("nope")

        with pytest.raises(MachineNotFoundError):
            service.get_summary("nope")


# ===================
# EDITS
# ===================

class TestPlanningServiceEdits:
    """Tests for the plan edit operations"""

    def test_recalculate_saves_dates(self, service, mock_machine_service):
        result = service.recalculate("m-1")

        saved_id, saved_plans = mock_machine_service.save_plans.call_args.args
        assert saved_id == "m-1"
        assert [p.end_date for p in saved_plans] == ["2025-03-08", "2025-03-12"]
        assert result.future_plans == saved_plans

    def test_add_blank_production_row(self, service):
        result = service.add_item("m-1", WorkItemCreate())

        added = result.future_plans[-1]
        assert len(result.future_plans) == 3
        assert added.kind == WorkItemKind.PRODUCTION
        assert added.rate == 150
        assert added.days == 0

    def test_add_settings_row(self, service):
        result = service.add_item("m-1", WorkItemCreate(kind=WorkItemKind.SETTINGS, days=3))

        added = result.future_plans[-1]
        assert added.kind == WorkItemKind.SETTINGS
        assert added.days == 3
        assert added.start_date == "2025-03-12"
        assert added.end_date == "2025-03-15"

    def test_add_filled_row(self, service):
        result = service.add_item(
            "m-1", WorkItemCreate(fabric="Interlock", client="Mango", quantity=450)
        )

        added = result.future_plans[-1]
        assert added.fabric == "Interlock"
        assert added.rate == 150
        assert added.days == 3
        assert added.changeover_days == 2

    def test_add_row_uses_fabric_rate_on_machine(self, service, mock_fabric_service):
        result = service.add_item(
            "m-1", WorkItemCreate(fabric="Pique", client="Mango", quantity=480)
        )

        added = result.future_plans[-1]
        assert added.rate == 120
        assert added.days == 4
        mock_fabric_service.find_by_name.assert_called_once_with("Pique")

    def test_explicit_rate_skips_fabric_lookup(self, service, mock_fabric_service):
        result = service.add_item(
            "m-1", WorkItemCreate(fabric="Pique", client="Mango", quantity=480, rate=60)
        )

        assert result.future_plans[-1].rate == 60
        mock_fabric_service.find_by_name.assert_not_called()

    def test_settings_row_skips_fabric_lookup(self, service, mock_fabric_service):
        service.add_item("m-1", WorkItemCreate(kind=WorkItemKind.SETTINGS, fabric="Pique"))

        mock_fabric_service.find_by_name.assert_not_called()

    def test_add_parsed_item(self, service):
        result = service.add_parsed_item("m-1", {"fabric": "Pique", "client": "Mango", "quantity": 150})

        assert len(result.future_plans) == 3
        assert result.future_plans[-1].order_reference == "Mango-P"
        assert result.future_plans[-1].rate == 120

    def test_add_parsed_no_match(self, service):
        result = service.add_parsed_item("m-1", None)

        assert len(result.future_plans) == 2

    def test_update_item(self, service):
        result = service.update_item("m-1", 1, WorkItemUpdate(quantity=600))

        assert result.future_plans[1].quantity == 600
        assert result.future_plans[1].days == 4

    def test_delete_item(self, service):
        result = service.delete_item("m-1", 0)

        assert [p.fabric for p in result.future_plans] == ["Rib"]

    def test_move_up_and_down(self, service):
        up = service.move_item_up("m-1", 1)
        down = service.move_item_down("m-1", 0)

        assert [p.fabric for p in up.future_plans] == ["Rib", "Single Jersey"]
        assert [p.fabric for p in down.future_plans] == ["Rib", "Single Jersey"]

    def test_reorder_item(self, service):
        result = service.reorder_item("m-1", 1, 0)

        assert [p.fabric for p in result.future_plans] == ["Rib", "Single Jersey"]

    @pytest.mark.parametrize("operation,args", [
        ("update_item", (2, WorkItemUpdate(quantity=1))),
        ("delete_item", (5,)),
        ("move_item_up", (-1,)),
        ("move_item_down", (2,)),
        ("reorder_item", (0, 2)),
        ("activate_item", (9,)),
    ])
    def test_bad_index_rejected(self, service, mock_machine_service, operation, args):
        with pytest.raises(WorkItemNotFoundError) as exc:
            getattr(service, operation)("m-1", *args)

        assert exc.value.status_code == 404
        assert exc.value.details["plan_length"] == 2
        mock_machine_service.save_plans.assert_not_called()
        mock_machine_service.save_state.assert_not_called()


class TestPlanningServiceActivate:
    """Tests for activate_item()"""

    def test_activate_saves_machine_state(self, service, mock_machine_service):
        # Act
        result = service.activate_item("m-1", 0)

        # Assert
        mock_machine_service.save_state.assert_called_once()
        assert result.status == MachineStatus.WORKING
        assert result.fabric == "Single Jersey"
        assert result.remaining_mfg == 1000
        assert [p.fabric for p in result.future_plans] == ["Rib"]
        assert result.future_plans[0].start_date == "2025-03-10"
