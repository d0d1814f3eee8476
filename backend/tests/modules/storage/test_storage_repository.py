"""Tests for the Supabase storage repository."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from modules.storage.interfaces import IStorageRepository
from modules.storage.models import FamilyMemberStatus, DEFAULT_REMINDER_RADIUS
from modules.storage.repository import StorageRepository


NOW = "2026-01-15T10:30:00+00:00"


def create_mock_user_data(**overrides) -> dict:
    data = {
        "id": "user-123",
        "email": "test@example.com",
        "first_name": "Test",
        "last_name": "User",
        "profile_image_url": None,
        "has_completed_setup": False,
        "has_paid_access": False,
        "stripe_customer_id": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return data


def create_mock_bag_type_data(**overrides) -> dict:
    data = {
        "id": 1,
        "user_id": "user-123",
        "name": "Reusable",
        "price_per_bag": "0.50",
        "color": "green",
        "icon": "bag",
        "created_at": NOW,
    }
    data.update(overrides)
    return data


def create_mock_inventory_data(**overrides) -> dict:
    data = {
        "id": 5,
        "car_id": 2,
        "bag_type_id": 1,
        "quantity": 10,
        "low_stock_threshold": 2,
        "updated_at": NOW,
    }
    data.update(overrides)
    return data


def create_mock_usage_data(**overrides) -> dict:
    data = {
        "id": 9,
        "user_id": "user-123",
        "car_id": 2,
        "bag_type_id": 1,
        "location_id": None,
        "quantity": 3,
        "savings_amount": "1.50",
        "used_at": NOW,
    }
    data.update(overrides)
    return data


def create_mock_family_data(**overrides) -> dict:
    data = {
        "id": 4,
        "inviter_id": "user-123",
        "member_id": "user-456",
        "status": "pending",
        "invited_at": NOW,
        "accepted_at": None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def repo(mock_db):
    return StorageRepository(mock_db)


class TestProtocol:
    def test_implements_interface(self, repo):
        assert isinstance(repo, IStorageRepository)


class TestUsers:
    def test_get_user(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        user = repo.get_user("user-123")

        assert user.id == "user-123"
        assert user.email == "test@example.com"
        mock_db.table.assert_called_with("users")

    def test_get_user_not_found(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = []
        assert repo.get_user("missing") is None

    def test_get_user_by_email(self, repo, mock_db):
        select = mock_db.table.return_value.select
        select.return_value.eq.return_value.limit.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        user = repo.get_user_by_email("test@example.com")

        select.return_value.eq.assert_called_once_with("email", "test@example.com")
        assert user.id == "user-123"

    def test_upsert_user_conflicts_on_id(self, repo, mock_db):
        mock_db.table.return_value.upsert.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        repo.upsert_user({"id": "user-123", "email": "test@example.com"})

        args, kwargs = mock_db.table.return_value.upsert.call_args
        assert args[0]["id"] == "user-123"
        assert "updated_at" in args[0]
        assert kwargs["on_conflict"] == "id"

    def test_grant_paid_access_filters_unpaid(self, repo, mock_db):
        update = mock_db.table.return_value.update
        chain = update.return_value.eq.return_value.eq.return_value
        chain.execute.return_value.data = [
            create_mock_user_data(has_paid_access=True, stripe_customer_id="cus_1")
        ]

        user = repo.grant_paid_access("user-123", "cus_1")

        assert user.has_paid_access is True
        payload = update.call_args.args[0]
        assert payload["has_paid_access"] is True
        assert payload["stripe_customer_id"] == "cus_1"
        update.return_value.eq.assert_called_once_with("id", "user-123")
        update.return_value.eq.return_value.eq.assert_called_once_with("has_paid_access", False)

    def test_grant_paid_access_no_change(self, repo, mock_db):
        chain = mock_db.table.return_value.update.return_value.eq.return_value.eq.return_value
        chain.execute.return_value.data = []
        assert repo.grant_paid_access("user-123", "cus_2") is None


class TestBagTypes:
    def test_insert_sends_price_as_string(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value.data = [
            create_mock_bag_type_data()
        ]

        bag_type = repo.insert_bag_type({
            "user_id": "user-123",
            "name": "Reusable",
            "price_per_bag": Decimal("0.50"),
            "color": "green",
            "icon": "bag",
        })

        sent = mock_db.table.return_value.insert.call_args.args[0]
        assert sent["price_per_bag"] == "0.50"
        assert bag_type.price_per_bag == Decimal("0.50")

    def test_has_bag_usage(self, repo, mock_db):
        chain = mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value
        chain.execute.return_value.data = [{"id": 1}]
        assert repo.has_bag_usage(1) is True

        chain.execute.return_value.data = []
        assert repo.has_bag_usage(1) is False


class TestInventory:
    def test_list_inventory_empty_ids_skips_query(self, repo, mock_db):
        assert repo.list_inventory([]) == []
        mock_db.table.assert_not_called()

    def test_list_inventory_filters_cars(self, repo, mock_db):
        chain = mock_db.table.return_value.select.return_value.in_.return_value.order.return_value
        chain.execute.return_value.data = [create_mock_inventory_data(quantity=1)]

        rows = repo.list_inventory([2, 3])

        mock_db.table.return_value.select.return_value.in_.assert_called_once_with("car_id", [2, 3])
        assert rows[0].is_low_stock is True

    def test_upsert_inventory_conflict_target(self, repo, mock_db):
        mock_db.table.return_value.upsert.return_value.execute.return_value.data = [
            create_mock_inventory_data()
        ]

        repo.upsert_inventory({"car_id": 2, "bag_type_id": 1, "quantity": 10, "low_stock_threshold": 2})

        kwargs = mock_db.table.return_value.upsert.call_args.kwargs
        assert kwargs["on_conflict"] == "car_id,bag_type_id"
        mock_db.table.assert_called_with("car_bag_inventory")

    def test_update_inventory_quantity(self, repo, mock_db):
        update = mock_db.table.return_value.update

        repo.update_inventory_quantity(2, 1, 0)

        assert update.call_args.args[0]["quantity"] == 0
        update.return_value.eq.assert_called_once_with("car_id", 2)
        update.return_value.eq.return_value.eq.assert_called_once_with("bag_type_id", 1)


class TestBagUsage:
    def test_list_bag_usage_ordered_and_limited(self, repo, mock_db):
        select = mock_db.table.return_value.select
        chain = select.return_value.eq.return_value.order.return_value.limit.return_value
        chain.execute.return_value.data = [create_mock_usage_data()]

        usage = repo.list_bag_usage("user-123", 20)

        select.return_value.eq.return_value.order.assert_called_once_with("used_at", desc=True)
        select.return_value.eq.return_value.order.return_value.limit.assert_called_once_with(20)
        assert usage[0].savings_amount == Decimal("1.50")

    def test_usage_totals_aggregated_in_database(self, repo, mock_db):
        mock_db.rpc.return_value.execute.return_value.data = [
            {"total_savings": 1234.5, "total_bags": 2469}
        ]

        totals = repo.get_usage_totals("user-123")

        mock_db.rpc.assert_called_once_with("get_usage_totals", {"p_user_id": "user-123"})
        mock_db.table.assert_not_called()
        assert totals == (Decimal("1234.5"), 2469)

    def test_usage_totals_without_usage(self, repo, mock_db):
        mock_db.rpc.return_value.execute.return_value.data = [
            {"total_savings": 0, "total_bags": 0}
        ]
        assert repo.get_usage_totals("user-123") == (Decimal("0.00"), 0)

    def test_usage_totals_single_object_response(self, repo, mock_db):
        mock_db.rpc.return_value.execute.return_value.data = {"total_savings": "3.00", "total_bags": 6}
        assert repo.get_usage_totals("user-123") == (Decimal("3.00"), 6)


class TestFamily:
    def test_insert_sends_status_value(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value.data = [
            create_mock_family_data()
        ]

        member = repo.insert_family_member({
            "inviter_id": "user-123",
            "member_id": "user-456",
            "status": FamilyMemberStatus.PENDING,
        })

        assert mock_db.table.return_value.insert.call_args.args[0]["status"] == "pending"
        assert member.status == FamilyMemberStatus.PENDING

    def test_delete_family_member(self, repo, mock_db):
        repo.delete_family_member(4)

        mock_db.table.assert_called_with("family_members")
        mock_db.table.return_value.delete.return_value.eq.assert_called_once_with("id", 4)

    def test_update_serializes_timestamps(self, repo, mock_db):
        chain = mock_db.table.return_value.update.return_value.eq.return_value
        chain.execute.return_value.data = [
            create_mock_family_data(status="accepted", accepted_at=NOW)
        ]
        accepted_at = datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)

        member = repo.update_family_member(4, {
            "status": FamilyMemberStatus.ACCEPTED,
            "accepted_at": accepted_at,
        })

        sent = mock_db.table.return_value.update.call_args.args[0]
        assert sent == {"status": "accepted", "accepted_at": accepted_at.isoformat()}
        assert member.status == FamilyMemberStatus.ACCEPTED


class TestLocations:
    def test_missing_radius_uses_default(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [{
            "id": 3,
            "user_id": "user-123",
            "name": "Grocer",
            "address": "1 Main St",
            "created_at": NOW,
        }]

        location = repo.get_location(3)

        assert location.reminder_radius == DEFAULT_REMINDER_RADIUS
        assert location.is_active is True


class TestPing:
    def test_ping_queries_users(self, repo, mock_db):
        repo.ping()
        mock_db.table.assert_called_once_with("users")

    def test_ping_propagates_errors(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.limit.return_value.execute.side_effect = (
            ConnectionError("down")
        )
        with pytest.raises(ConnectionError):
            repo.ping()
