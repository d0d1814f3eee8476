"""Tests for the in-memory storage repository."""

from decimal import Decimal

import pytest
from postgrest.exceptions import APIError

from modules.storage.interfaces import IStorageRepository
from modules.storage.memory import InMemoryStorageRepository


@pytest.fixture
def repo():
    repo = InMemoryStorageRepository()
    repo.upsert_user({"id": "user-1", "email": "a@example.com"})
    repo.upsert_user({"id": "user-2", "email": "b@example.com"})
    return repo


def add_bag_type(repo, user_id="user-1"):
    return repo.insert_bag_type({
        "user_id": user_id,
        "name": "Reusable",
        "price_per_bag": Decimal("0.50"),
        "color": "green",
        "icon": "bag",
    })


def add_car(repo, user_id="user-1"):
    return repo.insert_car({"user_id": user_id, "name": "Honda", "model": None})


class TestInMemoryStorageRepository:
    def test_implements_interface(self, repo):
        assert isinstance(repo, IStorageRepository)

    def test_ids_are_unique_across_tables(self, repo):
        bag_type = add_bag_type(repo)
        car = add_car(repo)
        assert bag_type.id != car.id

    def test_upsert_user_updates_existing(self, repo):
        repo.upsert_user({"id": "user-1", "email": "a@example.com"})
        repo.update_user("user-1", {"has_completed_setup": True})

        user = repo.upsert_user({"id": "user-1", "email": "b@example.com"})

        assert user.email == "b@example.com"
        assert user.has_completed_setup is True

    def test_get_user_by_email(self, repo):
        repo.upsert_user({"id": "user-1", "email": "a@example.com"})
        assert repo.get_user_by_email("a@example.com").id == "user-1"
        assert repo.get_user_by_email("A@Example.com").id == "user-1"
        assert repo.get_user_by_email("z@example.com") is None

    def test_update_missing_user(self, repo):
        assert repo.update_user("nobody", {"has_completed_setup": True}) is None

    def test_grant_paid_access_once(self, repo):
        repo.upsert_user({"id": "user-1"})
        assert repo.grant_paid_access("user-1", "cus_1").stripe_customer_id == "cus_1"
        assert repo.grant_paid_access("user-1", "cus_2") is None
        assert repo.get_user("user-1").stripe_customer_id == "cus_1"

    def test_upsert_inventory_keeps_row_id(self, repo):
        car, bag_type = add_car(repo), add_bag_type(repo)
        first = repo.upsert_inventory({"car_id": car.id, "bag_type_id": bag_type.id, "quantity": 3})
        second = repo.upsert_inventory({"car_id": car.id, "bag_type_id": bag_type.id, "quantity": 8})

        assert first.id == second.id
        assert repo.list_inventory([car.id]) == [second]

    def test_update_inventory_quantity_missing_row_is_noop(self, repo):
        repo.update_inventory_quantity(1, 2, 5)
        assert repo.get_inventory_row(1, 2) is None

    def test_delete_bag_type_cascades_inventory(self, repo):
        car, bag_type = add_car(repo), add_bag_type(repo)
        repo.upsert_inventory({"car_id": car.id, "bag_type_id": bag_type.id, "quantity": 3})

        repo.delete_bag_type(bag_type.id)

        assert repo.get_bag_type(bag_type.id) is None
        assert repo.list_inventory([car.id]) == []

    def test_delete_car_nulls_usage_car(self, repo):
        car, bag_type = add_car(repo), add_bag_type(repo)
        usage = repo.insert_bag_usage({
            "user_id": "user-1",
            "car_id": car.id,
            "bag_type_id": bag_type.id,
            "location_id": None,
            "quantity": 1,
            "savings_amount": Decimal("0.50"),
        })

        repo.delete_car(car.id)

        assert repo.list_bag_usage("user-1", 10)[0].id == usage.id
        assert repo.list_bag_usage("user-1", 10)[0].car_id is None
        assert repo.has_bag_usage(bag_type.id) is True

    def test_usage_totals_owner_scoped(self, repo):
        bag_type = add_bag_type(repo)
        for user_id, quantity in (("user-1", 2), ("user-2", 5)):
            repo.insert_bag_usage({
                "user_id": user_id,
                "bag_type_id": bag_type.id,
                "quantity": quantity,
                "savings_amount": Decimal("0.50") * quantity,
            })

        assert repo.get_usage_totals("user-1") == (Decimal("1.00"), 2)
        assert repo.get_usage_totals("nobody") == (Decimal("0.00"), 0)

    def test_rows_for_unknown_user_rejected(self, repo):
        with pytest.raises(APIError) as exc_info:
            add_car(repo, user_id="never-signed-in")
        assert exc_info.value.code == "23503"
        assert repo.list_cars("never-signed-in") == []

    def test_family_member_requires_both_users(self, repo):
        with pytest.raises(APIError):
            repo.insert_family_member({"inviter_id": "user-1", "member_id": "ghost"})

    def test_delete_family_member(self, repo):
        member = repo.insert_family_member({"inviter_id": "user-1", "member_id": "user-2"})
        repo.delete_family_member(member.id)
        assert repo.get_family_member(member.id) is None
        assert repo.find_family_member("user-1", "user-2") is None

    def test_ping(self, repo):
        assert repo.ping() is None
